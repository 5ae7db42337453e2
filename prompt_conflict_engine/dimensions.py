"""
Dimensions and the live Selection.

A Selection holds one optional value per dimension plus free-text overrides
for camera, lens and shot. It is frozen: the engine never mutates it, and the
sampler returns a new one.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Iterable, Optional


class Dimension(str, Enum):
    """Axes of a prompt configuration."""
    CAMERA = "camera"
    LENS = "lens"
    SHOT = "shot"
    DOF = "dof"
    ASPECT_RATIO = "aspect_ratio"
    ATMOSPHERE = "atmosphere"
    PRESET = "preset"
    LIGHTING = "lighting"
    DIRECTOR = "director"
    LOCATION = "location"
    # Presentational, sampled but never blocked
    SUBJECT = "subject"
    COLOR_PALETTE = "color_palette"
    GAZE = "gaze"
    POSE = "pose"
    POSITION = "position"

    @classmethod
    def parse(cls, name: str) -> "Dimension":
        """Accept ``"aspect-ratio"``, ``"Aspect_Ratio"`` or ``"aspect_ratio"``."""
        key = name.strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown dimension: {name!r}") from None

    @property
    def noun(self) -> str:
        return DIMENSION_NOUNS[self]


DIMENSION_NOUNS = {
    Dimension.CAMERA: "camera",
    Dimension.LENS: "lens",
    Dimension.SHOT: "shot",
    Dimension.DOF: "depth of field",
    Dimension.ASPECT_RATIO: "aspect ratio",
    Dimension.ATMOSPHERE: "atmosphere",
    Dimension.PRESET: "visual preset",
    Dimension.LIGHTING: "lighting",
    Dimension.DIRECTOR: "director",
    Dimension.LOCATION: "location",
    Dimension.SUBJECT: "subject",
    Dimension.COLOR_PALETTE: "color palette",
    Dimension.GAZE: "gaze",
    Dimension.POSE: "pose",
    Dimension.POSITION: "position",
}

# Dimensions that can receive blocks, in the order active conflicts are reported
ENGINE_DIMENSIONS = (
    Dimension.CAMERA,
    Dimension.LENS,
    Dimension.SHOT,
    Dimension.DOF,
    Dimension.ASPECT_RATIO,
    Dimension.ATMOSPHERE,
    Dimension.PRESET,
    Dimension.LIGHTING,
    Dimension.DIRECTOR,
    Dimension.LOCATION,
)

PRESENTATIONAL_DIMENSIONS = (
    Dimension.SUBJECT,
    Dimension.COLOR_PALETTE,
    Dimension.GAZE,
    Dimension.POSE,
    Dimension.POSITION,
)

# Free-text override field per dimension
CUSTOM_FIELDS = {
    Dimension.CAMERA: "custom_camera",
    Dimension.LENS: "custom_lens",
    Dimension.SHOT: "custom_shot",
}

# Default values that never count as a conflict
NEUTRAL_VALUES = {
    Dimension.DOF: "normal",
    Dimension.ASPECT_RATIO: "none",
}


def is_neutral(dimension: Dimension, value: Optional[str]) -> bool:
    return value is not None and NEUTRAL_VALUES.get(dimension) == value


@dataclass(frozen=True)
class Selection:
    """Current value per dimension. ``None`` means unset."""
    camera: Optional[str] = None
    lens: Optional[str] = None
    shot: Optional[str] = None
    dof: Optional[str] = "normal"
    aspect_ratio: Optional[str] = "none"
    atmosphere: Optional[str] = None
    preset: Optional[str] = None
    lighting: Optional[str] = None
    director: Optional[str] = None
    location: Optional[str] = None
    subject: Optional[str] = None
    color_palette: Optional[str] = None
    gaze: Optional[str] = None
    pose: Optional[str] = None
    position: Optional[str] = None
    custom_camera: Optional[str] = None
    custom_lens: Optional[str] = None
    custom_shot: Optional[str] = None

    @classmethod
    def default(cls) -> "Selection":
        return cls()

    @classmethod
    def empty(cls) -> "Selection":
        """A selection with every field unset, neutral defaults included."""
        return cls(dof=None, aspect_ratio=None)

    def get(self, dimension: Dimension) -> Optional[str]:
        return getattr(self, Dimension(dimension).value)

    def custom(self, dimension: Dimension) -> Optional[str]:
        field_name = CUSTOM_FIELDS.get(Dimension(dimension))
        if field_name is None:
            return None
        return getattr(self, field_name) or None

    def effective(self, dimension: Dimension) -> Optional[str]:
        """Value that reaches the prompt: a custom override wins."""
        return self.custom(dimension) or self.get(dimension)

    def has_custom(self, dimension: Dimension) -> bool:
        return self.custom(dimension) is not None

    def with_value(self, dimension: Dimension, value: Optional[str]) -> "Selection":
        return replace(self, **{Dimension(dimension).value: value})

    def with_values(self, values: dict) -> "Selection":
        changes = {Dimension(k).value: v for k, v in values.items()}
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


# ---------------------------------------------------------------------------
# Lock sections
# ---------------------------------------------------------------------------
# The wizard locks whole sections; each section maps to the dimensions the
# sampler must leave untouched.

LOCK_SECTIONS = {
    "subject": (Dimension.SUBJECT,),
    "location": (Dimension.LOCATION,),
    "director": (Dimension.DIRECTOR,),
    "camera": (Dimension.CAMERA, Dimension.LENS, Dimension.SHOT, Dimension.ASPECT_RATIO),
    "atmosphere": (Dimension.ATMOSPHERE,),
    "visual": (Dimension.PRESET,),
    "lighting": (Dimension.LIGHTING,),
    "color": (Dimension.COLOR_PALETTE,),
    "advanced": (Dimension.DOF,),
    "gaze": (Dimension.GAZE,),
    "pose": (Dimension.POSE,),
    "position": (Dimension.POSITION,),
}


def expand_lock_sections(names: Iterable[str]) -> frozenset:
    """Turn section names (or bare dimension names) into a set of dimensions."""
    locked = set()
    for name in names:
        key = name.strip().lower()
        if key in LOCK_SECTIONS:
            locked.update(LOCK_SECTIONS[key])
            continue
        try:
            locked.add(Dimension.parse(key))
        except ValueError:
            raise ValueError(
                f"Unknown lock section: {name!r} "
                f"(expected one of {', '.join(sorted(LOCK_SECTIONS))})"
            ) from None
    return frozenset(locked)
