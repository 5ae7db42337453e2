"""
Style-stacking analysis.

Two advisory checks that never block anything:

* ``analyze_style_stacking`` tallies the abstract style categories implied by
  director, atmosphere, visual preset and lighting, and flags categories that
  more than one of them asserts.
* ``detect_effect_stacking`` matches concrete value combinations that double
  up one effect (two sources of blur, an atmosphere that already implies the
  chosen lighting, and so on).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from . import config
from .dimensions import Dimension, Selection
from .options import display_name
from .rules import (
    DIRECTOR_ATMOSPHERE_REDUNDANCY,
    DIRECTOR_LIGHTING_REDUNDANCY,
    DIRECTOR_PRESET_REDUNDANCY,
    REDUNDANCY_WARNINGS,
)

STYLE_CATEGORIES = ("realism", "film", "color", "contrast", "era", "medium", "mood")

# ---------------------------------------------------------------------------
# Implied style categories per value
# ---------------------------------------------------------------------------

DIRECTOR_IMPLIED_STYLES = {
    "Wes Anderson": ("color", "film"),
    "Christopher Nolan": ("realism", "film", "contrast"),
    "Denis Villeneuve": ("realism", "mood", "contrast"),
    "Ridley Scott": ("realism", "mood", "contrast"),
    "David Fincher": ("color", "mood", "contrast"),
    "Stanley Kubrick": ("film", "contrast"),
    "Wong Kar-wai": ("color", "mood", "film"),
    "Terrence Malick": ("realism", "mood"),
    "David Lynch": ("mood", "contrast"),
    "Quentin Tarantino": ("film", "color"),
    "Akira Kurosawa": ("film", "contrast"),
    "Tim Burton": ("mood", "color"),
    "Coen Brothers": ("film", "color"),
    "Park Chan-wook": ("color", "contrast"),
    "Andrei Tarkovsky": ("film", "mood"),
}

ATMOSPHERE_IMPLIED_STYLES = {
    "cinematic": ("film", "mood"),
    "cyberpunk": ("color", "contrast", "mood"),
    "studio": ("realism", "contrast"),
    "moody": ("mood", "contrast"),
    "dreamy": ("mood", "color"),
    "natural": ("realism",),
    "vintage": ("era", "film", "color"),
    "epic": ("film", "mood"),
    "horror": ("mood", "contrast"),
    "romantic": ("mood", "color"),
}

PRESET_IMPLIED_STYLES = {
    "raw": ("realism",),
    "highcontrast": ("contrast",),
    "desaturated": ("color",),
    "vivid": ("color",),
    "filmlook": ("film", "era"),
    "bleachbypass": ("color", "contrast", "film"),
}

LIGHTING_IMPLIED_STYLES = {
    "chiaroscuro": ("contrast", "mood"),
    "highkey": ("contrast",),
    "lowkey": ("contrast", "mood"),
    "neon": ("color", "mood"),
    "goldenhour": ("color",),
    "moonlit": ("mood", "color"),
}

_IMPLIED_STYLES = {
    Dimension.DIRECTOR: DIRECTOR_IMPLIED_STYLES,
    Dimension.ATMOSPHERE: ATMOSPHERE_IMPLIED_STYLES,
    Dimension.PRESET: PRESET_IMPLIED_STYLES,
    Dimension.LIGHTING: LIGHTING_IMPLIED_STYLES,
}


def implied_styles(dimension: Dimension, value: Optional[str]) -> tuple:
    """Style categories *value* asserts; empty for unknown values."""
    if not value:
        return ()
    return _IMPLIED_STYLES.get(Dimension(dimension), {}).get(value, ())


@dataclass(frozen=True)
class StyleStackingAnalysis:
    category_counts: Mapping
    overloaded_categories: tuple
    total_assertions: int
    has_style_overload: bool
    warning_message: Optional[str]
    contributors: Mapping = field(default_factory=lambda: MappingProxyType({}))


def analyze_style_stacking(
    director: Optional[str] = None,
    atmosphere: Optional[str] = None,
    preset: Optional[str] = None,
    lighting: Optional[str] = None,
    *,
    threshold: Optional[int] = None,
) -> StyleStackingAnalysis:
    """Tally implied style categories across the four look dimensions.

    Parameters
    ----------
    director, atmosphere, preset, lighting : str, optional
        Current values; ``None`` or unknown values contribute nothing.
    threshold : int, optional
        Independent dimensions that must assert a category before it is
        overloaded. Defaults to ``config.STYLE_OVERLOAD_THRESHOLD``.

    Returns
    -------
    StyleStackingAnalysis
        ``warning_message`` is set only when at least one category is
        overloaded, and names those categories.
    """
    if threshold is None:
        threshold = config.STYLE_OVERLOAD_THRESHOLD

    counts = {category: 0 for category in STYLE_CATEGORIES}
    contributors: dict = {}
    for dimension, value in (
        (Dimension.DIRECTOR, director),
        (Dimension.ATMOSPHERE, atmosphere),
        (Dimension.PRESET, preset),
        (Dimension.LIGHTING, lighting),
    ):
        for category in implied_styles(dimension, value):
            counts[category] = counts.get(category, 0) + 1
            contributors.setdefault(category, []).append(display_name(dimension, value))

    overloaded = tuple(c for c, n in counts.items() if n >= threshold)
    total = sum(counts.values())

    warning = None
    if overloaded:
        names = ", ".join(c.capitalize() for c in overloaded)
        warning = f"Style stacking detected: {names} asserted by multiple selections"

    return StyleStackingAnalysis(
        category_counts=MappingProxyType(counts),
        overloaded_categories=overloaded,
        total_assertions=total,
        has_style_overload=bool(overloaded),
        warning_message=warning,
        contributors=MappingProxyType({c: tuple(names) for c, names in contributors.items()}),
    )


def reducing_options(
    analysis: StyleStackingAnalysis,
    director: Optional[str] = None,
    atmosphere: Optional[str] = None,
    preset: Optional[str] = None,
    lighting: Optional[str] = None,
) -> dict:
    """Values that also feed the overloaded categories and are best avoided."""
    current = {
        Dimension.DIRECTOR: director,
        Dimension.ATMOSPHERE: atmosphere,
        Dimension.PRESET: preset,
        Dimension.LIGHTING: lighting,
    }
    avoid = {dim: [] for dim in current}
    for category in analysis.overloaded_categories:
        for dim, table in _IMPLIED_STYLES.items():
            for value, categories in table.items():
                if category in categories and value != current[dim] and value not in avoid[dim]:
                    avoid[dim].append(value)
    return avoid


# ---------------------------------------------------------------------------
# Effect stacking
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StackingWarning:
    """Several selections assert the same effect."""
    category: str
    message: str
    terms: tuple
    severity: str = "mild"


HIGH_RESOLUTION_CAMERAS = (
    "RED V-Raptor", "ARRI Alexa 65", "Phase One XF", "Hasselblad X2D", "Sony A1", "Nikon D850",
)

# Each rule fires when every listed dimension holds one of its values.
EFFECT_STACKING_RULES = [
    # Blur
    {
        "category": "blur",
        "when": {Dimension.ATMOSPHERE: ("dreamy",), Dimension.DOF: ("shallow",)},
        "severity": "mild",
        "message": "Dreamy atmosphere already softens the image; shallow focus doubles the blur",
    },
    {
        "category": "blur",
        "when": {Dimension.ATMOSPHERE: ("dreamy",), Dimension.DOF: ("tilt-shift",)},
        "severity": "strong",
        "message": "Dreamy haze plus tilt-shift falloff leaves almost nothing in focus",
    },
    {
        "category": "blur",
        "when": {Dimension.LENS: ("Macro",), Dimension.DOF: ("shallow",)},
        "severity": "mild",
        "message": "Macro lenses already have razor-thin focus; shallow depth of field adds nothing",
    },
    # Quality
    {
        "category": "quality",
        "when": {Dimension.CAMERA: HIGH_RESOLUTION_CAMERAS, Dimension.DOF: ("deep",)},
        "severity": "mild",
        "message": "High-resolution capture already implies crisp detail; deep focus stacks sharpness terms",
    },
]


def _mood_rules() -> list:
    """Redundancy rules derived from the atmosphere and director tables."""
    rules = []
    for key, message in REDUNDANCY_WARNINGS.items():
        first, second = key.split("+")
        if first == "vivid":
            continue
        rules.append({
            "category": "mood",
            "when": {Dimension.ATMOSPHERE: (first,), Dimension.LIGHTING: (second,)},
            "severity": "mild",
            "message": message,
        })
    for table, target, noun in (
        (DIRECTOR_LIGHTING_REDUNDANCY, Dimension.LIGHTING, "lighting"),
        (DIRECTOR_PRESET_REDUNDANCY, Dimension.PRESET, "grade"),
        (DIRECTOR_ATMOSPHERE_REDUNDANCY, Dimension.ATMOSPHERE, "atmosphere"),
    ):
        for director, values in table.items():
            for value in values:
                rules.append({
                    "category": "mood",
                    "when": {Dimension.DIRECTOR: (director,), target: (value,)},
                    "severity": "mild",
                    "message": f"{director}'s style already includes "
                               f"{display_name(target, value)} {noun}",
                })
    return rules


EFFECT_STACKING_RULES.extend(_mood_rules())


def detect_effect_stacking(selection: Selection, rules: Optional[list] = None) -> list:
    """Return a ``StackingWarning`` for every rule the selection satisfies."""
    if rules is None:
        rules = EFFECT_STACKING_RULES
    warnings = []
    for rule in rules:
        terms = []
        for dimension, values in rule["when"].items():
            value = selection.get(dimension)
            if selection.has_custom(dimension) or value not in values:
                break
            terms.append(display_name(dimension, value))
        else:
            warnings.append(StackingWarning(
                category=rule["category"],
                message=rule["message"],
                terms=tuple(terms),
                severity=rule["severity"],
            ))
    return warnings


def style_warning(analysis: StyleStackingAnalysis) -> Optional[StackingWarning]:
    """The analysis as a stacking warning, or ``None`` when nothing is overloaded."""
    if not analysis.has_style_overload:
        return None
    terms = []
    for category in analysis.overloaded_categories:
        for name in analysis.contributors.get(category, ()):
            if name not in terms:
                terms.append(name)
    strongest = max(analysis.category_counts[c] for c in analysis.overloaded_categories)
    return StackingWarning(
        category="style",
        message=analysis.warning_message,
        terms=tuple(terms),
        severity="strong" if strongest >= 3 else "mild",
    )
