"""
Rule Store: declarative compatibility tables and edge lookup.

Every table below is plain data keyed by a dimension value (or by a category
shared by many values). ``RuleStore.lookup`` turns the tables into outgoing
``ConstraintEdge`` objects for one value. Reverse rules (atmosphere blocks a
camera category, location blocks a camera category) are authored as their own
tables rather than inferred from the forward direction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .dimensions import Dimension, NEUTRAL_VALUES
from .options import (
    ASPECT_RATIO_OPTIONS,
    ATMOSPHERE_OPTIONS,
    LIGHTING_OPTIONS,
    PRESET_OPTIONS,
    display_name,
    domain,
    in_domain,
)

HARD = "hard"
SOFT = "soft"

# ---------------------------------------------------------------------------
# Camera categories
# ---------------------------------------------------------------------------
# Unknown cameras fall into "none", which has no rules.

CAMERA_CATEGORIES = {
    # Vintage lo-fi: inherently low quality, no depth of field control
    "VHS Camcorder": "vintage-lofi",
    "Betacam": "vintage-lofi",
    "Hi8": "vintage-lofi",
    "MiniDV": "vintage-lofi",
    "Handycam": "vintage-lofi",
    "8mm Film": "vintage-lofi",
    "Super 8": "vintage-lofi",
    "Disposable Camera": "vintage-lofi",
    "Pinhole Camera": "vintage-lofi",
    # Antique plates, 1840s to early 1900s
    "Daguerreotype": "antique",
    "Wet Plate": "antique",
    "Tintype": "antique",
    # Classic film
    "16mm Film": "classic-film",
    "Super 16": "classic-film",
    "35mm Film": "classic-film",
    "Bolex H16": "classic-film",
    "Arriflex 16SR": "classic-film",
    "Arriflex 35": "classic-film",
    "Mitchell BNC": "classic-film",
    # Large format cinema
    "65mm Film": "epic-film",
    "70mm IMAX": "epic-film",
    "Panavision Panaflex": "epic-film",
    # Medium format classic
    "Hasselblad 500C": "medium-format-classic",
    "Mamiya RZ67": "medium-format-classic",
    "Rolleiflex": "medium-format-classic",
    # 35mm classic
    "Leica M6": "35mm-classic",
    "Contax T2": "35mm-classic",
    "Polaroid SX-70": "35mm-classic",
    # Modern cinema
    "ARRI Alexa": "modern-cinema",
    "ARRI Alexa Mini": "modern-cinema",
    "ARRI Alexa 65": "modern-cinema",
    "RED Komodo": "modern-cinema",
    "RED V-Raptor": "modern-cinema",
    "Sony Venice": "modern-cinema",
    "Sony FX9": "modern-cinema",
    "Blackmagic URSA": "modern-cinema",
    "Canon C500": "modern-cinema",
    "Canon C70": "modern-cinema",
    "Panavision DXL2": "modern-cinema",
    # Modern digital stills
    "Hasselblad X2D": "modern-digital",
    "Leica M11": "modern-digital",
    "Phase One XF": "modern-digital",
    "Canon 5D Mark IV": "modern-digital",
    "Canon R5": "modern-digital",
    "Nikon D850": "modern-digital",
    "Nikon Z9": "modern-digital",
    "Sony A7S III": "modern-digital",
    "Sony A1": "modern-digital",
    # Consumer / mobile
    "GoPro": "consumer-mobile",
    "DJI Drone": "consumer-mobile",
    "iPhone Pro": "consumer-mobile",
}

CAMERA_CATEGORY_LABELS = {
    "vintage-lofi": "vintage lo-fi",
    "antique": "antique",
    "classic-film": "classic film",
    "epic-film": "large format film",
    "medium-format-classic": "classic medium format",
    "35mm-classic": "classic 35mm",
    "modern-cinema": "modern cinema",
    "modern-digital": "modern digital",
    "consumer-mobile": "consumer",
    "none": "uncategorized",
}

# Blocks asserted by every camera of a category. Missing categories have no rules.
CATEGORY_CONFLICTS = {
    "vintage-lofi": {
        "atmospheres": ("studio", "cyberpunk"),
        "presets": ("vivid", "highcontrast"),
        "dof": ("shallow", "tilt-shift"),
        "fixed_lens": "fixed zoom lens",
        "reason": "can't deliver a polished or optically controlled look",
        "warning": "Lo-fi cameras have limited quality and fixed lenses",
    },
    "antique": {
        "atmospheres": ("studio", "cyberpunk", "dreamy"),
        "presets": ("vivid", "highcontrast"),
        "dof": ("shallow", "tilt-shift"),
        "fixed_lens": "period-appropriate lens",
        "reason": "predate modern looks and optics",
        "warning": "Antique cameras have fixed optics and monochrome output",
    },
    "consumer-mobile": {
        "atmospheres": (),
        "presets": (),
        "dof": ("tilt-shift",),
        "fixed_lens": "built-in wide lens",
        "reason": "have built-in optics that can't tilt or shift",
        "warning": "Consumer cameras have fixed wide-angle lenses",
    },
}

# Single cameras excused from part of their category's blocks. Betacam was a
# broadcast studio workhorse, so studio setups and punchy contrast still fit.
CAMERA_RULE_EXEMPTIONS = {
    "Betacam": {
        Dimension.ATMOSPHERE: ("studio",),
        Dimension.PRESET: ("highcontrast",),
    },
}

CAMERA_FIXED_LENS = {
    "GoPro": "ultra-wide 16mm equivalent",
    "iPhone Pro": "built-in multi-lens system",
    "DJI Drone": "wide-angle aerial lens",
    "Disposable Camera": "fixed 30mm plastic lens",
    "Pinhole Camera": "pinhole aperture (no lens)",
    "Polaroid SX-70": "fixed 116mm lens",
    "Contax T2": "Zeiss Sonnar 38mm f/2.8",
    "Daguerreotype": "Petzval-style brass lens",
    "Wet Plate": "large format brass lens",
    "Tintype": "period brass lens",
    "Rolleiflex": "Zeiss Planar 80mm f/2.8",
}


@dataclass(frozen=True)
class ZoomRange:
    """Built-in zoom with its selectable focal positions."""
    range: str
    options: tuple


CAMERA_ZOOM_RANGE = {
    "VHS Camcorder": ZoomRange(
        "8-80mm (48-480mm equiv)",
        ("8mm (Wide)", "24mm", "40mm", "60mm", "80mm (Tele)"),
    ),
    "Handycam": ZoomRange(
        "3.6-36mm (40-400mm equiv)",
        ("3.6mm (Wide)", "10mm", "20mm", "36mm (Tele)"),
    ),
    "Hi8": ZoomRange(
        "5.4-54mm (42-420mm equiv)",
        ("5.4mm (Wide)", "15mm", "30mm", "54mm (Tele)"),
    ),
    "Betacam": ZoomRange(
        "8.5-119mm broadcast zoom",
        ("8.5mm (Wide)", "25mm", "50mm", "85mm", "119mm (Tele)"),
    ),
    "MiniDV": ZoomRange(
        "5.9-59mm f/1.6 (41-410mm equiv)",
        ("5.9mm (Wide)", "15mm", "30mm", "45mm", "59mm (Tele)"),
    ),
}

CAMERA_ASPECT_RATIOS = {
    # Vintage video, mostly 4:3
    "VHS Camcorder": ("4:3",),
    "Betacam": ("4:3", "16:9"),
    "Hi8": ("4:3",),
    "MiniDV": ("4:3", "16:9"),
    "Handycam": ("4:3", "16:9"),
    # Film formats
    "8mm Film": ("4:3", "1.33:1"),
    "Super 8": ("4:3",),
    "16mm Film": ("4:3", "1.66:1"),
    "Super 16": ("1.66:1", "1.85:1"),
    "35mm Film": ("4:3", "16:9", "21:9", "2.39:1"),
    "65mm Film": ("2.2:1", "2.76:1"),
    "70mm IMAX": ("1.43:1", "1.9:1"),
    # Square instant and medium format
    "Polaroid SX-70": ("1:1",),
    "Hasselblad 500C": ("1:1",),
    "Rolleiflex": ("1:1",),
    "Mamiya RZ67": ("4:5", "1:1"),
    # Antique plates
    "Daguerreotype": ("4:5", "3:4", "1:1"),
    "Tintype": ("4:5", "3:4", "1:1"),
    "Wet Plate": ("4:5", "3:4", "1:1"),
}

# Camera category -> location categories it can't depict
CAMERA_LOCATION_CONFLICTS = {
    "antique": ("fantasy",),
}

# Location category -> camera categories, authored separately from the above
LOCATION_CAMERA_CONFLICTS = {
    "fantasy": ("antique",),
}

# ---------------------------------------------------------------------------
# Lens categories
# ---------------------------------------------------------------------------

LENS_CATEGORIES = {
    "Macro": "special",
    "Fisheye": "special",
    "14mm": "ultra-wide",
    "18mm": "ultra-wide",
    "24mm": "wide",
    "28mm": "wide",
    "35mm": "standard",
    "50mm": "standard",
    "85mm": "portrait",
    "135mm": "portrait",
    "200mm": "telephoto",
    "400mm": "super-telephoto",
    "600mm": "super-telephoto",
}

# ---------------------------------------------------------------------------
# Atmosphere rules
# ---------------------------------------------------------------------------

ATMOSPHERE_BLOCKS_CATEGORIES = {
    "studio": ("vintage-lofi", "antique"),
    "cyberpunk": ("antique",),
}

ATMOSPHERE_BLOCKS_DOF = {
    "dreamy": ("shallow",),
}

ATMOSPHERE_LIGHTING_REDUNDANCY = {
    "cyberpunk": ("neon",),
    "moody": ("lowkey", "chiaroscuro"),
    "studio": ("softbox", "highkey"),
}

ATMOSPHERE_SHOT_CONFLICTS = {
    "epic": ("Extreme Close-Up (ECU)",),
}

# Atmosphere -> location eras it doesn't fit
ATMOSPHERE_ERA_CONFLICTS = {
    "vintage": ("futuristic",),
    "cyberpunk": ("historical",),
}

# ---------------------------------------------------------------------------
# Visual preset rules
# ---------------------------------------------------------------------------

PRESET_MUTUAL_EXCLUSIONS = {
    "vivid": ("desaturated",),
    "desaturated": ("vivid",),
    "raw": ("filmlook", "bleachbypass"),
    "filmlook": ("raw",),
    "bleachbypass": ("raw",),
}

PRESET_BLOCKS_CATEGORIES = {
    "vivid": ("vintage-lofi", "antique"),
    "highcontrast": ("vintage-lofi", "antique"),
}

REDUNDANCY_WARNINGS = {
    "cyberpunk+neon": "Cyberpunk atmosphere already includes neon aesthetic",
    "moody+lowkey": "Moody atmosphere already implies dark, low-key lighting",
    "moody+chiaroscuro": "Moody atmosphere already implies dramatic shadows",
    "studio+softbox": "Studio atmosphere already includes softbox lighting",
    "studio+highkey": "Studio atmosphere already implies bright, even lighting",
    "vivid+desaturated": "Vivid and Desaturated are opposite styles",
}

# ---------------------------------------------------------------------------
# Director rules
# ---------------------------------------------------------------------------

_CONSUMER_VIDEO = ("VHS Camcorder", "Hi8", "Handycam", "Betacam")
_SMARTPHONES = ("iPhone Pro", "GoPro", "DJI Drone")
_ANTIQUE_PHOTO = ("Daguerreotype", "Tintype", "Wet Plate", "Pinhole Camera")
_DISPOSABLE = ("Disposable Camera", "Polaroid SX-70")
_MODERN_DIGITAL = ("RED V-Raptor", "RED Komodo", "Sony A7S III", "Sony A1", "Canon R5", "Nikon Z9")

DIRECTOR_RULES = {
    "Wes Anderson": {
        "atmospheres": ("cyberpunk", "moody"),
        "presets": ("highcontrast", "bleachbypass"),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + _ANTIQUE_PHOTO + ("MiniDV",),
    },
    "Quentin Tarantino": {
        "atmospheres": ("dreamy", "studio"),
        "presets": ("desaturated",),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + _ANTIQUE_PHOTO + ("MiniDV",),
    },
    "Stanley Kubrick": {
        "atmospheres": ("dreamy",),
        "presets": ("vivid",),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + ("MiniDV",),
    },
    "David Lynch": {
        "atmospheres": ("natural", "studio"),
        "presets": ("vivid", "raw"),
        # MiniDV stays available: Inland Empire was shot on it
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES,
    },
    "Christopher Nolan": {
        "atmospheres": ("dreamy", "vintage"),
        "presets": ("desaturated",),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + _DISPOSABLE + ("MiniDV", "Super 8", "8mm Film"),
    },
    "Denis Villeneuve": {
        "atmospheres": ("cyberpunk", "vintage"),
        "presets": ("vivid",),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + _DISPOSABLE + _ANTIQUE_PHOTO + ("MiniDV",),
    },
    "Ridley Scott": {
        "atmospheres": ("dreamy",),
        "presets": (),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + _DISPOSABLE + ("MiniDV",),
    },
    "Wong Kar-wai": {
        "atmospheres": ("natural", "studio"),
        "presets": ("raw", "desaturated"),
        "cameras": _CONSUMER_VIDEO + _ANTIQUE_PHOTO + _SMARTPHONES + ("MiniDV",),
    },
    "Terrence Malick": {
        "atmospheres": ("cyberpunk", "studio", "moody"),
        "presets": ("highcontrast", "bleachbypass"),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + _ANTIQUE_PHOTO + ("MiniDV",),
    },
    "Akira Kurosawa": {
        "atmospheres": ("studio", "cyberpunk"),
        "presets": (),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + _DISPOSABLE + ("MiniDV",) + _MODERN_DIGITAL,
    },
    "Tim Burton": {
        "atmospheres": ("natural", "studio"),
        "presets": ("vivid", "raw"),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + ("MiniDV",),
    },
    "David Fincher": {
        "atmospheres": ("dreamy", "natural"),
        "presets": ("vivid", "raw"),
        "cameras": (
            _CONSUMER_VIDEO + _SMARTPHONES + _DISPOSABLE + _ANTIQUE_PHOTO
            + ("MiniDV", "Super 8", "8mm Film")
        ),
    },
    "Coen Brothers": {
        "atmospheres": ("dreamy", "cyberpunk"),
        "presets": (),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + ("MiniDV",),
    },
    "Park Chan-wook": {
        "atmospheres": ("dreamy", "natural"),
        "presets": ("raw", "desaturated"),
        "cameras": _CONSUMER_VIDEO + _SMARTPHONES + _ANTIQUE_PHOTO + ("MiniDV",),
    },
    "Andrei Tarkovsky": {
        "atmospheres": ("cyberpunk", "studio"),
        "presets": ("vivid", "highcontrast"),
        "cameras": (
            _CONSUMER_VIDEO + _SMARTPHONES + _DISPOSABLE + ("MiniDV", "ARRI Alexa 65")
            + _MODERN_DIGITAL
        ),
    },
}

# Lens categories that contradict a director's signature framing
DIRECTOR_BLOCKED_LENS = {
    "Stanley Kubrick": ("telephoto", "super-telephoto"),
    "Akira Kurosawa": ("ultra-wide", "special"),
    "Denis Villeneuve": ("super-telephoto",),
}

DIRECTOR_PREFERRED_LENS = {
    "Stanley Kubrick": ("ultra-wide", "wide"),
    "Akira Kurosawa": ("telephoto", "super-telephoto", "portrait"),
    "Denis Villeneuve": ("ultra-wide", "wide", "standard"),
    "Christopher Nolan": ("ultra-wide", "wide", "standard"),
    "Wong Kar-wai": ("standard", "portrait", "wide"),
    "Terrence Malick": ("wide", "standard", "portrait"),
    "David Fincher": ("standard", "portrait", "wide"),
}

# Selections a director's style already implies (advisory only)
DIRECTOR_LIGHTING_REDUNDANCY = {
    "Wong Kar-wai": ("neon", "goldenhour"),
    "Terrence Malick": ("goldenhour",),
}

DIRECTOR_PRESET_REDUNDANCY = {
    "David Fincher": ("desaturated",),
}

DIRECTOR_ATMOSPHERE_REDUNDANCY = {
    "David Lynch": ("moody",),
}

# ---------------------------------------------------------------------------
# Location rules
# ---------------------------------------------------------------------------

LOCATION_CATEGORIES = {
    "City Street": "urban",
    "Neon-lit Alley": "urban",
    "Rooftop": "urban",
    "Subway Station": "urban",
    "Parking Lot": "urban",
    "Forest": "nature",
    "Desert": "nature",
    "Beach": "nature",
    "Mountain Peak": "nature",
    "Cornfield": "nature",
    "Waterfall": "nature",
    "Snowy Tundra": "nature",
    "Abandoned Warehouse": "interior",
    "Luxury Penthouse": "interior",
    "Old Library": "interior",
    "Neon Bar": "interior",
    "Cathedral": "interior",
    "Office": "interior",
    "Enchanted Forest": "fantasy",
    "Floating Islands": "fantasy",
    "Ancient Ruins": "fantasy",
    "Crystal Cave": "fantasy",
    "Factory Floor": "industrial",
    "Cyberpunk City": "industrial",
    "Space Station": "industrial",
    "Underground Bunker": "industrial",
}


@dataclass(frozen=True)
class LocationMeta:
    """Physical traits of a location. ``setting`` is indoor, outdoor or either."""
    setting: str = "either"
    scale: str = "medium"
    era: str = "any"
    blocked_atmospheres: tuple = ()


NEUTRAL_LOCATION_META = LocationMeta()

LOCATION_META = {
    # Urban
    "City Street": LocationMeta("outdoor", "medium", "modern"),
    "Neon-lit Alley": LocationMeta("outdoor", "intimate", "modern"),
    "Rooftop": LocationMeta("outdoor", "vast", "modern"),
    "Subway Station": LocationMeta("indoor", "medium", "modern"),
    "Parking Lot": LocationMeta("outdoor", "medium", "modern"),
    # Nature
    "Forest": LocationMeta("outdoor", "vast", "any"),
    "Desert": LocationMeta("outdoor", "vast", "any"),
    "Beach": LocationMeta("outdoor", "vast", "any"),
    "Mountain Peak": LocationMeta("outdoor", "vast", "any"),
    "Cornfield": LocationMeta("outdoor", "vast", "any"),
    "Waterfall": LocationMeta("outdoor", "medium", "any"),
    "Snowy Tundra": LocationMeta("outdoor", "vast", "any"),
    # Interior
    "Abandoned Warehouse": LocationMeta("indoor", "vast", "modern"),
    "Luxury Penthouse": LocationMeta("indoor", "medium", "modern"),
    "Old Library": LocationMeta("indoor", "medium", "historical"),
    "Neon Bar": LocationMeta("indoor", "intimate", "modern"),
    "Cathedral": LocationMeta("indoor", "vast", "historical"),
    "Office": LocationMeta("indoor", "medium", "modern"),
    # Fantasy
    "Enchanted Forest": LocationMeta("outdoor", "vast", "any"),
    "Floating Islands": LocationMeta("outdoor", "vast", "any"),
    "Ancient Ruins": LocationMeta("either", "vast", "historical"),
    "Crystal Cave": LocationMeta("indoor", "medium", "any"),
    # Industrial
    "Factory Floor": LocationMeta("indoor", "vast", "modern"),
    "Cyberpunk City": LocationMeta("outdoor", "vast", "futuristic", blocked_atmospheres=("vintage",)),
    "Space Station": LocationMeta("indoor", "medium", "futuristic"),
    "Underground Bunker": LocationMeta("indoor", "intimate", "modern"),
}

# Lighting -> settings where it can't happen
LIGHTING_LOCATION_CONFLICTS = {
    "goldenhour": ("indoor",),
    "bluehour": ("indoor",),
    "moonlit": ("indoor",),
    "softbox": ("outdoor",),
}

# Shot -> location scales too small for it
SHOT_SCALE_CONFLICTS = {
    "Extreme Wide Shot (XWS)": ("intimate",),
}

# ---------------------------------------------------------------------------
# Camera grammar
# ---------------------------------------------------------------------------

SHOT_LENS_CONFLICTS = {
    "Over the Shoulder (OTS)": ("ultra-wide", "super-telephoto", "special"),
    "Extreme Wide Shot (XWS)": ("telephoto", "super-telephoto", "portrait"),
    "Wide Shot (WS)": ("super-telephoto",),
    "Close-Up (CU)": ("ultra-wide",),
    "Extreme Close-Up (ECU)": ("ultra-wide", "super-telephoto"),
}

SHOT_DOF_CONFLICTS = {
    "Over the Shoulder (OTS)": ("tilt-shift",),
    "Medium Close-Up (MCU)": ("tilt-shift",),
    "Close-Up (CU)": ("tilt-shift",),
    "Extreme Close-Up (ECU)": ("tilt-shift",),
}

LENS_DOF_CONFLICTS = {
    "super-telephoto": ("tilt-shift",),
    "special": ("tilt-shift",),
}

LENS_RECOMMENDED_SHOTS = {
    "ultra-wide": ("Extreme Wide Shot (XWS)", "Wide Shot (WS)", "Bird's Eye View"),
    "wide": ("Wide Shot (WS)", "Full Shot", "Medium Wide Shot"),
    "standard": ("Medium Shot (MS)", "Full Shot", "Over the Shoulder (OTS)"),
    "portrait": ("Medium Close-Up (MCU)", "Close-Up (CU)", "Over the Shoulder (OTS)"),
    "telephoto": ("Close-Up (CU)", "Medium Close-Up (MCU)"),
    "super-telephoto": ("Extreme Close-Up (ECU)",),
    "special": ("Extreme Close-Up (ECU)", "POV"),
}


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConstraintEdge:
    """``(source_dimension, source_value)`` blocks ``blocked_values`` in ``target_dimension``.

    ``severity`` is ``"hard"`` for incompatibilities and ``"soft"`` for
    framing grammar that is advisory only. ``rule`` names the table the edge
    came from; the resolver uses it to apply edges in a fixed order.
    """
    source_dimension: Dimension
    source_value: str
    target_dimension: Dimension
    blocked_values: frozenset
    reason: str
    severity: str = HARD
    rule: str = ""

    @property
    def source_label(self) -> str:
        return f'{self.source_dimension.noun} "{display_name(self.source_dimension, self.source_value)}"'


def _table(table):
    return field(default_factory=lambda: table)


@dataclass(frozen=True, eq=False)
class RuleStore:
    """Immutable bundle of rule tables.

    Build it once and share it; every field defaults to the module-level
    table, so tests can swap a single table without touching the rest.
    """
    camera_categories: dict = _table(CAMERA_CATEGORIES)
    category_conflicts: dict = _table(CATEGORY_CONFLICTS)
    camera_rule_exemptions: dict = _table(CAMERA_RULE_EXEMPTIONS)
    camera_fixed_lens: dict = _table(CAMERA_FIXED_LENS)
    camera_zoom_range: dict = _table(CAMERA_ZOOM_RANGE)
    camera_aspect_ratios: dict = _table(CAMERA_ASPECT_RATIOS)
    camera_location_conflicts: dict = _table(CAMERA_LOCATION_CONFLICTS)
    location_camera_conflicts: dict = _table(LOCATION_CAMERA_CONFLICTS)
    lens_categories: dict = _table(LENS_CATEGORIES)
    atmosphere_blocks_categories: dict = _table(ATMOSPHERE_BLOCKS_CATEGORIES)
    atmosphere_blocks_dof: dict = _table(ATMOSPHERE_BLOCKS_DOF)
    atmosphere_lighting_redundancy: dict = _table(ATMOSPHERE_LIGHTING_REDUNDANCY)
    atmosphere_shot_conflicts: dict = _table(ATMOSPHERE_SHOT_CONFLICTS)
    atmosphere_era_conflicts: dict = _table(ATMOSPHERE_ERA_CONFLICTS)
    preset_mutual_exclusions: dict = _table(PRESET_MUTUAL_EXCLUSIONS)
    preset_blocks_categories: dict = _table(PRESET_BLOCKS_CATEGORIES)
    redundancy_warnings: dict = _table(REDUNDANCY_WARNINGS)
    director_rules: dict = _table(DIRECTOR_RULES)
    director_blocked_lens: dict = _table(DIRECTOR_BLOCKED_LENS)
    director_preferred_lens: dict = _table(DIRECTOR_PREFERRED_LENS)
    location_categories: dict = _table(LOCATION_CATEGORIES)
    location_meta_table: dict = _table(LOCATION_META)
    lighting_location_conflicts: dict = _table(LIGHTING_LOCATION_CONFLICTS)
    shot_scale_conflicts: dict = _table(SHOT_SCALE_CONFLICTS)
    shot_lens_conflicts: dict = _table(SHOT_LENS_CONFLICTS)
    shot_dof_conflicts: dict = _table(SHOT_DOF_CONFLICTS)
    lens_dof_conflicts: dict = _table(LENS_DOF_CONFLICTS)
    lens_recommended_shots: dict = _table(LENS_RECOMMENDED_SHOTS)

    # -- metadata lookups (total, neutral defaults) --------------------------

    def camera_category(self, camera: Optional[str]) -> str:
        return self.camera_categories.get(camera, "none") if camera else "none"

    def category_rules(self, category: str) -> dict:
        return self.category_conflicts.get(category, {})

    def lens_category(self, lens: Optional[str]) -> Optional[str]:
        return self.lens_categories.get(lens) if lens else None

    def location_category(self, location: Optional[str]) -> Optional[str]:
        return self.location_categories.get(location) if location else None

    def location_meta(self, location: Optional[str]) -> LocationMeta:
        if not location:
            return NEUTRAL_LOCATION_META
        return self.location_meta_table.get(location, NEUTRAL_LOCATION_META)

    def fixed_lens_for(self, camera: Optional[str]) -> Optional[str]:
        """Per-camera fixed lens, else the category default. ``None`` for zoom cameras."""
        if not camera or camera in self.camera_zoom_range:
            return None
        if camera in self.camera_fixed_lens:
            return self.camera_fixed_lens[camera]
        return self.category_rules(self.camera_category(camera)).get("fixed_lens")

    def zoom_range_for(self, camera: Optional[str]) -> Optional[ZoomRange]:
        return self.camera_zoom_range.get(camera) if camera else None

    def allowed_aspect_ratios_for(self, camera: Optional[str]) -> Optional[tuple]:
        return self.camera_aspect_ratios.get(camera) if camera else None

    def is_exempt(self, camera: str, dimension: Dimension, value: str) -> bool:
        return value in self.camera_rule_exemptions.get(camera, {}).get(dimension, ())

    # -- convenience predicates ---------------------------------------------

    def is_atmosphere_blocked_by_location(self, atmosphere: str, location: str) -> bool:
        meta = self.location_meta(location)
        if atmosphere in meta.blocked_atmospheres:
            return True
        return meta.era in self.atmosphere_era_conflicts.get(atmosphere, ())

    def is_lighting_blocked_by_location(self, lighting: str, location: str) -> bool:
        meta = self.location_meta(location)
        if meta.setting == "either":
            return False
        return meta.setting in self.lighting_location_conflicts.get(lighting, ())

    def is_lens_blocked_by_shot(self, lens_category: str, shot: str) -> bool:
        return lens_category in self.shot_lens_conflicts.get(shot, ())

    def is_dof_blocked_by_shot(self, dof: str, shot: str) -> bool:
        return dof in self.shot_dof_conflicts.get(shot, ())

    def is_dof_blocked_by_lens(self, dof: str, lens_category: str) -> bool:
        return dof in self.lens_dof_conflicts.get(lens_category, ())

    def is_lens_blocked_by_director(self, director: str, lens_category: str) -> bool:
        return lens_category in self.director_blocked_lens.get(director, ())

    def recommended_shots(self, lens_category: str) -> tuple:
        return self.lens_recommended_shots.get(lens_category, ())

    def director_compatible_lenses(self, director: str) -> Optional[tuple]:
        return self.director_preferred_lens.get(director)

    # -- edge lookup --------------------------------------------------------

    def lookup(self, dimension: Dimension, value: Optional[str]) -> list:
        """Outgoing edges for one value.

        Unknown, custom or empty values have no edges. The returned list is
        freshly built; callers must still treat it as read-only.
        """
        dimension = Dimension(dimension)
        if not in_domain(dimension, value):
            return []
        builder = _EDGE_BUILDERS.get(dimension)
        if builder is None:
            return []
        return [edge for edge in builder(self, value) if edge.blocked_values]

    # Category-keyed reverse rules are expanded here with a linear scan of the
    # target domain on every call. Domains are a few dozen values.

    def cameras_in_categories(self, categories, *, exempt_for=None) -> frozenset:
        """Cameras whose category is in *categories*, minus per-camera exemptions.

        ``exempt_for`` is ``(dimension, value)`` of the rule source.
        """
        cameras = set()
        for camera in domain(Dimension.CAMERA):
            if self.camera_category(camera) not in categories:
                continue
            if exempt_for and self.is_exempt(camera, *exempt_for):
                continue
            cameras.add(camera)
        return frozenset(cameras)

    def lenses_in_categories(self, categories) -> frozenset:
        return frozenset(
            lens for lens in domain(Dimension.LENS)
            if self.lens_category(lens) in categories
        )

    def locations_in_categories(self, categories) -> frozenset:
        return frozenset(
            loc for loc in domain(Dimension.LOCATION)
            if self.location_category(loc) in categories
        )

    def _camera_edges(self, camera: str):
        category = self.camera_category(camera)
        rules = self.category_rules(category)
        category_label = CAMERA_CATEGORY_LABELS.get(category, category)
        reason = rules.get("reason", "")
        for target, key in (
            (Dimension.ATMOSPHERE, "atmospheres"),
            (Dimension.PRESET, "presets"),
            (Dimension.DOF, "dof"),
        ):
            blocked = frozenset(
                v for v in rules.get(key, ())
                if not self.is_exempt(camera, target, v)
            ) - {NEUTRAL_VALUES.get(target)}
            yield ConstraintEdge(Dimension.CAMERA, camera, target, blocked,
                                 f"{category_label} cameras {reason}", HARD, "camera-category")

        location_categories = self.camera_location_conflicts.get(category, ())
        yield ConstraintEdge(
            Dimension.CAMERA, camera, Dimension.LOCATION,
            self.locations_in_categories(location_categories),
            f"{category_label} cameras are anachronistic in {', '.join(location_categories)} settings",
            HARD, "camera-location",
        )

        allowed = self.allowed_aspect_ratios_for(camera)
        if allowed is not None:
            blocked = frozenset(ASPECT_RATIO_OPTIONS) - set(allowed) - {"none"}
            yield ConstraintEdge(
                Dimension.CAMERA, camera, Dimension.ASPECT_RATIO, blocked,
                f"{camera} only records {', '.join(allowed)}", HARD, "aspect-ratio",
            )

    def _location_edges(self, location: str):
        meta = self.location_meta(location)
        yield ConstraintEdge(
            Dimension.LOCATION, location, Dimension.ATMOSPHERE,
            frozenset(meta.blocked_atmospheres),
            f"{location} rules out this look", HARD, "location",
        )

        location_category = self.location_category(location)
        camera_categories = self.location_camera_conflicts.get(location_category, ())
        yield ConstraintEdge(
            Dimension.LOCATION, location, Dimension.CAMERA,
            self.cameras_in_categories(camera_categories),
            f"{location_category} settings can't be captured on "
            f"{', '.join(CAMERA_CATEGORY_LABELS.get(c, c) for c in camera_categories)} cameras",
            HARD, "location-camera",
        )

        era_blocked = frozenset(
            atm for atm in domain(Dimension.ATMOSPHERE)
            if meta.era in self.atmosphere_era_conflicts.get(atm, ())
        )
        yield ConstraintEdge(
            Dimension.LOCATION, location, Dimension.ATMOSPHERE, era_blocked,
            f"doesn't fit a {meta.era} location", HARD, "location-era",
        )

        if meta.setting != "either":
            lit_blocked = frozenset(
                light for light in domain(Dimension.LIGHTING)
                if meta.setting in self.lighting_location_conflicts.get(light, ())
            )
            where = "indoors" if meta.setting == "indoor" else "outdoors"
            yield ConstraintEdge(
                Dimension.LOCATION, location, Dimension.LIGHTING, lit_blocked,
                f"can't happen {where}", HARD, "location-lighting",
            )

        scale_blocked = frozenset(
            shot for shot in domain(Dimension.SHOT)
            if meta.scale in self.shot_scale_conflicts.get(shot, ())
        )
        yield ConstraintEdge(
            Dimension.LOCATION, location, Dimension.SHOT, scale_blocked,
            f"needs more room than an {meta.scale} space", SOFT, "location-scale",
        )

    def _director_edges(self, director: str):
        rules = self.director_rules.get(director, {})
        for target, key, reason in (
            (Dimension.ATMOSPHERE, "atmospheres", f"not part of {director}'s visual language"),
            (Dimension.PRESET, "presets", f"clashes with {director}'s grade"),
            (Dimension.CAMERA, "cameras", f"{director} never shot on this format"),
        ):
            yield ConstraintEdge(Dimension.DIRECTOR, director, target,
                                 frozenset(rules.get(key, ())), reason, HARD, "director")

        for lens_category in self.director_blocked_lens.get(director, ()):
            yield ConstraintEdge(
                Dimension.DIRECTOR, director, Dimension.LENS,
                self.lenses_in_categories((lens_category,)),
                f"{lens_category} lenses contradict {director}'s framing",
                SOFT, "director-lens",
            )

    def _atmosphere_edges(self, atmosphere: str):
        name = ATMOSPHERE_OPTIONS[atmosphere]
        for category in self.atmosphere_blocks_categories.get(atmosphere, ()):
            yield ConstraintEdge(
                Dimension.ATMOSPHERE, atmosphere, Dimension.CAMERA,
                self.cameras_in_categories((category,), exempt_for=(Dimension.ATMOSPHERE, atmosphere)),
                f"{name} look can't come from {CAMERA_CATEGORY_LABELS.get(category, category)} cameras",
                HARD, "atmosphere-camera",
            )

        yield ConstraintEdge(
            Dimension.ATMOSPHERE, atmosphere, Dimension.DOF,
            frozenset(self.atmosphere_blocks_dof.get(atmosphere, ())) - {"normal"},
            f"{name} atmosphere already softens focus", HARD, "atmosphere-dof",
        )
        yield ConstraintEdge(
            Dimension.ATMOSPHERE, atmosphere, Dimension.SHOT,
            frozenset(self.atmosphere_shot_conflicts.get(atmosphere, ())),
            f"{name} atmosphere needs scale this framing loses", HARD, "atmosphere-shot",
        )
        for lighting in self.atmosphere_lighting_redundancy.get(atmosphere, ()):
            message = self.redundancy_warnings.get(
                f"{atmosphere}+{lighting}",
                f"{name} atmosphere already implies {LIGHTING_OPTIONS.get(lighting, lighting)}",
            )
            yield ConstraintEdge(
                Dimension.ATMOSPHERE, atmosphere, Dimension.LIGHTING,
                frozenset((lighting,)), message, HARD, "atmosphere-lighting",
            )

    def _preset_edges(self, preset: str):
        name = PRESET_OPTIONS[preset]
        for category in self.preset_blocks_categories.get(preset, ()):
            yield ConstraintEdge(
                Dimension.PRESET, preset, Dimension.CAMERA,
                self.cameras_in_categories((category,), exempt_for=(Dimension.PRESET, preset)),
                f"{name} grade is beyond {CAMERA_CATEGORY_LABELS.get(category, category)} cameras",
                HARD, "preset-camera",
            )
        for other in self.preset_mutual_exclusions.get(preset, ()):
            message = (
                self.redundancy_warnings.get(f"{preset}+{other}")
                or self.redundancy_warnings.get(f"{other}+{preset}")
                or f"{name} and {PRESET_OPTIONS.get(other, other)} are competing treatments"
            )
            yield ConstraintEdge(
                Dimension.PRESET, preset, Dimension.PRESET,
                frozenset((other,)), message, HARD, "preset-exclusion",
            )

    def _shot_edges(self, shot: str):
        for lens_category in self.shot_lens_conflicts.get(shot, ()):
            yield ConstraintEdge(
                Dimension.SHOT, shot, Dimension.LENS,
                self.lenses_in_categories((lens_category,)),
                f"{lens_category} lenses break this framing", SOFT, "shot-lens",
            )
        yield ConstraintEdge(
            Dimension.SHOT, shot, Dimension.DOF,
            frozenset(self.shot_dof_conflicts.get(shot, ())) - {"normal"},
            "miniature focus fights character framing", SOFT, "shot-dof",
        )

    def _lens_edges(self, lens: str):
        lens_category = self.lens_category(lens)
        yield ConstraintEdge(
            Dimension.LENS, lens, Dimension.DOF,
            frozenset(self.lens_dof_conflicts.get(lens_category, ())) - {"normal"},
            f"{lens_category} lenses can't tilt-shift in practice", SOFT, "lens-dof",
        )


_EDGE_BUILDERS = {
    Dimension.CAMERA: RuleStore._camera_edges,
    Dimension.LOCATION: RuleStore._location_edges,
    Dimension.DIRECTOR: RuleStore._director_edges,
    Dimension.ATMOSPHERE: RuleStore._atmosphere_edges,
    Dimension.PRESET: RuleStore._preset_edges,
    Dimension.SHOT: RuleStore._shot_edges,
    Dimension.LENS: RuleStore._lens_edges,
}

_DEFAULT_STORE: Optional[RuleStore] = None


def default_store() -> RuleStore:
    """Process-wide store built from the module tables."""
    global _DEFAULT_STORE
    if _DEFAULT_STORE is None:
        _DEFAULT_STORE = RuleStore()
    return _DEFAULT_STORE
