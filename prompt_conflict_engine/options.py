"""
Option catalogue for every dimension of the wizard.

Only labels, display names and the per-value metadata the engine reads are
kept here; descriptive prompt keywords live with the prompt assembler.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .dimensions import Dimension

# ---------------------------------------------------------------------------
# Camera
# ---------------------------------------------------------------------------

CAMERA_OPTIONS = (
    # Consumer & everyday
    "iPhone Pro", "GoPro", "DJI Drone",
    # DSLR & mirrorless
    "Sony A7S III", "Sony A1", "Canon R5", "Canon 5D Mark IV", "Nikon Z9", "Nikon D850",
    # Modern cinema
    "ARRI Alexa", "ARRI Alexa Mini", "ARRI Alexa 65", "RED V-Raptor", "RED Komodo",
    "Sony Venice", "Sony FX9", "Blackmagic URSA", "Canon C500", "Canon C70",
    # Film formats
    "35mm Film", "70mm IMAX", "65mm Film",
    # Premium photography
    "Hasselblad X2D", "Hasselblad 500C", "Leica M11", "Leica M6", "Phase One XF",
    # Classic cinema
    "Panavision Panaflex", "Panavision DXL2", "Arriflex 35", "Arriflex 16SR",
    "Mitchell BNC", "Bolex H16",
    # Vintage film
    "16mm Film", "Super 16", "Super 8", "8mm Film",
    # Vintage video
    "VHS Camcorder", "MiniDV", "Hi8", "Handycam", "Betacam",
    # Vintage photography
    "Polaroid SX-70", "Contax T2", "Rolleiflex", "Mamiya RZ67", "Disposable Camera",
    # Antique & experimental
    "Pinhole Camera", "Daguerreotype", "Tintype", "Wet Plate",
)

# ---------------------------------------------------------------------------
# Lens, shot, depth of field, aspect ratio
# ---------------------------------------------------------------------------

LENS_OPTIONS = (
    "Macro", "Fisheye", "14mm", "18mm", "24mm", "28mm", "35mm",
    "50mm", "85mm", "135mm", "200mm", "400mm", "600mm",
)

SHOT_OPTIONS = (
    "Extreme Wide Shot (XWS)",
    "Wide Shot (WS)",
    "Full Shot",
    "Medium Wide Shot",
    "Medium Shot (MS)",
    "Medium Close-Up (MCU)",
    "Close-Up (CU)",
    "Extreme Close-Up (ECU)",
    "Low Angle",
    "High Angle",
    "Dutch Angle",
    "Bird's Eye View",
    "POV",
    "Over the Shoulder (OTS)",
)

DOF_OPTIONS = {
    "shallow": "Shallow (Bokeh)",
    "normal": "Normal",
    "deep": "Deep (All in Focus)",
    "tilt-shift": "Tilt-Shift",
}

# Generic ratios first, then the cinema/film ratios some cameras are limited to.
ASPECT_RATIO_OPTIONS = {
    "none": "Default",
    "1:1": "1:1 Square",
    "4:3": "4:3 Standard",
    "3:2": "3:2 Classic",
    "16:9": "16:9 Widescreen",
    "21:9": "21:9 Cinematic",
    "9:16": "9:16 Vertical",
    "2:3": "2:3 Portrait",
    "4:5": "4:5 Instagram",
    "3:4": "3:4 Plate",
    "1.33:1": "1.33:1 Academy",
    "1.43:1": "1.43:1 IMAX",
    "1.66:1": "1.66:1 European Flat",
    "1.85:1": "1.85:1 Flat",
    "1.9:1": "1.9:1 Digital IMAX",
    "2.2:1": "2.2:1 Todd-AO",
    "2.39:1": "2.39:1 Scope",
    "2.76:1": "2.76:1 Ultra Panavision",
}

# ---------------------------------------------------------------------------
# Look: atmosphere, visual preset, lighting, colour
# ---------------------------------------------------------------------------

ATMOSPHERE_OPTIONS = {
    "cinematic": "Cinematic",
    "cyberpunk": "Cyberpunk",
    "studio": "Studio",
    "moody": "Moody",
    "dreamy": "Dreamy",
    "natural": "Natural",
    "vintage": "Vintage",
    "epic": "Epic",
    "horror": "Horror",
    "romantic": "Romantic",
}

PRESET_OPTIONS = {
    "raw": "Raw",
    "highcontrast": "High Contrast",
    "desaturated": "Desaturated",
    "vivid": "Vivid",
    "filmlook": "Film Look",
    "bleachbypass": "Bleach Bypass",
}

LIGHTING_OPTIONS = {
    "rembrandt": "Rembrandt",
    "chiaroscuro": "Chiaroscuro",
    "highkey": "High Key",
    "lowkey": "Low Key",
    "goldenhour": "Golden Hour",
    "bluehour": "Blue Hour",
    "moonlit": "Moonlit Night",
    "practical": "Practical Light",
    "neon": "Cyberpunk Neon",
    "godrays": "God Rays",
    "softbox": "Studio Softbox",
    "bioluminescent": "Bioluminescent",
}

COLOR_PALETTE_OPTIONS = {
    "teal-orange": "Teal & Orange",
    "noir": "Noir / B&W",
    "neon-cyberpunk": "Neon Cyberpunk",
    "warm-sunset": "Warm Sunset",
    "cool-ocean": "Cool Ocean",
    "pastel-dream": "Pastel Dream",
    "earthy-natural": "Earthy Natural",
    "vintage-sepia": "Vintage Sepia",
    "forest-moss": "Forest Moss",
}

# ---------------------------------------------------------------------------
# Director and location
# ---------------------------------------------------------------------------

DIRECTOR_OPTIONS = (
    "Wes Anderson",
    "Quentin Tarantino",
    "Stanley Kubrick",
    "David Lynch",
    "Christopher Nolan",
    "Denis Villeneuve",
    "Ridley Scott",
    "Wong Kar-wai",
    "Terrence Malick",
    "Akira Kurosawa",
    "Tim Burton",
    "David Fincher",
    "Coen Brothers",
    "Park Chan-wook",
    "Andrei Tarkovsky",
)

LOCATION_OPTIONS = (
    # Urban
    "City Street", "Neon-lit Alley", "Rooftop", "Subway Station", "Parking Lot",
    # Nature
    "Forest", "Desert", "Beach", "Mountain Peak", "Cornfield", "Waterfall", "Snowy Tundra",
    # Interior
    "Abandoned Warehouse", "Luxury Penthouse", "Old Library", "Neon Bar", "Cathedral", "Office",
    # Fantasy
    "Enchanted Forest", "Floating Islands", "Ancient Ruins", "Crystal Cave",
    # Industrial
    "Factory Floor", "Cyberpunk City", "Space Station", "Underground Bunker",
)

# ---------------------------------------------------------------------------
# Subject and character framing
# ---------------------------------------------------------------------------

GAZE_OPTIONS = ("direct", "left", "right", "up", "down", "away", "shoulder")
POSE_OPTIONS = ("standing", "stride", "sprint", "seated", "kneeling", "combat")
POSITION_OPTIONS = ("left", "center", "right")

HUMAN_SUBJECT_CATEGORIES = frozenset({"character", "portrait"})


@dataclass(frozen=True)
class MagicSubject:
    """A ready-made subject the sampler can pick."""
    text: str
    category: str
    themes: tuple = ()
    safe_text: Optional[str] = None

    @property
    def is_human(self) -> bool:
        return self.category in HUMAN_SUBJECT_CATEGORIES

    def text_for(self, safe_mode: bool = False) -> str:
        """Subject text to use; the safe alternative when *safe_mode* is set and one exists."""
        if safe_mode and self.safe_text:
            return self.safe_text
        return self.text


MAGIC_SUBJECTS = (
    # Characters
    MagicSubject("A futuristic soldier standing in a sandstorm on a desolate planet",
                 "character", ("scifi", "military", "action")),
    MagicSubject("A jazz musician playing the saxophone under a single streetlamp in 1950s New York",
                 "character", ("vintage", "urban", "noir")),
    MagicSubject("A cyberpunk mercenary in a neon alley, rain dripping from their worn leather jacket",
                 "character", ("cyberpunk", "urban", "action"),
                 "A cyberpunk courier in a neon alley, rain dripping from their worn leather jacket"),
    MagicSubject("An elderly fisherman at dawn, mending nets on a weathered wooden dock",
                 "character", ("nature", "vintage")),
    MagicSubject("A samurai warrior standing alone in a field of tall grass, wind in their hair",
                 "character", ("asian", "historical", "action")),
    MagicSubject("A weary astronaut removing their helmet inside a cramped spacecraft",
                 "character", ("scifi", "modern")),
    MagicSubject("A lone cowboy silhouetted against a burning sunset in the Arizona desert",
                 "character", ("western", "nature")),
    # Scenes
    MagicSubject("An abandoned amusement park at twilight, rusted ferris wheel against a purple sky",
                 "scene", ("gothic", "urban")),
    MagicSubject("A rain-soaked Tokyo street at 3am, vending machines glowing in the mist",
                 "scene", ("asian", "cyberpunk", "urban", "noir")),
    MagicSubject("A frozen lake reflecting the northern lights in the Arctic wilderness",
                 "scene", ("nature",)),
    MagicSubject("An underwater coral reef teeming with bioluminescent creatures",
                 "scene", ("nature", "fantasy")),
    MagicSubject("A massive steampunk clocktower interior with gears and brass mechanisms",
                 "scene", ("steampunk", "historical")),
    # Portraits
    MagicSubject("A weathered ship captain with a salt-and-pepper beard and knowing eyes",
                 "portrait", ("historical", "nature")),
    MagicSubject("A glamorous 1920s flapper with art deco jewelry and a cigarette holder",
                 "portrait", ("vintage", "elegant", "noir"),
                 "A glamorous 1920s flapper with art deco jewelry and a feathered headband"),
    MagicSubject("A futuristic android with human-like features and subtle mechanical details",
                 "portrait", ("scifi", "cyberpunk")),
    # Action
    MagicSubject("A motorcycle racer leaning into a sharp turn, sparks flying from the asphalt",
                 "action", ("modern", "action"),
                 "A motorcycle racer leaning into a sharp turn, motion blur and dynamic angle"),
    MagicSubject("A cliff diver suspended in mid-air above turquoise waters",
                 "action", ("nature", "action")),
    MagicSubject("A snowboarder carving through fresh powder with mountain peaks behind",
                 "action", ("nature", "action", "modern")),
    MagicSubject("A Formula 1 car exploding through a rain spray at 200mph",
                 "action", ("modern", "action"),
                 "A Formula 1 car racing through rain spray at high speed, dramatic water mist"),
    # Atmospheric
    MagicSubject("A solitary lighthouse on a stormy cliff, waves crashing below",
                 "atmospheric", ("nature", "gothic")),
    MagicSubject("A moonlit cemetery with ancient tombstones and a single mourner",
                 "atmospheric", ("gothic", "historical"),
                 "A moonlit historic garden with ancient stone monuments and a solitary figure"),
)

_SUBJECTS_BY_TEXT = {s.text: s for s in MAGIC_SUBJECTS}
_SUBJECTS_BY_TEXT.update({s.safe_text: s for s in MAGIC_SUBJECTS if s.safe_text})


def find_subject(text: Optional[str]) -> Optional[MagicSubject]:
    """Magic subject whose text or safe alternative is *text*."""
    if not text:
        return None
    return _SUBJECTS_BY_TEXT.get(text)


def is_human_subject(text: Optional[str]) -> bool:
    """Whether gaze and pose make sense for *text*. Unknown free text is not human-like."""
    subject = find_subject(text)
    return subject.is_human if subject else False


# ---------------------------------------------------------------------------
# Domain access
# ---------------------------------------------------------------------------

DOMAINS = {
    Dimension.CAMERA: CAMERA_OPTIONS,
    Dimension.LENS: LENS_OPTIONS,
    Dimension.SHOT: SHOT_OPTIONS,
    Dimension.DOF: tuple(DOF_OPTIONS),
    Dimension.ASPECT_RATIO: tuple(ASPECT_RATIO_OPTIONS),
    Dimension.ATMOSPHERE: tuple(ATMOSPHERE_OPTIONS),
    Dimension.PRESET: tuple(PRESET_OPTIONS),
    Dimension.LIGHTING: tuple(LIGHTING_OPTIONS),
    Dimension.DIRECTOR: DIRECTOR_OPTIONS,
    Dimension.LOCATION: LOCATION_OPTIONS,
    Dimension.SUBJECT: tuple(s.text for s in MAGIC_SUBJECTS),
    Dimension.COLOR_PALETTE: tuple(COLOR_PALETTE_OPTIONS),
    Dimension.GAZE: GAZE_OPTIONS,
    Dimension.POSE: POSE_OPTIONS,
    Dimension.POSITION: POSITION_OPTIONS,
}

_DISPLAY_NAMES = {
    Dimension.DOF: DOF_OPTIONS,
    Dimension.ASPECT_RATIO: ASPECT_RATIO_OPTIONS,
    Dimension.ATMOSPHERE: ATMOSPHERE_OPTIONS,
    Dimension.PRESET: PRESET_OPTIONS,
    Dimension.LIGHTING: LIGHTING_OPTIONS,
    Dimension.COLOR_PALETTE: COLOR_PALETTE_OPTIONS,
}

_DOMAIN_SETS = {dim: frozenset(values) for dim, values in DOMAINS.items()}


def domain(dimension: Dimension) -> tuple:
    """Ordered catalogue values for *dimension*."""
    return DOMAINS[Dimension(dimension)]


def in_domain(dimension: Dimension, value: Optional[str]) -> bool:
    return value is not None and value in _DOMAIN_SETS[Dimension(dimension)]


def display_name(dimension: Dimension, value: str) -> str:
    """Human label for a value, falling back to the value itself."""
    return _DISPLAY_NAMES.get(Dimension(dimension), {}).get(value, value)
