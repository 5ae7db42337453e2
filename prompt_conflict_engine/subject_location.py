"""
Subject-to-location compatibility.

Keyword checks on the subject text that keep physically implausible pairs out
of a randomized selection (a Formula 1 car in a crystal cave, a surfer on a
factory floor). Used by the sampler only; the resolver never reads the
subject.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .rules import LOCATION_CATEGORIES

ALL_LOCATION_CATEGORIES = ("urban", "nature", "interior", "fantasy", "industrial")

# Keyword in subject text -> location categories it rules out
SUBJECT_KEYWORD_BLOCKED_LOCATIONS = {
    # High-speed vehicles need open space
    "formula 1": ("interior", "fantasy"),
    "f1 car": ("interior", "fantasy"),
    "racing speed": ("interior", "fantasy"),
    "200mph": ("interior", "fantasy"),
    "motorcycle racer": ("interior", "fantasy"),
    "racing": ("interior",),
    # Underwater subjects
    "underwater": ("urban", "industrial"),
    "coral reef": ("urban", "industrial", "interior"),
    # Aviation
    "drone footage": ("interior",),
    "aerial": ("interior",),
    "flying": ("interior",),
    # Open water, cliffs and mountains
    "cliff diver": ("interior", "industrial", "fantasy"),
    "cliff dive": ("interior", "industrial", "fantasy"),
    "turquoise waters": ("interior", "industrial", "fantasy"),
    "mountain climber": ("interior", "urban"),
    "snowboarder": ("interior", "urban"),
    "surfer": ("interior", "industrial", "fantasy"),
    "ocean waves": ("interior", "industrial"),
    # Settings implied by the subject
    "space station": ("nature", "urban"),
    "spacecraft": ("nature", "urban"),
}

THEME_LOCATION_PREFERENCES = {
    "scifi": {"preferred": ("industrial", "interior", "fantasy"), "blocked": ()},
    "fantasy": {"preferred": ("fantasy", "nature"), "blocked": ()},
    "western": {"preferred": ("nature",), "blocked": ("industrial",)},
    "asian": {"preferred": ("urban", "nature", "interior"), "blocked": ()},
    "cyberpunk": {"preferred": ("urban", "industrial"), "blocked": ("nature",)},
    "historical": {"preferred": ("interior", "nature"), "blocked": ("industrial",)},
    "modern": {"preferred": ("urban", "interior", "industrial"), "blocked": ()},
    "nature": {"preferred": ("nature",), "blocked": ("industrial",)},
    "urban": {"preferred": ("urban", "industrial"), "blocked": ()},
    "military": {"preferred": ("nature", "industrial", "urban"), "blocked": ()},
    "gothic": {"preferred": ("interior", "fantasy"), "blocked": ()},
    "steampunk": {"preferred": ("industrial", "interior"), "blocked": ()},
    "noir": {"preferred": ("urban", "interior"), "blocked": ("nature", "fantasy")},
    "vintage": {"preferred": ("urban", "interior", "nature"), "blocked": ("industrial",)},
    "action": {"preferred": ("urban", "nature", "industrial"), "blocked": ()},
    "elegant": {"preferred": ("interior", "urban"), "blocked": ("industrial",)},
}

ENCLOSED_LOCATIONS = frozenset({
    "Crystal Cave",
    "Old Library",
    "Cathedral",
    "Neon Bar",
    "Office",
    "Luxury Penthouse",
    "Abandoned Warehouse",
    "Underground Bunker",
    "Space Station",
})

_HIGH_SPEED_MARKERS = ("speed", "racing", "mph", "exploding through")


def is_high_speed(subject_text: str) -> bool:
    lower = subject_text.lower()
    return any(marker in lower for marker in _HIGH_SPEED_MARKERS)


def blocked_location_categories(subject_text: Optional[str]) -> set:
    blocked = set()
    if not subject_text:
        return blocked
    lower = subject_text.lower()
    for keyword, categories in SUBJECT_KEYWORD_BLOCKED_LOCATIONS.items():
        if keyword in lower:
            blocked.update(categories)
    return blocked


def is_location_compatible(subject_text: Optional[str], location: str) -> bool:
    """Whether *location* can plausibly host *subject_text*. Empty subjects fit anywhere."""
    if not subject_text:
        return True
    if LOCATION_CATEGORIES.get(location) in blocked_location_categories(subject_text):
        return False
    if is_high_speed(subject_text) and location in ENCLOSED_LOCATIONS:
        return False
    return True


def filter_compatible_locations(subject_text: Optional[str], locations: Iterable[str]) -> list:
    return [loc for loc in locations if is_location_compatible(subject_text, loc)]


def preferred_location_categories(themes: Iterable[str]) -> list:
    """Location categories that suit at least one theme, minus any a theme rules out."""
    themes = list(themes)
    if not themes:
        return list(ALL_LOCATION_CATEGORIES)

    preferred = set()
    for theme in themes:
        prefs = THEME_LOCATION_PREFERENCES.get(theme)
        if prefs:
            preferred.update(prefs["preferred"])
    if not preferred:
        preferred = set(ALL_LOCATION_CATEGORIES)

    for theme in themes:
        prefs = THEME_LOCATION_PREFERENCES.get(theme)
        if prefs:
            preferred.difference_update(prefs["blocked"])

    return [c for c in ALL_LOCATION_CATEGORIES if c in preferred]
