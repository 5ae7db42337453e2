"""
Consistent assignment sampler ("randomize all").

Fills every unlocked dimension in the fixed ``SAMPLING_ORDER``. For each
dimension it asks the resolver which values the partial selection already
blocks, forward-checks each remaining candidate's own rules against what is
already assigned, applies the step's local preferences, and picks uniformly.
No backtracking: if filtering leaves nothing, the full domain is used and the
resulting conflict shows up in the next ``resolve_conflicts`` call.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Callable, Iterable, Optional

from . import config
from .dimensions import CUSTOM_FIELDS, Dimension, Selection, expand_lock_sections
from .options import MAGIC_SUBJECTS, domain, find_subject, is_human_subject
from .resolver import resolve_conflicts, trigger_value
from .rules import RuleStore, default_store
from .style_stacking import analyze_style_stacking, implied_styles
from .subject_location import filter_compatible_locations, preferred_location_categories

logger = logging.getLogger(__name__)

SAMPLING_ORDER = (
    Dimension.SUBJECT,
    Dimension.LOCATION,
    Dimension.DIRECTOR,
    Dimension.CAMERA,
    Dimension.ATMOSPHERE,
    Dimension.LIGHTING,
    Dimension.SHOT,
    Dimension.LENS,
    Dimension.PRESET,
    Dimension.DOF,
    Dimension.COLOR_PALETTE,
    Dimension.ASPECT_RATIO,
    Dimension.GAZE,
    Dimension.POSE,
    Dimension.POSITION,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sample_consistent_assignment(
    current: Optional[Selection] = None,
    locked: Iterable = (),
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    store: Optional[RuleStore] = None,
    safe_mode: Optional[bool] = None,
) -> Selection:
    """Return a new, fully populated Selection.

    Parameters
    ----------
    current : Selection, optional
        Source of the locked values. Defaults to ``Selection()``.
    locked : iterable
        Dimensions (or lock section names such as ``"camera"``) to keep.
    seed : int, optional
        Seeds a private RNG for reproducible results. Ignored when *rng* is given.
    rng : random.Random, optional
        Shared RNG, for drawing many samples from one stream.
    store : RuleStore, optional
        Defaults to the process-wide store.
    safe_mode : bool, optional
        Pick the safe alternative of a magic subject when it has one.
        Defaults to ``config.SAFE_MODE``. A locked subject is kept as is.

    Returns
    -------
    Selection
        Every unlocked dimension holds a value, except lens on cameras with a
        fixed lens or zoom, and gaze/pose for non-human subjects, which are
        cleared on purpose.
    """
    current = current or Selection()
    store = store or default_store()
    rng = rng or random.Random(seed)
    locked = _normalize_locked(locked)
    if safe_mode is None:
        safe_mode = config.SAFE_MODE

    selection = _clear_unlocked(current, locked)

    for dimension in SAMPLING_ORDER:
        if dimension in locked:
            continue
        if dimension == Dimension.SUBJECT:
            value = _pick_subject(rng, safe_mode)
        else:
            value = _STEPS[dimension](selection, store, rng)
        selection = selection.with_value(dimension, value)

    return selection


def sample_sections(current: Selection, sections: Iterable, **kwargs) -> Selection:
    """Re-randomize only *sections* (lock names or dimensions), keeping everything else.

    This is the per-section "shuffle" button: ``sample_sections(current, ["camera"])``
    redraws camera, lens, shot and aspect ratio against the rest of *current*.
    Keyword arguments go to ``sample_consistent_assignment``.
    """
    unlocked = _normalize_locked(sections)
    locked = [dim for dim in Dimension if dim not in unlocked]
    return sample_consistent_assignment(current, locked, **kwargs)


def residual_conflict_rate(
    trials: int = 1000,
    locked: Iterable = (),
    *,
    seed: Optional[int] = None,
    current: Optional[Selection] = None,
    store: Optional[RuleStore] = None,
    safe_mode: Optional[bool] = None,
) -> float:
    """Fraction of sampled selections whose resolution still has active conflicts."""
    if trials <= 0:
        return 0.0
    store = store or default_store()
    rng = random.Random(seed)
    failures = 0
    for _ in range(trials):
        sample = sample_consistent_assignment(current, locked, rng=rng, store=store, safe_mode=safe_mode)
        if resolve_conflicts(sample, store).active_conflicts:
            failures += 1
    return failures / trials


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _normalize_locked(locked: Iterable) -> frozenset:
    dimensions = set()
    names = []
    for item in locked:
        if isinstance(item, Dimension):
            dimensions.add(item)
        else:
            names.append(item)
    return frozenset(dimensions) | expand_lock_sections(names)


def _clear_unlocked(current: Selection, locked: frozenset) -> Selection:
    changes = {dim: None for dim in SAMPLING_ORDER if dim not in locked}
    # Free-text overrides belong to their dimension's lock.
    custom = {
        field_name: None
        for dim, field_name in CUSTOM_FIELDS.items()
        if dim not in locked
    }
    return replace(current.with_values(changes), **custom)


def _pick(rng: random.Random, candidates: list, full_domain: tuple, dimension: Dimension):
    if candidates:
        return rng.choice(candidates)
    logger.debug("No compatible %s left; falling back to the full domain", dimension.value)
    return rng.choice(list(full_domain))


def _prefer(candidates: list, predicate: Callable) -> list:
    """Narrow to candidates matching *predicate*, unless that empties the list."""
    preferred = [c for c in candidates if predicate(c)]
    return preferred or candidates


def _forward_ok(selection: Selection, store: RuleStore, dimension: Dimension, candidate: str) -> bool:
    """Reject *candidate* if one of its own rules blocks a value already assigned."""
    for edge in store.lookup(dimension, candidate):
        assigned = trigger_value(selection, edge.target_dimension)
        if assigned is not None and assigned in edge.blocked_values:
            return False
    if dimension == Dimension.CAMERA:
        lens = selection.custom_lens or selection.lens
        if lens:
            zoom = store.zoom_range_for(candidate)
            if store.fixed_lens_for(candidate):
                return False
            if zoom and (selection.custom_lens or lens not in zoom.options):
                return False
    return True


def _compatible(selection: Selection, store: RuleStore, dimension: Dimension) -> list:
    """Domain values neither blocked by the partial selection nor blocking it."""
    blocked = resolve_conflicts(selection, store).blocked[dimension]
    return [
        value for value in domain(dimension)
        if value not in blocked and _forward_ok(selection, store, dimension, value)
    ]


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def _pick_subject(rng, safe_mode=False):
    return rng.choice(MAGIC_SUBJECTS).text_for(safe_mode)


def _pick_location(selection, store, rng):
    candidates = _compatible(selection, store, Dimension.LOCATION)
    candidates = filter_compatible_locations(selection.subject, candidates)
    subject = find_subject(selection.subject)
    if subject and subject.themes:
        preferred = set(preferred_location_categories(subject.themes))
        candidates = _prefer(candidates, lambda loc: store.location_category(loc) in preferred)
    return _pick(rng, candidates, domain(Dimension.LOCATION), Dimension.LOCATION)


def _pick_director(selection, store, rng):
    candidates = _compatible(selection, store, Dimension.DIRECTOR)
    return _pick(rng, candidates, domain(Dimension.DIRECTOR), Dimension.DIRECTOR)


def _pick_camera(selection, store, rng):
    candidates = _compatible(selection, store, Dimension.CAMERA)
    return _pick(rng, candidates, domain(Dimension.CAMERA), Dimension.CAMERA)


def _pick_atmosphere(selection, store, rng):
    candidates = _compatible(selection, store, Dimension.ATMOSPHERE)
    director_styles = set(implied_styles(Dimension.DIRECTOR, selection.director))
    if director_styles:
        limit = config.ATMOSPHERE_OVERLAP_LIMIT
        candidates = _prefer(
            candidates,
            lambda atm: len(director_styles.intersection(implied_styles(Dimension.ATMOSPHERE, atm))) < limit,
        )
    return _pick(rng, candidates, domain(Dimension.ATMOSPHERE), Dimension.ATMOSPHERE)


def _pick_lighting(selection, store, rng):
    candidates = _compatible(selection, store, Dimension.LIGHTING)
    return _pick(rng, candidates, domain(Dimension.LIGHTING), Dimension.LIGHTING)


def _pick_shot(selection, store, rng):
    candidates = _compatible(selection, store, Dimension.SHOT)
    if selection.subject:
        # Subjects are written in third person; a POV shot would make us the subject.
        candidates = [shot for shot in candidates if shot != "POV"]
    return _pick(rng, candidates, domain(Dimension.SHOT), Dimension.SHOT)


def _pick_lens(selection, store, rng):
    camera = trigger_value(selection, Dimension.CAMERA)
    if store.zoom_range_for(camera) or store.fixed_lens_for(camera):
        return None
    candidates = _compatible(selection, store, Dimension.LENS)
    return _pick(rng, candidates, domain(Dimension.LENS), Dimension.LENS)


def _pick_preset(selection, store, rng):
    candidates = _compatible(selection, store, Dimension.PRESET)
    analysis = analyze_style_stacking(selection.director, selection.atmosphere, None, selection.lighting)
    if analysis.total_assertions >= config.NEUTRAL_PRESET_THRESHOLD:
        candidates = _prefer(candidates, lambda preset: preset in config.NEUTRAL_PRESETS)
    return _pick(rng, candidates, domain(Dimension.PRESET), Dimension.PRESET)


def _pick_dof(selection, store, rng):
    candidates = _compatible(selection, store, Dimension.DOF)
    return _pick(rng, candidates, domain(Dimension.DOF), Dimension.DOF)


def _pick_color_palette(selection, store, rng):
    return rng.choice(list(domain(Dimension.COLOR_PALETTE)))


def _pick_aspect_ratio(selection, store, rng):
    camera = trigger_value(selection, Dimension.CAMERA)
    allowed = store.allowed_aspect_ratios_for(camera)
    candidates = [r for r in (allowed or domain(Dimension.ASPECT_RATIO)) if r != "none"]
    return _pick(rng, candidates, domain(Dimension.ASPECT_RATIO), Dimension.ASPECT_RATIO)


def _pick_gaze(selection, store, rng):
    if not is_human_subject(selection.subject):
        return None
    return rng.choice(list(domain(Dimension.GAZE)))


def _pick_pose(selection, store, rng):
    if not is_human_subject(selection.subject):
        return None
    return rng.choice(list(domain(Dimension.POSE)))


def _pick_position(selection, store, rng):
    return rng.choice(list(domain(Dimension.POSITION)))


_STEPS = {
    Dimension.LOCATION: _pick_location,
    Dimension.DIRECTOR: _pick_director,
    Dimension.CAMERA: _pick_camera,
    Dimension.ATMOSPHERE: _pick_atmosphere,
    Dimension.LIGHTING: _pick_lighting,
    Dimension.SHOT: _pick_shot,
    Dimension.LENS: _pick_lens,
    Dimension.PRESET: _pick_preset,
    Dimension.DOF: _pick_dof,
    Dimension.COLOR_PALETTE: _pick_color_palette,
    Dimension.ASPECT_RATIO: _pick_aspect_ratio,
    Dimension.GAZE: _pick_gaze,
    Dimension.POSE: _pick_pose,
    Dimension.POSITION: _pick_position,
}
