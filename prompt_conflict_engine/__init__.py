"""
Prompt Conflict Engine: compatibility rules for the cinematic prompt wizard.

Given one value per dimension (camera, lens, shot, depth of field, aspect
ratio, atmosphere, visual preset, lighting, director, location), reports which
values in every other dimension are incompatible and why, which current
choices already conflict, which choices stack the same style, and can
randomize a complete, mutually consistent configuration.

Usage
-----
::

    from prompt_conflict_engine import Selection, resolve_conflicts, sample_consistent_assignment

    selection = Selection(camera="VHS Camcorder", atmosphere="cyberpunk")
    result = resolve_conflicts(selection)

    print(result.active_conflicts)
    print(sorted(result.blocked_atmospheres))

    randomized = sample_consistent_assignment(selection, locked=["camera"], seed=42)
    assert not resolve_conflicts(randomized).active_conflicts
"""

from .config import DEFAULT_CONFIG
from .dimensions import (
    ENGINE_DIMENSIONS,
    LOCK_SECTIONS,
    Dimension,
    Selection,
    expand_lock_sections,
)
from .options import display_name, domain
from .resolver import (
    RESOLUTION_ORDER,
    BlockReason,
    ConflictResult,
    resolve_conflicts,
)
from .rules import ConstraintEdge, RuleStore, ZoomRange, default_store
from .sampler import SAMPLING_ORDER, residual_conflict_rate, sample_consistent_assignment, sample_sections
from .style_stacking import (
    StackingWarning,
    StyleStackingAnalysis,
    analyze_style_stacking,
    detect_effect_stacking,
    reducing_options,
)
from .subject_location import filter_compatible_locations, is_location_compatible

__all__ = [
    # High-level API
    "resolve_conflicts",
    "sample_consistent_assignment",
    "residual_conflict_rate",
    "sample_sections",
    "analyze_style_stacking",
    "detect_effect_stacking",
    "reducing_options",
    "is_location_compatible",
    "filter_compatible_locations",
    # Model
    "Dimension",
    "Selection",
    "ConflictResult",
    "BlockReason",
    "StackingWarning",
    "StyleStackingAnalysis",
    "ConstraintEdge",
    "ZoomRange",
    "RuleStore",
    "default_store",
    # Configuration
    "ENGINE_DIMENSIONS",
    "LOCK_SECTIONS",
    "RESOLUTION_ORDER",
    "SAMPLING_ORDER",
    "DEFAULT_CONFIG",
    "expand_lock_sections",
    "display_name",
    "domain",
]
