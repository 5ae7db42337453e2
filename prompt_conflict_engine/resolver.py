"""
Conflict resolver.

``resolve_conflicts`` is a pure function of a Selection and a RuleStore. It
walks the rule tables in a fixed order, collects blocked values per
dimension with the reason of the first rule that blocked them, and reports
which current selections are already in conflict.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from .dimensions import ENGINE_DIMENSIONS, Dimension, Selection, is_neutral
from .options import display_name, in_domain
from .rules import HARD, RuleStore, ZoomRange, default_store
from .style_stacking import (
    StyleStackingAnalysis,
    analyze_style_stacking,
    detect_effect_stacking,
    style_warning,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resolution order
# ---------------------------------------------------------------------------
# (source dimension, rule kinds) applied top to bottom. Earlier steps win the
# displayed reason when several rules block the same value.

RESOLUTION_ORDER = (
    # Category rules of camera and location
    (Dimension.CAMERA, ("camera-category", "camera-location")),
    (Dimension.LOCATION, ("location", "location-camera")),
    # Director rules
    (Dimension.DIRECTOR, ("director", "director-lens")),
    # Reverse rules and atmosphere's other outgoing rules
    (Dimension.ATMOSPHERE, ("atmosphere-camera", "atmosphere-dof", "atmosphere-shot", "atmosphere-lighting")),
    (Dimension.PRESET, ("preset-camera",)),
    # Preset mutual exclusion
    (Dimension.PRESET, ("preset-exclusion",)),
    # Aspect ratio restriction
    (Dimension.CAMERA, ("aspect-ratio",)),
    # Location-aware blocks
    (Dimension.LOCATION, ("location-era", "location-lighting", "location-scale")),
    # Camera grammar
    (Dimension.SHOT, ("shot-lens", "shot-dof")),
    (Dimension.LENS, ("lens-dof",)),
)


@dataclass(frozen=True)
class BlockReason:
    source: str
    reason: str
    severity: str = HARD
    rule: str = ""


@dataclass(frozen=True)
class ConflictResult:
    """Everything the wizard needs to disable, annotate and warn.

    ``blocked`` and ``block_reasons`` are keyed by every engine dimension.
    Every container is immutable, so a memoized result can be handed to
    any number of callers.
    """
    blocked: Mapping
    block_reasons: Mapping
    active_conflicts: tuple
    stacking_warnings: tuple
    fixed_lens: Optional[str]
    zoom_range: Optional[ZoomRange]
    allowed_aspect_ratios: Optional[tuple]
    blocked_lens_categories: frozenset
    style_stacking: StyleStackingAnalysis
    warning_message: Optional[str]
    camera_category: str = "none"

    def is_blocked(self, dimension: Dimension, value: Optional[str]) -> bool:
        return value in self.blocked.get(Dimension(dimension), ())

    def reason_for(self, dimension: Dimension, value: str) -> Optional[BlockReason]:
        return self.block_reasons.get(Dimension(dimension), {}).get(value)

    def hard_blocked(self, dimension: Dimension) -> frozenset:
        """Blocked values that should be disabled rather than just annotated."""
        reasons = self.block_reasons.get(Dimension(dimension), {})
        return frozenset(v for v, r in reasons.items() if r.severity == HARD)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.active_conflicts)

    @property
    def zoom_options(self) -> Optional[tuple]:
        return self.zoom_range.options if self.zoom_range else None

    @property
    def style_stacking_warning(self) -> Optional[str]:
        return self.style_stacking.warning_message

    @property
    def blocked_cameras(self) -> frozenset:
        return self.blocked[Dimension.CAMERA]

    @property
    def blocked_lenses(self) -> frozenset:
        return self.blocked[Dimension.LENS]

    @property
    def blocked_shots(self) -> frozenset:
        return self.blocked[Dimension.SHOT]

    @property
    def blocked_dof(self) -> frozenset:
        return self.blocked[Dimension.DOF]

    @property
    def blocked_aspect_ratios(self) -> frozenset:
        return self.blocked[Dimension.ASPECT_RATIO]

    @property
    def blocked_atmospheres(self) -> frozenset:
        return self.blocked[Dimension.ATMOSPHERE]

    @property
    def blocked_presets(self) -> frozenset:
        return self.blocked[Dimension.PRESET]

    @property
    def blocked_lighting(self) -> frozenset:
        return self.blocked[Dimension.LIGHTING]

    @property
    def blocked_locations(self) -> frozenset:
        return self.blocked[Dimension.LOCATION]

    @property
    def camera_block_reasons(self) -> Mapping:
        return self.block_reasons[Dimension.CAMERA]

    @property
    def atmosphere_block_reasons(self) -> Mapping:
        return self.block_reasons[Dimension.ATMOSPHERE]

    @property
    def preset_block_reasons(self) -> Mapping:
        return self.block_reasons[Dimension.PRESET]

    @property
    def dof_block_reasons(self) -> Mapping:
        return self.block_reasons[Dimension.DOF]

    @property
    def lighting_block_reasons(self) -> Mapping:
        return self.block_reasons[Dimension.LIGHTING]

    def to_dict(self) -> dict:
        return {
            "blocked": {d.value: sorted(v) for d, v in self.blocked.items() if v},
            "block_reasons": {
                d.value: {
                    value: {"source": r.source, "reason": r.reason, "severity": r.severity}
                    for value, r in reasons.items()
                }
                for d, reasons in self.block_reasons.items() if reasons
            },
            "active_conflicts": list(self.active_conflicts),
            "stacking_warnings": [
                {"category": w.category, "message": w.message,
                 "terms": list(w.terms), "severity": w.severity}
                for w in self.stacking_warnings
            ],
            "fixed_lens": self.fixed_lens,
            "zoom_range": self.zoom_range.range if self.zoom_range else None,
            "zoom_options": list(self.zoom_options) if self.zoom_range else None,
            "allowed_aspect_ratios": (
                list(self.allowed_aspect_ratios) if self.allowed_aspect_ratios is not None else None
            ),
            "blocked_lens_categories": sorted(self.blocked_lens_categories),
            "style_total_assertions": self.style_stacking.total_assertions,
            "style_overloaded_categories": list(self.style_stacking.overloaded_categories),
            "warning_message": self.warning_message,
            "camera_category": self.camera_category,
        }


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve_conflicts(selection: Selection, store: Optional[RuleStore] = None) -> ConflictResult:
    """Compute blocked values, reasons, active conflicts and stacking warnings.

    Never raises for a well-formed Selection; unknown values fall back to
    the neutral category. Only the most recent (selection, store) pair is
    memoized.
    """
    return _resolve_cached(selection, store or default_store())


@functools.lru_cache(maxsize=1)
def _resolve_cached(selection: Selection, store: RuleStore) -> ConflictResult:
    return _resolve(selection, store)


def trigger_value(selection: Selection, dimension: Dimension) -> Optional[str]:
    """The catalogue value that fires rules, or ``None`` for custom and unknown values."""
    if selection.has_custom(dimension):
        return None
    value = selection.get(dimension)
    return value if in_domain(dimension, value) else None


def _resolve(selection: Selection, store: RuleStore) -> ConflictResult:
    blocked = {dim: set() for dim in ENGINE_DIMENSIONS}
    reasons = {dim: {} for dim in ENGINE_DIMENSIONS}

    edges_by_source = {}
    for dimension, _ in RESOLUTION_ORDER:
        if dimension not in edges_by_source:
            edges_by_source[dimension] = store.lookup(dimension, trigger_value(selection, dimension))

    for dimension, rule_kinds in RESOLUTION_ORDER:
        for edge in edges_by_source[dimension]:
            if edge.rule not in rule_kinds:
                continue
            source = edge.source_label
            for value in sorted(edge.blocked_values):
                _block(blocked, reasons, edge.target_dimension, value,
                       BlockReason(source, edge.reason, edge.severity, edge.rule))

    camera = trigger_value(selection, Dimension.CAMERA)
    zoom = store.zoom_range_for(camera)
    fixed_lens = None if zoom else store.fixed_lens_for(camera)
    allowed_ratios = store.allowed_aspect_ratios_for(camera)
    category = store.camera_category(camera)

    blocked_lens_categories = frozenset(
        store.lens_category(lens) for lens in blocked[Dimension.LENS]
    )

    active = _active_conflicts(selection, blocked, reasons)
    active.extend(_lens_conflicts(selection, camera, fixed_lens, zoom))

    analysis = analyze_style_stacking(
        trigger_value(selection, Dimension.DIRECTOR),
        trigger_value(selection, Dimension.ATMOSPHERE),
        trigger_value(selection, Dimension.PRESET),
        trigger_value(selection, Dimension.LIGHTING),
    )
    warnings = detect_effect_stacking(selection)
    overload = style_warning(analysis)
    if overload is not None:
        warnings.append(overload)

    return ConflictResult(
        blocked=MappingProxyType({dim: frozenset(values) for dim, values in blocked.items()}),
        block_reasons=MappingProxyType(
            {dim: MappingProxyType(by_value) for dim, by_value in reasons.items()}
        ),
        active_conflicts=tuple(active),
        stacking_warnings=tuple(warnings),
        fixed_lens=fixed_lens,
        zoom_range=zoom,
        allowed_aspect_ratios=allowed_ratios,
        blocked_lens_categories=blocked_lens_categories,
        style_stacking=analysis,
        warning_message=store.category_rules(category).get("warning"),
        camera_category=category,
    )


def _block(blocked: dict, reasons: dict, dimension: Dimension, value: str, reason: BlockReason) -> None:
    """Insert-if-absent: the first rule to block a value keeps its reason."""
    if is_neutral(dimension, value):
        return
    blocked[dimension].add(value)
    existing = reasons[dimension].get(value)
    if existing is None:
        reasons[dimension][value] = reason
    elif existing != reason:
        logger.debug("Keeping first reason for %s %r; suppressed %s", dimension.value, value, reason.source)


def _active_conflicts(selection: Selection, blocked: dict, reasons: dict) -> list:
    messages = []
    for dimension in ENGINE_DIMENSIONS:
        if selection.has_custom(dimension):
            continue
        value = selection.get(dimension)
        if value is None or is_neutral(dimension, value):
            continue
        if value not in blocked[dimension]:
            continue
        reason = reasons[dimension][value]
        messages.append(
            f'"{display_name(dimension, value)}" {dimension.noun} conflicts with '
            f"{reason.source}: {reason.reason}"
        )
    return messages


def _lens_conflicts(selection: Selection, camera: Optional[str], fixed_lens: Optional[str],
                    zoom: Optional[ZoomRange]) -> list:
    lens = selection.custom_lens or selection.lens
    if not lens:
        return []
    if fixed_lens:
        return [f'Lens "{lens}" is ignored: {camera} has a fixed {fixed_lens}']
    if zoom and not selection.custom_lens and lens not in zoom.options:
        return [
            f'Lens "{lens}" is not a zoom position on {camera} ({zoom.range}); '
            f"choose one of {', '.join(zoom.options)}"
        ]
    return []
