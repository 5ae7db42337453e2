"""
Tests for the consistent assignment sampler.

Run with:  pytest prompt_conflict_engine/tests/test_sampler.py -v
"""

import sys
import os
import logging

import pytest

# Ensure the package is importable when running tests from this directory.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from prompt_conflict_engine.config import NEUTRAL_PRESETS, SAMPLER_RESIDUAL_TOLERANCE
from prompt_conflict_engine.dimensions import Dimension, Selection
from prompt_conflict_engine.options import (
    CAMERA_OPTIONS,
    LOCATION_OPTIONS,
    MAGIC_SUBJECTS,
    domain,
    find_subject,
    is_human_subject,
)
from prompt_conflict_engine.resolver import resolve_conflicts
from prompt_conflict_engine.rules import ATMOSPHERE_LIGHTING_REDUNDANCY, RuleStore, default_store
from prompt_conflict_engine.sampler import (
    SAMPLING_ORDER,
    _normalize_locked,
    residual_conflict_rate,
    sample_consistent_assignment,
    sample_sections,
)
from prompt_conflict_engine.subject_location import is_location_compatible

F1_CAR = "A Formula 1 car exploding through a rain spray at 200mph"
COWBOY = "A lone cowboy silhouetted against a burning sunset in the Arizona desert"

UNSAFE_TEXTS = {s.text for s in MAGIC_SUBJECTS if s.safe_text}
SAFE_TEXTS = {s.safe_text for s in MAGIC_SUBJECTS if s.safe_text}

LOCK_COMBOS = [
    (),
    ("camera",),
    ("director",),
    ("atmosphere", "lighting"),
    ("subject", "location"),
    ("visual", "advanced"),
    (Dimension.CAMERA, Dimension.DIRECTOR),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _lens_may_be_empty(selection):
    store = default_store()
    return bool(store.fixed_lens_for(selection.camera) or store.zoom_range_for(selection.camera))


def _assert_total(selection, current, locked):
    for dimension in Dimension:
        value = selection.get(dimension)
        if dimension in locked:
            assert value == current.get(dimension), f"locked {dimension.value} changed"
            continue
        if dimension == Dimension.LENS and _lens_may_be_empty(selection):
            assert value is None
            continue
        if dimension in (Dimension.GAZE, Dimension.POSE) and not is_human_subject(selection.subject):
            assert value is None
            continue
        assert value is not None, f"{dimension.value} left empty"
        assert value in domain(dimension), f"{dimension.value}={value!r} not in catalogue"


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

class TestSamplingOrder:
    def test_covers_every_dimension_once(self):
        assert sorted(SAMPLING_ORDER) == sorted(Dimension)
        assert len(SAMPLING_ORDER) == len(set(SAMPLING_ORDER))

    def test_context_dimensions_come_first(self):
        assert SAMPLING_ORDER[:4] == (
            Dimension.SUBJECT, Dimension.LOCATION, Dimension.DIRECTOR, Dimension.CAMERA,
        )


# ---------------------------------------------------------------------------
# Totality and quality
# ---------------------------------------------------------------------------

class TestTotality:
    def test_every_unlocked_dimension_is_filled(self):
        currents = [sample_consistent_assignment(seed=1000 + i) for i in range(len(LOCK_COMBOS))]
        for trial in range(1000):
            combo_index = trial % len(LOCK_COMBOS)
            current = currents[combo_index]
            locked_names = LOCK_COMBOS[combo_index]
            locked = _normalize_locked(locked_names)

            selection = sample_consistent_assignment(current, locked_names, seed=trial)
            _assert_total(selection, current, locked)

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_camera_section_lock_keeps_camera_fields(self, seed):
        current = Selection(camera="ARRI Alexa", lens="50mm", shot="Medium Shot (MS)", aspect_ratio="16:9")
        selection = sample_consistent_assignment(current, ["camera"], seed=seed)
        assert (selection.camera, selection.lens, selection.shot, selection.aspect_ratio) == (
            "ARRI Alexa", "50mm", "Medium Shot (MS)", "16:9",
        )


class TestQuality:
    def test_residual_rate_within_tolerance(self):
        rate = residual_conflict_rate(1000, seed=2024)
        assert rate <= SAMPLER_RESIDUAL_TOLERANCE, f"residual rate {rate:.2%}"

    @pytest.mark.parametrize("locked", [("camera",), ("director", "atmosphere")])
    def test_residual_rate_with_locks(self, locked):
        current = sample_consistent_assignment(seed=77)
        rate = residual_conflict_rate(200, locked, seed=5, current=current)
        assert rate <= SAMPLER_RESIDUAL_TOLERANCE

    def test_zero_trials(self):
        assert residual_conflict_rate(0) == 0.0

    @pytest.mark.parametrize("seed", range(25))
    def test_resolves_without_conflicts(self, seed):
        selection = sample_consistent_assignment(seed=seed)
        assert resolve_conflicts(selection).active_conflicts == ()


# ---------------------------------------------------------------------------
# Locks
# ---------------------------------------------------------------------------

class TestLocks:
    @pytest.mark.parametrize("seed", range(30))
    def test_only_atmosphere_and_lighting_unlocked(self, seed):
        current = sample_consistent_assignment(seed=seed)
        locked = [d for d in Dimension if d not in (Dimension.ATMOSPHERE, Dimension.LIGHTING)]

        selection = sample_consistent_assignment(current, locked, seed=seed + 500)

        for dimension in locked:
            assert selection.get(dimension) == current.get(dimension)
        assert selection.lighting not in ATMOSPHERE_LIGHTING_REDUNDANCY.get(selection.atmosphere, ())
        assert resolve_conflicts(selection).active_conflicts == ()

    def test_everything_locked_is_identity(self):
        current = sample_consistent_assignment(seed=9)
        assert sample_consistent_assignment(current, list(Dimension), seed=10) == current

    def test_locked_custom_value_survives(self):
        current = Selection(camera="VHS Camcorder", custom_camera="Grandpa's camcorder")
        selection = sample_consistent_assignment(current, ["camera"], seed=3)
        assert selection.custom_camera == "Grandpa's camcorder"

    def test_unlocked_custom_value_is_cleared(self):
        current = Selection(custom_lens="Helios 44-2")
        selection = sample_consistent_assignment(current, seed=3)
        assert selection.custom_lens is None

    def test_unknown_lock_section(self):
        with pytest.raises(ValueError):
            sample_consistent_assignment(locked=["wardrobe"], seed=1)


# ---------------------------------------------------------------------------
# Step preferences
# ---------------------------------------------------------------------------

class TestStepPreferences:
    def test_seed_is_reproducible(self):
        assert sample_consistent_assignment(seed=42) == sample_consistent_assignment(seed=42)

    @pytest.mark.parametrize("seed", range(60))
    def test_never_pov_with_a_subject(self, seed):
        assert sample_consistent_assignment(seed=seed).shot != "POV"

    @pytest.mark.parametrize("seed", range(10))
    def test_lens_cleared_for_fixed_lens_camera(self, seed):
        selection = sample_consistent_assignment(Selection(camera="GoPro"), [Dimension.CAMERA], seed=seed)
        assert selection.lens is None

    @pytest.mark.parametrize("seed", range(10))
    def test_lens_chosen_for_interchangeable_camera(self, seed):
        selection = sample_consistent_assignment(Selection(camera="ARRI Alexa"), [Dimension.CAMERA], seed=seed)
        assert selection.lens is not None

    @pytest.mark.parametrize("seed", range(10))
    def test_aspect_ratio_from_camera(self, seed):
        selection = sample_consistent_assignment(Selection(camera="Polaroid SX-70"), [Dimension.CAMERA], seed=seed)
        assert selection.aspect_ratio == "1:1"

    @pytest.mark.parametrize("seed", range(30))
    def test_location_fits_subject(self, seed):
        selection = sample_consistent_assignment(Selection(subject=F1_CAR), ["subject"], seed=seed)
        assert is_location_compatible(F1_CAR, selection.location)

    @pytest.mark.parametrize("seed", range(10))
    def test_gaze_and_pose_follow_subject(self, seed):
        vehicle = sample_consistent_assignment(Selection(subject=F1_CAR), ["subject"], seed=seed)
        assert vehicle.gaze is None and vehicle.pose is None

        person = sample_consistent_assignment(Selection(subject=COWBOY), ["subject"], seed=seed)
        assert person.gaze is not None and person.pose is not None

    @pytest.mark.parametrize("seed", range(30))
    def test_atmosphere_avoids_director_overlap(self, seed):
        current = Selection(director="David Fincher", location="City Street", camera="ARRI Alexa")
        locked = [Dimension.DIRECTOR, Dimension.LOCATION, Dimension.CAMERA]
        selection = sample_consistent_assignment(current, locked, seed=seed)
        assert selection.atmosphere in {"cinematic", "studio", "vintage", "epic"}

    @pytest.mark.parametrize("seed", range(30))
    def test_neutral_preset_under_heavy_styling(self, seed):
        current = Selection(director="Christopher Nolan", atmosphere="cyberpunk", camera="ARRI Alexa")
        locked = [Dimension.DIRECTOR, Dimension.ATMOSPHERE, Dimension.CAMERA]
        selection = sample_consistent_assignment(current, locked, seed=seed)
        assert selection.preset in NEUTRAL_PRESETS


# ---------------------------------------------------------------------------
# Safe mode
# ---------------------------------------------------------------------------

class TestSafeMode:
    @pytest.mark.parametrize("seed", range(200))
    def test_never_picks_a_subject_with_a_safe_alternative(self, seed):
        selection = sample_consistent_assignment(seed=seed, safe_mode=True)
        assert selection.subject not in UNSAFE_TEXTS, f"seed={seed}: {selection.subject}"
        assert find_subject(selection.subject) is not None

    def test_safe_texts_are_used(self):
        picked = {sample_consistent_assignment(seed=seed, safe_mode=True).subject for seed in range(400)}
        assert picked & SAFE_TEXTS

    def test_default_mode_keeps_catalogue_texts(self):
        picked = {sample_consistent_assignment(seed=seed, safe_mode=False).subject for seed in range(400)}
        assert not picked & SAFE_TEXTS
        assert picked <= set(domain(Dimension.SUBJECT))

    @pytest.mark.parametrize("seed", range(5))
    def test_same_seed_same_subject_entry(self, seed):
        plain = sample_consistent_assignment(seed=seed)
        safe = sample_consistent_assignment(seed=seed, safe_mode=True)
        assert find_subject(plain.subject) is find_subject(safe.subject)

    def test_locked_subject_is_not_swapped(self):
        current = Selection(subject=F1_CAR)
        selection = sample_consistent_assignment(current, ["subject"], seed=2, safe_mode=True)
        assert selection.subject == F1_CAR

    @pytest.mark.parametrize("seed", range(20))
    def test_safe_subject_keeps_location_plausible(self, seed):
        safe_f1 = find_subject(F1_CAR).safe_text
        selection = sample_consistent_assignment(Selection(subject=safe_f1), ["subject"], seed=seed)
        assert is_location_compatible(safe_f1, selection.location)
        assert selection.gaze is None and selection.pose is None

    def test_residual_rate_in_safe_mode(self):
        assert residual_conflict_rate(200, seed=11, safe_mode=True) <= SAMPLER_RESIDUAL_TOLERANCE


# ---------------------------------------------------------------------------
# Per-section randomize
# ---------------------------------------------------------------------------

class TestSampleSections:
    @pytest.mark.parametrize("seed", range(20))
    def test_only_named_section_changes(self, seed):
        current = sample_consistent_assignment(seed=seed)
        selection = sample_sections(current, ["camera"], seed=seed + 100)

        camera_dims = {Dimension.CAMERA, Dimension.LENS, Dimension.SHOT, Dimension.ASPECT_RATIO}
        for dimension in Dimension:
            if dimension not in camera_dims:
                assert selection.get(dimension) == current.get(dimension), dimension.value
        assert selection.camera is not None

    @pytest.mark.parametrize("seed", range(20))
    def test_group_reroll_stays_consistent(self, seed):
        current = sample_consistent_assignment(seed=seed)
        selection = sample_sections(current, ["atmosphere", "visual", "lighting"], seed=seed + 7)
        assert selection.director == current.director
        assert selection.camera == current.camera
        assert resolve_conflicts(selection).active_conflicts == ()

    def test_accepts_dimensions(self):
        current = Selection(camera="ARRI Alexa", dof="deep")
        selection = sample_sections(current, [Dimension.DOF], seed=1)
        assert selection.camera == "ARRI Alexa"
        assert selection.dof in domain(Dimension.DOF)

    def test_unknown_section(self):
        with pytest.raises(ValueError):
            sample_sections(Selection(), ["wardrobe"])


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

class TestFallback:
    @pytest.fixture
    def blocking_store(self):
        return RuleStore(director_rules={
            "Wes Anderson": {"atmospheres": (), "presets": (), "cameras": CAMERA_OPTIONS},
        })

    def test_falls_back_to_full_domain(self, blocking_store, caplog):
        caplog.set_level(logging.DEBUG, logger="prompt_conflict_engine.sampler")
        current = Selection(director="Wes Anderson")

        selection = sample_consistent_assignment(current, ["director"], seed=4, store=blocking_store)

        assert selection.camera in CAMERA_OPTIONS
        assert selection.location in LOCATION_OPTIONS
        result = resolve_conflicts(selection, blocking_store)
        assert any(m.startswith(f'"{selection.camera}" camera') for m in result.active_conflicts)
        assert "falling back" in caplog.text

    def test_rate_reports_forced_conflicts(self, blocking_store):
        rate = residual_conflict_rate(
            20, ["director"], seed=1, current=Selection(director="Wes Anderson"), store=blocking_store,
        )
        assert rate == 1.0
