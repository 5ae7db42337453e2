"""
Tests for style-stacking analysis and effect-stacking warnings.
"""

import sys
import os

import pytest

# Ensure the package is importable when running tests from this directory.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from prompt_conflict_engine.dimensions import Dimension, Selection
from prompt_conflict_engine.rules import REDUNDANCY_WARNINGS
from prompt_conflict_engine.style_stacking import (
    STYLE_CATEGORIES,
    analyze_style_stacking,
    detect_effect_stacking,
    implied_styles,
    reducing_options,
    style_warning,
)


# ---------------------------------------------------------------------------
# Category tally
# ---------------------------------------------------------------------------

class TestAnalyzeStyleStacking:
    def test_nothing_selected(self):
        analysis = analyze_style_stacking()
        assert analysis.total_assertions == 0
        assert not analysis.has_style_overload
        assert analysis.overloaded_categories == ()
        assert analysis.warning_message is None
        assert set(analysis.category_counts) == set(STYLE_CATEGORIES)

    def test_single_dimension_never_overloads(self):
        analysis = analyze_style_stacking(atmosphere="cyberpunk")
        assert analysis.total_assertions == 3
        assert not analysis.has_style_overload

    def test_heavy_stack(self):
        analysis = analyze_style_stacking("Christopher Nolan", "moody", "highcontrast", "lowkey")

        assert analysis.category_counts["contrast"] == 4
        assert analysis.category_counts["mood"] == 2
        assert analysis.total_assertions == 8
        assert analysis.overloaded_categories == ("contrast", "mood")
        assert analysis.warning_message == (
            "Style stacking detected: Contrast, Mood asserted by multiple selections"
        )

    def test_total_is_sum_of_counts(self):
        analysis = analyze_style_stacking("Wong Kar-wai", "romantic", "filmlook", "neon")
        assert analysis.total_assertions == sum(analysis.category_counts.values())

    def test_threshold_override(self):
        analysis = analyze_style_stacking("Christopher Nolan", "moody", threshold=3)
        assert not analysis.has_style_overload

    def test_unknown_values_contribute_nothing(self):
        analysis = analyze_style_stacking("Roger Deakins", "noir", "sepia", "candlelight")
        assert analysis.total_assertions == 0

    def test_contributors_use_display_names(self):
        analysis = analyze_style_stacking("Christopher Nolan", "moody", "highcontrast")
        assert analysis.contributors["contrast"] == ("Christopher Nolan", "Moody", "High Contrast")

    def test_implied_styles_lookup(self):
        assert implied_styles(Dimension.PRESET, "bleachbypass") == ("color", "contrast", "film")
        assert implied_styles(Dimension.LIGHTING, "practical") == ()
        assert implied_styles(Dimension.CAMERA, "ARRI Alexa") == ()
        assert implied_styles(Dimension.DIRECTOR, None) == ()


class TestReducingOptions:
    def test_avoid_values_feeding_overloaded_category(self):
        analysis = analyze_style_stacking("Christopher Nolan", "moody")
        avoid = reducing_options(analysis, director="Christopher Nolan", atmosphere="moody")

        assert "highcontrast" in avoid[Dimension.PRESET]
        assert "bleachbypass" in avoid[Dimension.PRESET]
        assert "raw" not in avoid[Dimension.PRESET]
        assert "moody" not in avoid[Dimension.ATMOSPHERE]
        assert "cyberpunk" in avoid[Dimension.ATMOSPHERE]
        assert "Christopher Nolan" not in avoid[Dimension.DIRECTOR]

    def test_nothing_to_avoid_without_overload(self):
        avoid = reducing_options(analyze_style_stacking(atmosphere="natural"))
        assert all(values == [] for values in avoid.values())


class TestStyleWarning:
    def test_no_warning_without_overload(self):
        assert style_warning(analyze_style_stacking(director="Tim Burton")) is None

    def test_strong_when_three_or_more(self):
        warning = style_warning(analyze_style_stacking("Christopher Nolan", "moody", "highcontrast", "lowkey"))
        assert warning.category == "style"
        assert warning.severity == "strong"
        assert warning.terms == ("Christopher Nolan", "Moody", "High Contrast", "Low Key")

    def test_mild_when_two(self):
        warning = style_warning(analyze_style_stacking("Christopher Nolan", "moody"))
        assert warning.severity == "mild"


# ---------------------------------------------------------------------------
# Effect stacking
# ---------------------------------------------------------------------------

class TestBlurStacking:
    def test_dreamy_shallow_is_mild(self):
        warnings = detect_effect_stacking(Selection(atmosphere="dreamy", dof="shallow"))
        assert len(warnings) == 1
        assert warnings[0].category == "blur"
        assert warnings[0].severity == "mild"
        assert warnings[0].terms == ("Dreamy", "Shallow (Bokeh)")

    def test_dreamy_tilt_shift_is_stronger(self):
        mild = detect_effect_stacking(Selection(atmosphere="dreamy", dof="shallow"))[0]
        strong = detect_effect_stacking(Selection(atmosphere="dreamy", dof="tilt-shift"))
        assert len(strong) == 1
        assert strong[0].severity == "strong"
        assert strong[0].message != mild.message
        assert strong[0].terms == ("Dreamy", "Tilt-Shift")

    @pytest.mark.parametrize("dof", ["deep", "normal"])
    def test_no_blur_without_second_source(self, dof):
        warnings = detect_effect_stacking(Selection(atmosphere="dreamy", dof=dof))
        assert [w for w in warnings if w.category == "blur"] == []

    def test_macro_shallow(self):
        warnings = detect_effect_stacking(Selection(lens="Macro", dof="shallow"))
        assert [w.terms for w in warnings] == [("Macro", "Shallow (Bokeh)")]

    def test_custom_lens_skips_rule(self):
        warnings = detect_effect_stacking(Selection(lens="Macro", custom_lens="Laowa 24mm f/14", dof="shallow"))
        assert warnings == []


class TestOtherStacking:
    def test_high_resolution_deep_focus(self):
        warnings = detect_effect_stacking(Selection(camera="Sony A1", dof="deep"))
        assert [w.category for w in warnings] == ["quality"]

    def test_low_resolution_deep_focus(self):
        assert detect_effect_stacking(Selection(camera="Super 8", dof="deep")) == []

    def test_atmosphere_lighting_redundancy(self):
        warnings = detect_effect_stacking(Selection(atmosphere="cyberpunk", lighting="neon"))
        assert len(warnings) == 1
        assert warnings[0].category == "mood"
        assert warnings[0].message == REDUNDANCY_WARNINGS["cyberpunk+neon"]

    def test_director_lighting_redundancy(self):
        warnings = detect_effect_stacking(Selection(director="Wong Kar-wai", lighting="neon"))
        assert warnings[0].message == "Wong Kar-wai's style already includes Cyberpunk Neon lighting"
        assert warnings[0].terms == ("Wong Kar-wai", "Cyberpunk Neon")

    def test_director_atmosphere_redundancy(self):
        warnings = detect_effect_stacking(Selection(director="David Lynch", atmosphere="moody"))
        assert [w.category for w in warnings] == ["mood"]

    def test_custom_rule_table(self):
        rules = [{
            "category": "color",
            "when": {Dimension.PRESET: ("vivid",), Dimension.COLOR_PALETTE: ("neon-cyberpunk",)},
            "severity": "mild",
            "message": "Vivid grade on a neon palette oversaturates",
        }]
        selection = Selection(preset="vivid", color_palette="neon-cyberpunk")
        warnings = detect_effect_stacking(selection, rules)
        assert warnings[0].terms == ("Vivid", "Neon Cyberpunk")
