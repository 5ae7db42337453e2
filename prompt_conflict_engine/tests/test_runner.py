"""
Tests for the run_randomize command line runner.
"""

import sys
import os
import json

import pytest

# Ensure the package and the runner script are importable.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from prompt_conflict_engine.dimensions import Selection
from prompt_conflict_engine.options import MAGIC_SUBJECTS
from run_randomize import main, parse_assignments


class TestParseAssignments:
    def test_values_and_custom_fields(self):
        selection = parse_assignments([
            "camera=VHS Camcorder",
            "aspect-ratio=4:3",
            "custom_lens=Helios 44-2",
        ])
        assert selection.camera == "VHS Camcorder"
        assert selection.aspect_ratio == "4:3"
        assert selection.custom_lens == "Helios 44-2"
        assert selection.dof == "normal"

    def test_empty_value_clears(self):
        assert parse_assignments(["dof="]).dof is None

    def test_no_assignments(self):
        assert parse_assignments([]) == Selection()

    @pytest.mark.parametrize("pair", ["camera", "wardrobe=red"])
    def test_invalid_pairs(self, pair):
        with pytest.raises(ValueError):
            parse_assignments([pair])


class TestCommands:
    def test_check_reports_conflict(self, capsys):
        code = main(["check", "--set", "camera=VHS Camcorder", "--set", "atmosphere=cyberpunk"])
        out = capsys.readouterr().out
        assert code == 1
        assert "conflicts with" in out
        assert "CONFLICT CHECK" in out

    def test_check_clean_selection(self, capsys):
        assert main(["check", "--set", "camera=ARRI Alexa"]) == 0

    def test_check_json(self, capsys):
        main(["check", "--json", "--set", "camera=Contax T2", "--set", "lens=50mm"])
        payload = json.loads(capsys.readouterr().out)
        assert payload["result"]["fixed_lens"] == "Zeiss Sonnar 38mm f/2.8"
        assert payload["selection"]["camera"] == "Contax T2"

    def test_randomize_json(self, capsys):
        assert main(["randomize", "--seed", "3", "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["result"]["active_conflicts"] == []
        assert "camera" in payload["selection"]

    def test_randomize_with_lock(self, capsys):
        code = main([
            "randomize", "--seed", "8", "--json",
            "--lock", "camera", "--set", "camera=Polaroid SX-70",
        ])
        payload = json.loads(capsys.readouterr().out)
        assert code == 0
        assert payload["selection"]["camera"] == "Polaroid SX-70"

    def test_rate(self, capsys):
        assert main(["rate", "--trials", "40", "--seed", "1"]) == 0
        assert "SAMPLER RESIDUAL CONFLICT RATE" in capsys.readouterr().out

    def test_rate_zero_trials_is_respected(self, capsys):
        assert main(["rate", "--trials", "0"]) == 0
        out = capsys.readouterr().out
        assert "Trials:    0\n" in out
        assert "Rate:      0.00%" in out

    def test_randomize_safe_mode(self, capsys):
        unsafe = {s.text for s in MAGIC_SUBJECTS if s.safe_text}
        for seed in range(20):
            assert main(["randomize", "--seed", str(seed), "--json", "--safe-mode"]) == 0
            payload = json.loads(capsys.readouterr().out)
            assert payload["selection"]["subject"] not in unsafe

    def test_bad_dimension_exits_with_error(self, capsys):
        assert main(["check", "--set", "bogus=1"]) == 2
        assert "ERROR" in capsys.readouterr().out

    def test_bad_lock_section_exits_with_error(self, capsys):
        assert main(["randomize", "--lock", "wardrobe"]) == 2
