"""Tests for the YAML configuration loader.

Run with: pytest tests/test_config.py -v
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from src.alignment.config import AlignmentConfig, SolverConfig, load_config

DEFAULT_CONFIG = Path(__file__).resolve().parents[1] / "config" / "default_alignment.yaml"


class TestLoadConfig:
    def test_defaults(self):
        cfg = AlignmentConfig()

        assert cfg.solver.strategy == "optimal"
        assert cfg.solver.lp_backend == "highs"
        assert cfg.benchmark.n_archetypes == 5

    def test_shipped_default_file_matches_dataclasses(self):
        """The YAML shipped in config/ restates the dataclass defaults."""
        assert load_config(DEFAULT_CONFIG) == AlignmentConfig()

    def test_partial_sections(self, tmp_path):
        path = tmp_path / "align.yaml"
        path.write_text("solver:\n  strategy: exhaustive\n  exhaustive_warn_above: 8\n")

        cfg = load_config(path)

        assert cfg.solver.strategy == "exhaustive"
        assert cfg.solver.exhaustive_warn_above == 8
        assert cfg.solver.lp_backend == "highs"
        assert cfg.benchmark == AlignmentConfig().benchmark

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(str(path)) == AlignmentConfig()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("solver:\n  max_iterations: 5\n")

        with pytest.raises(TypeError):
            load_config(path)

    def test_frozen(self):
        cfg = SolverConfig()
        with pytest.raises(AttributeError):
            cfg.strategy = "exhaustive"  # type: ignore[misc]
