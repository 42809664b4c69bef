"""
Smoke tests for the strategy benchmark and the command-line script.

These run a handful of tiny scenarios to verify the full pipeline:
scenario generated → every solver aligns it → table printed.

Run with: pytest tests/test_benchmark.py -v
"""

import importlib.util
import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.alignment.benchmark import generate_scenario, run_benchmark
from src.alignment.config import AlignmentConfig, BenchmarkConfig


def _load_cli():
    path = ROOT / "scripts" / "run_alignment.py"
    spec = importlib.util.spec_from_file_location("run_alignment", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def quick_config() -> AlignmentConfig:
    """Four noiseless 2-D archetypes, three scenarios."""
    return AlignmentConfig(
        benchmark=BenchmarkConfig(
            n_scenarios=3,
            n_dims=2,
            n_archetypes=4,
            noise_sd=0.0,
            random_seed=7,
        )
    )


class TestScenario:
    def test_planted_matching_undoes_shuffle(self):
        rng = np.random.default_rng(0)
        scenario = generate_scenario(3, 6, 0.0, rng)

        assert scenario.arc1.shape == (3, 6)
        np.testing.assert_array_equal(scenario.arc2[:, scenario.planted], scenario.arc1)


class TestRunBenchmark:
    def test_all_solvers_agree_and_recover(self, quick_config, capsys):
        results = run_benchmark(quick_config, ["exhaustive", "highs", "lap"])

        for name in ("exhaustive", "highs", "lap"):
            assert len(results[name]["dist"]) == 3
            assert all(results[name]["agree"])
            assert all(results[name]["recovered"])

        out = capsys.readouterr().out
        assert "Archetype Alignment Benchmark" in out
        assert "Agreement w/ exhaustive (%)" in out


class TestCommandLine:
    @pytest.fixture
    def arc_files(self, tmp_path):
        arc1 = np.array([[0.0, 10.0, 0.0], [0.0, 0.0, 10.0]])
        arc2 = np.array([[0.0, 0.0, 10.0], [10.0, 0.0, 0.0]])
        p1, p2 = tmp_path / "arc1.csv", tmp_path / "arc2.csv"
        np.savetxt(p1, arc1, delimiter=",")
        np.savetxt(p2, arc2, delimiter=",")
        return arc1, p1, p2

    def test_aligns_and_writes_output(self, arc_files, tmp_path, capsys):
        arc1, p1, p2 = arc_files
        out_path = tmp_path / "aligned.npy"

        code = _load_cli().main(
            [str(p1), str(p2), "--config", str(tmp_path / "missing.yaml"), "--output", str(out_path)]
        )

        assert code == 0
        np.testing.assert_allclose(np.load(out_path), arc1)
        out = capsys.readouterr().out
        assert "Alignment: optimal (highs)" in out
        assert "Total distance:" in out

    def test_shape_mismatch_exit_code(self, tmp_path, capsys):
        p1, p2 = tmp_path / "a.csv", tmp_path / "b.csv"
        np.savetxt(p1, np.zeros((2, 3)), delimiter=",")
        np.savetxt(p2, np.zeros((2, 4)), delimiter=",")

        code = _load_cli().main([str(p1), str(p2), "--strategy", "exhaustive"])

        assert code == 1
        assert "different number of archetypes" in capsys.readouterr().err
