"""
src/alignment/benchmark.py
──────────────────────────────────────────────────────────────────────────────
Benchmark: alignment strategies head-to-head.

Each scenario draws a random archetype set, shuffles its columns and adds
Gaussian jitter, then aligns the copy back onto the original with every
selected solver. The exhaustive optimum is the reference answer.

Metrics per solver:
  • Total matched distance
  • Solve time            (wall-clock, ms; mean / P95 / max)
  • Agreement rate        (|dist − exhaustive dist| ≤ tolerance)
  • Recovery rate         (matching equals the planted shuffle)

Usage:
    python -m src.alignment.benchmark                        # config defaults
    python -m src.alignment.benchmark --scenarios 200 --archetypes 7
    python -m src.alignment.benchmark --solvers highs lap
    python -m src.alignment.benchmark --config config/default_alignment.yaml
"""

from __future__ import annotations

import argparse
import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path

import numpy as np

from src.alignment.align import align_archetypes
from src.alignment.config import AlignmentConfig, BenchmarkConfig, SolverConfig, load_config

logger = logging.getLogger(__name__)

ALL_SOLVERS: tuple[str, ...] = ("exhaustive", "highs", "lap", "cpsat")


# ── Scenario generation ───────────────────────────────────────────────────────


@dataclass
class BenchmarkScenario:
    """A reference archetype set and a shuffled, jittered copy of it."""

    arc1: np.ndarray
    arc2: np.ndarray
    planted: np.ndarray  # planted[i] = arc2 column holding arc1 archetype i


def generate_scenario(
    n_dims: int,
    n_archetypes: int,
    noise_sd: float,
    rng: np.random.Generator,
    spread: float = 10.0,
) -> BenchmarkScenario:
    """Draw archetypes ~ N(0, spread²), then permute and jitter them.

    noise_sd is relative to spread, so 0.1 means jitter a tenth of the
    typical archetype separation.
    """
    arc1 = rng.normal(0.0, spread, size=(n_dims, n_archetypes))
    shuffle = rng.permutation(n_archetypes)
    arc2 = arc1[:, shuffle] + rng.normal(0.0, noise_sd * spread, size=(n_dims, n_archetypes))
    # arc2[:, j] came from arc1[:, shuffle[j]]
    return BenchmarkScenario(arc1=arc1, arc2=arc2, planted=np.argsort(shuffle))


def _solver_config(name: str, base: SolverConfig) -> tuple[str, SolverConfig]:
    if name == "exhaustive":
        return "exhaustive", base
    return "optimal", replace(base, lp_backend=name)


# ── Main benchmark loop ───────────────────────────────────────────────────────


def run_benchmark(
    config: AlignmentConfig | None = None,
    solver_names: list[str] | None = None,
) -> dict[str, dict[str, list]]:
    """Run scenarios, print a comparison table, and return the raw samples."""

    config = config or AlignmentConfig()
    bench: BenchmarkConfig = config.benchmark
    active = list(solver_names or ALL_SOLVERS)

    print("=" * 80)
    print("  Archetype Alignment Benchmark")
    print("=" * 80)
    print(
        f"  Scenarios: {bench.n_scenarios}  |  Dims: {bench.n_dims}  |  "
        f"Archetypes: {bench.n_archetypes}  |  Noise: {bench.noise_sd}  |  "
        f"Seed: {bench.random_seed}"
    )
    print(f"  Solvers:   {', '.join(active)}")
    print()

    rng = np.random.default_rng(bench.random_seed)

    results: dict[str, dict[str, list]] = {
        name: {"dist": [], "time_ms": [], "agree": [], "recovered": []} for name in active
    }

    for _ in range(bench.n_scenarios):
        scenario = generate_scenario(bench.n_dims, bench.n_archetypes, bench.noise_sd, rng)
        reference = align_archetypes(
            scenario.arc1, scenario.arc2, strategy="exhaustive", solver_config=config.solver
        )

        for name in active:
            strategy, cfg = _solver_config(name, config.solver)
            t0 = time.perf_counter()
            r = align_archetypes(scenario.arc1, scenario.arc2, strategy=strategy, solver_config=cfg)
            ms = (time.perf_counter() - t0) * 1e3

            results[name]["dist"].append(r.dist)
            results[name]["time_ms"].append(ms)
            results[name]["agree"].append(abs(r.dist - reference.dist) <= bench.tolerance)
            results[name]["recovered"].append(bool(np.array_equal(r.ind, scenario.planted)))

    # ── Print results ─────────────────────────────────────────────────────────
    col_w = 14

    def hdr(label: str) -> str:
        return f"{label:>{col_w}}"

    def val(v: float, fmt: str = ".1f") -> str:
        return f"{v:{col_w}{fmt}}"

    print(f"  {'Metric':<30}" + "".join(hdr(n) for n in active))
    print("  " + "─" * (30 + col_w * len(active)))

    metrics_cfg = [
        ("Avg matched distance", lambda d: np.mean(d["dist"]), ".3f"),
        ("Agreement w/ exhaustive (%)", lambda d: 100.0 * np.mean(d["agree"]), ".1f"),
        ("Planted shuffle recovered (%)", lambda d: 100.0 * np.mean(d["recovered"]), ".1f"),
        ("Avg solve time (ms)", lambda d: np.mean(d["time_ms"]), ".2f"),
        ("P95 solve time (ms)", lambda d: np.percentile(d["time_ms"], 95), ".2f"),
        ("Max solve time (ms)", lambda d: np.max(d["time_ms"]), ".2f"),
    ]

    for label, fn, fmt in metrics_cfg:
        row = f"  {label:<30}"
        for name in active:
            row += val(fn(results[name]), fmt)
        print(row)

    disagreements = {n: len(r["agree"]) - sum(r["agree"]) for n, r in results.items()}
    if any(disagreements.values()):
        logger.warning("solvers disagreeing with the exhaustive optimum: %s", disagreements)

    print("\n" + "=" * 80)
    return results


# ── CLI entry point ───────────────────────────────────────────────────────────

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Benchmark archetype alignment strategies")
    parser.add_argument("--config", type=str, default=None, help="Path to alignment config YAML")
    parser.add_argument("--scenarios", type=int, default=None)
    parser.add_argument("--dims", type=int, default=None)
    parser.add_argument("--archetypes", type=int, default=None)
    parser.add_argument("--noise", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--solvers",
        nargs="+",
        choices=list(ALL_SOLVERS),
        default=None,
        help="Subset of solvers to benchmark (default: all four)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    cfg = load_config(Path(args.config)) if args.config else AlignmentConfig()

    # Apply CLI overrides
    overrides = {
        "n_scenarios": args.scenarios,
        "n_dims": args.dims,
        "n_archetypes": args.archetypes,
        "noise_sd": args.noise,
        "random_seed": args.seed,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        cfg = replace(cfg, benchmark=replace(cfg.benchmark, **overrides))

    run_benchmark(cfg, args.solvers)
