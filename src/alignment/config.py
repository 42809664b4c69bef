"""
Alignment configuration dataclasses and YAML loader.

Solver and benchmark parameters live here as typed, frozen dataclasses.
Load from YAML with `load_config()` or construct directly for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml

Strategy = Literal["optimal", "exhaustive"]
LPBackend = Literal["highs", "lap", "cpsat"]

STRATEGIES: tuple[str, ...] = ("optimal", "exhaustive")
LP_BACKENDS: tuple[str, ...] = ("highs", "lap", "cpsat")


@dataclass(frozen=True)
class SolverConfig:
    """Assignment solver parameters.

    strategy              : "optimal" (LP assignment) or "exhaustive" (K! search)
    lp_backend            : backend used by the optimal strategy
                            highs → scipy linprog, HiGHS dual simplex
                            lap   → scipy linear_sum_assignment
                            cpsat → OR-Tools CP-SAT integer program
    cost_scale            : float → int multiplier for CP-SAT objective
    cpsat_time_limit_s    : wall-clock budget for CP-SAT
    exhaustive_warn_above : log a warning when K exceeds this (10! ≈ 3.6 M rows)
    """

    strategy: Strategy = "optimal"
    lp_backend: LPBackend = "highs"
    cost_scale: int = 1_000_000
    cpsat_time_limit_s: float = 10.0
    exhaustive_warn_above: int = 10


@dataclass(frozen=True)
class BenchmarkConfig:
    """Random scenario parameters for `src.alignment.benchmark`."""

    n_scenarios: int = 50
    n_dims: int = 2
    n_archetypes: int = 5
    noise_sd: float = 0.1  # jitter added to the permuted copy, relative to unit spread
    random_seed: int = 42
    tolerance: float = 1e-6  # max |dist_optimal - dist_exhaustive| counted as agreement


@dataclass(frozen=True)
class AlignmentConfig:
    """Top-level configuration aggregating all sub-configs."""

    solver: SolverConfig = field(default_factory=SolverConfig)
    benchmark: BenchmarkConfig = field(default_factory=BenchmarkConfig)


def load_config(path: str | Path) -> AlignmentConfig:
    """Load an AlignmentConfig from a YAML file.

    Args:
        path: Path to a YAML config file.

    Returns:
        Fully constructed AlignmentConfig; missing sections use defaults.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return AlignmentConfig(
        solver=SolverConfig(**raw.get("solver", {})),
        benchmark=BenchmarkConfig(**raw.get("benchmark", {})),
    )
