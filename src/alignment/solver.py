"""
Assignment strategies for archetype alignment.

Matching two archetype sets is a *Linear Assignment Problem*: pick one arc2
archetype per arc1 archetype, one-to-one, minimising total distance.

Strategy menu
─────────────
  LPAssignmentSolver  "optimal"     exact LP / integer assignment    ← DEFAULT
  ExhaustiveSolver    "exhaustive"  scores all K! permutations       K ≤ ~10

LP backends (optimal strategy)
──────────────────────────────
  highs   scipy.optimize.linprog, HiGHS dual simplex    ← DEFAULT
  lap     scipy.optimize.linear_sum_assignment (JV)
  cpsat   OR-Tools CP-SAT, integer-scaled costs

The assignment polytope has integral vertices, so a simplex LP solve already
returns a 0/1 matrix; no branch-and-bound is needed. All backends share the
contract "cost matrix in, assignment matrix and objective out", and both
strategies return the same AlignmentResult.

Neither strategy falls back to the other: a failing backend raises
SolverError and the call aborts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from src.alignment.config import LP_BACKENDS, STRATEGIES, SolverConfig
from src.alignment.errors import InvalidArgumentError, SolverError
from src.alignment.permutations import generate_permutations

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Public types
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, eq=False)
class AlignmentResult:
    """Unified output returned by both strategies.

    Attributes:
        dist: Total Euclidean distance of the matching (≥ 0).
        ind: ind[i] is the arc2 index matched to archetype i of arc1 (0-based,
            always a permutation of 0…K-1).
        strategy: "optimal" or "exhaustive".
        backend: LP backend used by the optimal strategy, None for exhaustive.
    """

    dist: float
    ind: np.ndarray
    strategy: str
    backend: str | None = None

    @property
    def n_archetypes(self) -> int:
        """Number of matched archetype pairs."""
        return int(self.ind.shape[0])


# ─────────────────────────────────────────────────────────────────────────────
# Private helpers
# ─────────────────────────────────────────────────────────────────────────────


def _check_cost_matrix(dist: np.ndarray) -> int:
    if dist.ndim != 2 or dist.shape[0] != dist.shape[1]:
        raise InvalidArgumentError(f"distance matrix must be square, got shape {dist.shape}")
    if dist.shape[0] == 0:
        raise InvalidArgumentError("distance matrix is empty")
    return dist.shape[0]


def _frozen(ind: np.ndarray) -> np.ndarray:
    ind = np.asarray(ind, dtype=np.int64).copy()
    ind.flags.writeable = False
    return ind


def _matching_from_assignment(assignment: np.ndarray) -> np.ndarray:
    """Per row, the column holding the largest value of a 0/1 assignment matrix.

    Raises SolverError when the rows do not pick distinct columns, which only
    happens for a degenerate (fractional) backend answer.
    """
    k = assignment.shape[0]
    ind = np.argmax(assignment, axis=1)
    if not np.array_equal(np.sort(ind), np.arange(k)):
        raise SolverError(f"assignment matrix is not a permutation: row maxima at {ind.tolist()}")
    return ind


# ─────────────────────────────────────────────────────────────────────────────
# LP backends: (distance matrix, config) → (assignment matrix, objective)
# ─────────────────────────────────────────────────────────────────────────────


def _solve_highs(dist: np.ndarray, cfg: SolverConfig) -> tuple[np.ndarray, float]:
    """Assignment LP over x[i, j] ∈ [0, 1] with unit row and column sums."""
    from scipy.optimize import linprog  # pylint: disable=import-outside-toplevel

    k = dist.shape[0]
    # x is flattened row-major: x[i, j] → i * k + j
    row_sums = np.kron(np.eye(k), np.ones(k))
    col_sums = np.kron(np.ones(k), np.eye(k))
    res = linprog(
        c=dist.ravel(),
        A_eq=np.vstack([row_sums, col_sums]),
        b_eq=np.ones(2 * k),
        bounds=(0.0, 1.0),
        method="highs-ds",  # simplex → vertex of the polytope → integral x
    )
    if res.status != 0:
        raise SolverError(f"linprog failed (status {res.status}): {res.message}")
    return res.x.reshape(k, k), float(res.fun)


def _solve_lap(dist: np.ndarray, cfg: SolverConfig) -> tuple[np.ndarray, float]:
    """Jonker-Volgenant shortest augmenting path via scipy."""
    from scipy.optimize import linear_sum_assignment  # pylint: disable=import-outside-toplevel

    rows, cols = linear_sum_assignment(dist)
    assignment = np.zeros_like(dist, dtype=np.float64)
    assignment[rows, cols] = 1.0
    return assignment, float(dist[rows, cols].sum())


def _solve_cpsat(dist: np.ndarray, cfg: SolverConfig) -> tuple[np.ndarray, float]:
    """Boolean x[i, j], exactly one per row and per column, integer-scaled costs.

    CP-SAT only optimises integer objectives, so the reported distance is
    recomputed from the float matrix rather than taken from the solver.
    """
    k = dist.shape[0]
    # the objective sums k scaled costs, all of which must fit in int64
    if float(dist.max()) * cfg.cost_scale * k >= np.iinfo(np.int64).max:
        raise SolverError(
            f"distances up to {float(dist.max()):.6g} overflow int64 at cost_scale "
            f"{cfg.cost_scale}; lower cost_scale or use another backend"
        )

    from ortools.sat.python import cp_model  # pylint: disable=import-outside-toplevel

    cost_i = np.rint(dist * cfg.cost_scale).astype(np.int64)

    model = cp_model.CpModel()
    x = {(i, j): model.NewBoolVar(f"x_{i}_{j}") for i in range(k) for j in range(k)}
    for i in range(k):
        model.AddExactlyOne(x[(i, j)] for j in range(k))
    for j in range(k):
        model.AddExactlyOne(x[(i, j)] for i in range(k))
    model.Minimize(sum(int(cost_i[i, j]) * x[(i, j)] for i in range(k) for j in range(k)))

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = cfg.cpsat_time_limit_s
    solver.parameters.num_search_workers = 1  # deterministic

    status = solver.Solve(model)
    if status != cp_model.OPTIMAL:
        raise SolverError(f"CP-SAT did not prove optimality: {solver.StatusName(status)}")

    assignment = np.array(
        [[solver.Value(x[(i, j)]) for j in range(k)] for i in range(k)], dtype=np.float64
    )
    return assignment, float((dist * assignment).sum())


_BACKENDS: dict[str, Callable[[np.ndarray, SolverConfig], tuple[np.ndarray, float]]] = {
    "highs": _solve_highs,
    "lap": _solve_lap,
    "cpsat": _solve_cpsat,
}


# ─────────────────────────────────────────────────────────────────────────────
# Strategy 1 — LPAssignmentSolver
# ─────────────────────────────────────────────────────────────────────────────


class LPAssignmentSolver:
    """Optimal strategy: exact minimum-cost perfect matching.

    The backend is chosen by `SolverConfig.lp_backend`. Any backend failure is
    re-raised as SolverError with the original exception chained.
    """

    strategy = "optimal"

    def __init__(self, solver_config: SolverConfig | None = None) -> None:
        self.config = solver_config or SolverConfig()
        if self.config.lp_backend not in _BACKENDS:
            raise InvalidArgumentError(
                f"Unknown LP backend {self.config.lp_backend!r}. "
                f"Valid options: {', '.join(repr(b) for b in LP_BACKENDS)}."
            )
        self.backend = self.config.lp_backend

    def solve(self, dist: np.ndarray) -> AlignmentResult:
        """Match rows to columns of a K × K distance matrix."""
        dist = np.asarray(dist, dtype=np.float64)
        _check_cost_matrix(dist)
        if not np.all(np.isfinite(dist)):
            raise SolverError("distance matrix contains non-finite values")

        try:
            assignment, objective = _BACKENDS[self.backend](dist, self.config)
        except SolverError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise SolverError(f"{self.backend} backend failed: {exc}") from exc

        ind = _matching_from_assignment(assignment)
        logger.debug("optimal/%s: dist=%.6g ind=%s", self.backend, objective, ind.tolist())
        return AlignmentResult(
            dist=objective, ind=_frozen(ind), strategy=self.strategy, backend=self.backend
        )


# ─────────────────────────────────────────────────────────────────────────────
# Strategy 2 — ExhaustiveSolver
# ─────────────────────────────────────────────────────────────────────────────


class ExhaustiveSolver:
    """Brute force: score every permutation, keep the cheapest.

    Ties go to the permutation generated first (lexicographic order). That
    rule is deterministic but says nothing about which optimum is "right".
    Time and memory are O(K!); do not use for more than ~10 archetypes.
    """

    strategy = "exhaustive"

    def __init__(self, solver_config: SolverConfig | None = None) -> None:
        self.config = solver_config or SolverConfig()

    def solve(self, dist: np.ndarray) -> AlignmentResult:
        """Match rows to columns of a K × K distance matrix."""
        dist = np.asarray(dist, dtype=np.float64)
        k = _check_cost_matrix(dist)
        if k > self.config.exhaustive_warn_above:
            logger.warning(
                "exhaustive search over %d archetypes enumerates %d! permutations; "
                "use strategy='optimal' instead",
                k,
                k,
            )

        perms = generate_permutations(k)
        # costs[r] = Σ_i dist[i, perms[r, i]]
        costs = dist[np.arange(k), perms].sum(axis=1)
        best = int(np.argmin(costs))

        logger.debug(
            "exhaustive: %d permutations, dist=%.6g ind=%s",
            perms.shape[0],
            costs[best],
            perms[best].tolist(),
        )
        return AlignmentResult(
            dist=float(costs[best]), ind=_frozen(perms[best]), strategy=self.strategy
        )


# ─────────────────────────────────────────────────────────────────────────────
# Factory
# ─────────────────────────────────────────────────────────────────────────────


def create_solver(
    strategy: str = "optimal",
    solver_config: SolverConfig | None = None,
) -> LPAssignmentSolver | ExhaustiveSolver:
    """Instantiate and return the requested strategy.

    strategy options
    ─────────────────
    "optimal"    → LPAssignmentSolver   exact, polynomial, backend from config
    "exhaustive" → ExhaustiveSolver     K! enumeration, no solver dependency
    """
    if strategy == "optimal":
        return LPAssignmentSolver(solver_config)
    if strategy == "exhaustive":
        return ExhaustiveSolver(solver_config)
    raise InvalidArgumentError(
        f"Unknown strategy {strategy!r}. Valid options: {', '.join(repr(s) for s in STRATEGIES)}."
    )
