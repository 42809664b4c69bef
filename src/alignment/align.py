"""
Public entry point: match the archetypes of arc2 to those of arc1.

    result = align_archetypes(arc1, arc2)                    # optimal, HiGHS
    result = align_archetypes(arc1, arc2, strategy="exhaustive")
    arc2_aligned = reorder_archetypes(arc2, result)          # arc1's labeling

Each call is a single synchronous computation with no shared state, so
independent calls (e.g. one per bootstrap replicate) can run in parallel.
"""

from __future__ import annotations

import logging

import numpy as np

from src.alignment.config import SolverConfig
from src.alignment.distance import as_archetype_matrix, check_shapes, compute_distance_matrix
from src.alignment.errors import ShapeMismatchError
from src.alignment.solver import AlignmentResult, create_solver

logger = logging.getLogger(__name__)


def align_archetypes(
    arc1: np.ndarray,
    arc2: np.ndarray,
    strategy: str | None = None,
    solver_config: SolverConfig | None = None,
) -> AlignmentResult:
    """Solve the bipartite matching between two archetype sets.

    Args:
        arc1: Reference archetype positions, shape (n_dims, K).
        arc2: Archetype positions to align with arc1, shape (n_dims, K).
        strategy: "optimal" or "exhaustive"; defaults to solver_config.strategy.
        solver_config: Backend and limits; defaults to SolverConfig().

    Returns:
        AlignmentResult with the total distance and, for every arc1
        archetype i, the index ind[i] of its arc2 counterpart.

    Raises:
        ShapeMismatchError: the sets hold different numbers of archetypes.
        InvalidArgumentError: unknown strategy or backend, or unusable input.
        SolverError: the LP backend failed.
    """
    cfg = solver_config or SolverConfig()
    strategy = cfg.strategy if strategy is None else strategy

    a1 = as_archetype_matrix(arc1, "arc1")
    a2 = as_archetype_matrix(arc2, "arc2")
    k = check_shapes(a1, a2)
    solver = create_solver(strategy, cfg)

    dist = compute_distance_matrix(a1, a2)
    result = solver.solve(dist)
    logger.debug("aligned %d archetypes with %s: dist=%.6g", k, strategy, result.dist)
    return result


def reorder_archetypes(arc2: np.ndarray, result: AlignmentResult) -> np.ndarray:
    """Return arc2 with its columns permuted into arc1's archetype order."""
    a2 = as_archetype_matrix(arc2, "arc2")
    if a2.shape[1] != result.n_archetypes:
        raise ShapeMismatchError(
            f"result matches {result.n_archetypes} archetypes but arc2 has {a2.shape[1]}"
        )
    return a2[:, result.ind]
