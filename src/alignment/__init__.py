"""
Archetype alignment via bipartite matching.

Two fits of the same convex-hull approximation return their archetypes in an
arbitrary order. This package finds which archetype of one fit corresponds to
which of the other by minimising the total Euclidean distance of the pairing.

Quick start:
    from src.alignment import align_archetypes
    result = align_archetypes(arc1, arc2)          # arcs: (n_dims, K)
    result.dist, result.ind                        # total distance, arc2 index per arc1 archetype
"""

from src.alignment.align import align_archetypes, reorder_archetypes
from src.alignment.config import AlignmentConfig, BenchmarkConfig, SolverConfig, load_config
from src.alignment.distance import compute_distance_matrix
from src.alignment.errors import (
    AlignmentError,
    InvalidArgumentError,
    ShapeMismatchError,
    SolverError,
)
from src.alignment.permutations import generate_permutations
from src.alignment.solver import (
    AlignmentResult,
    ExhaustiveSolver,
    LPAssignmentSolver,
    create_solver,
)

__all__ = [
    "align_archetypes",
    "reorder_archetypes",
    "AlignmentConfig",
    "BenchmarkConfig",
    "SolverConfig",
    "load_config",
    "compute_distance_matrix",
    "generate_permutations",
    "AlignmentResult",
    "LPAssignmentSolver",
    "ExhaustiveSolver",
    "create_solver",
    "AlignmentError",
    "ShapeMismatchError",
    "InvalidArgumentError",
    "SolverError",
]
