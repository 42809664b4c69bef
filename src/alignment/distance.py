"""
Distance matrix computation for archetype alignment.

Archetype sets are stored column-wise, shape (n_dims, n_archetypes). The
distance matrix is square, indexed as [arc1_index][arc2_index], and holds
plain Euclidean distances between archetype coordinate vectors.

Usage:
    d = compute_distance_matrix(arc1, arc2)
    # d[i, j] = ||arc1[:, i] - arc2[:, j]||
"""

from __future__ import annotations

import numpy as np
from scipy.spatial.distance import cdist

from src.alignment.errors import InvalidArgumentError, ShapeMismatchError


def as_archetype_matrix(arc: np.ndarray, name: str = "arc") -> np.ndarray:
    """Coerce to a float64 (n_dims × n_archetypes) array, rejecting unusable shapes."""
    arr = np.asarray(arc, dtype=np.float64)
    if arr.ndim != 2:
        raise InvalidArgumentError(
            f"{name} must be a 2-D matrix (dimensions × archetypes), got {arr.ndim}-D"
        )
    if arr.shape[1] == 0:
        raise InvalidArgumentError(f"{name} has no archetypes")
    if not np.all(np.isfinite(arr)):
        raise InvalidArgumentError(f"{name} contains NaN or infinite coordinates")
    return arr


def check_shapes(arc1: np.ndarray, arc2: np.ndarray) -> int:
    """Return the shared archetype count K, or raise ShapeMismatchError."""
    if arc1.shape[1] != arc2.shape[1]:
        raise ShapeMismatchError(
            f"trying to match different number of archetypes: "
            f"{arc1.shape[1]} in arc1 vs {arc2.shape[1]} in arc2"
        )
    if arc1.shape[0] != arc2.shape[0]:
        raise ShapeMismatchError(
            f"archetypes live in different spaces: "
            f"{arc1.shape[0]} dimensions in arc1 vs {arc2.shape[0]} in arc2"
        )
    return arc1.shape[1]


def compute_distance_matrix(arc1: np.ndarray, arc2: np.ndarray) -> np.ndarray:
    """Build the K × K Euclidean distance matrix between two archetype sets.

    Args:
        arc1: Reference archetypes, shape (n_dims, K).
        arc2: Archetypes to be matched against arc1, shape (n_dims, K).

    Returns:
        Read-only float64 array with d[i, j] = distance(arc1[:, i], arc2[:, j]).

    Raises:
        ShapeMismatchError: archetype counts (or dimensions) differ.
        InvalidArgumentError: an input is not a non-empty 2-D matrix.
    """
    a1 = as_archetype_matrix(arc1, "arc1")
    a2 = as_archetype_matrix(arc2, "arc2")
    check_shapes(a1, a2)

    # cdist works on row vectors; archetypes are columns
    dist = cdist(a1.T, a2.T, metric="euclidean")
    dist.flags.writeable = False
    return dist
