"""
Full permutation enumeration for the exhaustive matching strategy.

Rows are built by insertion, smallest size first: the permutations of n elements are,
for every leading value p, p followed by each (n-1)-permutation with the
values ≥ p shifted up by one. This yields all n! rows in lexicographic order.

Cost is O(n!) in time and memory. n = 10 already gives 3 628 800 rows
(~290 MB as int64), so the exhaustive strategy is impractical beyond K ≈ 10.
Callers are expected to respect that; nothing here enforces it.
"""

from __future__ import annotations

import numpy as np

from src.alignment.errors import InvalidArgumentError


def generate_permutations(n: int) -> np.ndarray:
    """Return every permutation of 0…n-1, one per row.

    Args:
        n: Number of elements to permute (≥ 1).

    Returns:
        Integer array of shape (n!, n); each row is a distinct bijection.
    """
    if n < 1:
        raise InvalidArgumentError(f"n must be a positive integer, got {n}")

    perms = np.zeros((1, 1), dtype=np.int64)
    for size in range(2, n + 1):
        p = perms.shape[0]
        out = np.empty((size * p, size), dtype=np.int64)
        for lead in range(size):
            block = out[lead * p : (lead + 1) * p]
            block[:, 0] = lead
            block[:, 1:] = perms + (perms >= lead)
        perms = out
    return perms
