"""Dynamic Time Warping distance between two feature sequences."""

from __future__ import annotations

import logging
import sys

import numpy as np
from scipy.spatial.distance import cdist

logger = logging.getLogger(__name__)

# Returned when either sequence is empty: no alignment exists.
MAX_DISTANCE = sys.float_info.max


def local_costs(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Euclidean distance between every frame of a and every frame of b, shape (n, m)."""
    return cdist(
        np.asarray(a, dtype=np.float64),
        np.asarray(b, dtype=np.float64),
        metric="euclidean",
    )


def dtw_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Minimum-cost monotonic alignment between two (frames, coeffs) matrices.

    table[i][j] = cost(a[i-1], b[j-1]) + min(table[i-1][j-1], table[i-1][j], table[i][j-1])
    with table[0][0] = 0 and every other border cell at +inf. O(n * m) time and space.
    """
    n, m = len(a), len(b)
    if n == 0 or m == 0:
        return MAX_DISTANCE

    cost = local_costs(a, b)
    table = np.full((n + 1, m + 1), np.inf)
    table[0, 0] = 0.0

    for i in range(1, n + 1):
        prev = table[i - 1]
        # best of the diagonal and vertical predecessors for j = 1..m
        upper = np.minimum(prev[:-1], prev[1:]).tolist()
        row_cost = cost[i - 1].tolist()
        row = [np.inf] * (m + 1)
        left = np.inf
        for j in range(1, m + 1):
            left = row_cost[j - 1] + min(upper[j - 1], left)
            row[j] = left
        table[i] = row

    distance = float(table[n, m])
    logger.debug("DTW %dx%d distance %.4f", n, m, distance)
    return distance
