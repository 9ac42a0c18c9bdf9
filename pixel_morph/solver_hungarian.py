"""Optimal assignment via the Hungarian algorithm (scipy)."""

from __future__ import annotations

import logging
import time

import numpy as np
from scipy.optimize import linear_sum_assignment

from pixel_morph.cost import compute_cost_matrix
from pixel_morph.grid import as_square_grid

logger = logging.getLogger(__name__)

# The cost matrix is N x N int64; 4096 cells is a 128 MiB matrix.
MAX_HUNGARIAN_PIXELS = 4096


def solve_hungarian(
    source: np.ndarray,
    target: np.ndarray,
    proximity_importance: int = 13,
    color_weight: int = 2,
) -> np.ndarray:
    """Find the minimum-cost source -> slot permutation.

    Uses the same cost as :func:`pixel_morph.solver_swap.solve_swap`, so it
    serves as the exact reference for small grids.

    Args:
        source: (S, S, 3) uint8.
        target: (S, S, 3) uint8.
        proximity_importance: Weight of squared displacement.
        color_weight: Weight of squared RGB distance.

    Returns:
        (N,) int64 permutation, ``permutation[slot] = origin``.
    """
    src = as_square_grid(source, "source")
    tgt = as_square_grid(target, "target")
    if src.shape != tgt.shape:
        msg = f"source {src.shape} and target {tgt.shape} differ in size"
        raise ValueError(msg)
    if proximity_importance < 0 or color_weight < 0:
        msg = "cost weights must be non-negative"
        raise ValueError(msg)

    width = src.shape[1]
    n = width * width
    if n == 0:
        return np.empty(0, dtype=np.int64)
    if n > MAX_HUNGARIAN_PIXELS:
        msg = (
            f"{width}x{width} grid is too large for the optimal solver "
            f"(limit {MAX_HUNGARIAN_PIXELS} pixels); use the swap solver"
        )
        raise ValueError(msg)

    logger.info("Building %dx%d cost matrix …", n, n)
    t0 = time.perf_counter()
    cost = compute_cost_matrix(
        src.reshape(-1, 3), tgt.reshape(-1, 3), width,
        color_weight, proximity_importance,
    )
    logger.info("Cost matrix ready  (%.1f s)", time.perf_counter() - t0)

    logger.info("Running linear_sum_assignment …")
    t0 = time.perf_counter()
    row_idx, col_idx = linear_sum_assignment(cost)
    logger.info("Assignment solved  (%.1f s)", time.perf_counter() - t0)

    permutation = np.empty(n, dtype=np.int64)
    permutation[col_idx] = row_idx
    return permutation
