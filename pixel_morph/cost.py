"""Placement cost model and whole-permutation cost evaluation."""

from __future__ import annotations

import numpy as np
from numba import njit


@njit
def placement_cost(
    point_pos,
    slot_pos,
    point_color,
    slot_color,
    color_weight,
    spatial_weight,
):
    """Cost of putting a point of *point_color* from *point_pos* into a slot.

    ``color_weight * |point_color - slot_color|^2
    + spatial_weight * |point_pos - slot_pos|^2``, all in integers.
    """
    dx = np.int64(point_pos[0]) - np.int64(slot_pos[0])
    dy = np.int64(point_pos[1]) - np.int64(slot_pos[1])
    dr = np.int64(point_color[0]) - np.int64(slot_color[0])
    dg = np.int64(point_color[1]) - np.int64(slot_color[1])
    db = np.int64(point_color[2]) - np.int64(slot_color[2])
    color = dr * dr + dg * dg + db * db
    spatial = dx * dx + dy * dy
    return np.int64(color_weight) * color + np.int64(spatial_weight) * spatial


def slot_costs(
    source_flat: np.ndarray,
    target_flat: np.ndarray,
    permutation: np.ndarray,
    width: int,
    color_weight: int = 2,
    spatial_weight: int = 13,
) -> np.ndarray:
    """Per-slot cost of a permutation.

    Args:
        source_flat: (N, 3) uint8 source pixels (row-major).
        target_flat: (N, 3) uint8 target pixels (row-major).
        permutation: (N,) ``permutation[slot] = origin``.
        width:       Grid width used to turn indices into coordinates.

    Returns:
        (N,) int64 - cost of each slot's occupant.
    """
    perm = np.asarray(permutation, dtype=np.int64)
    slots = np.arange(len(perm), dtype=np.int64)
    src = source_flat.astype(np.int64)[perm]
    tgt = target_flat.astype(np.int64)
    color = np.sum((src - tgt) ** 2, axis=1)
    dx = perm % width - slots % width
    dy = perm // width - slots // width
    return color_weight * color + spatial_weight * (dx * dx + dy * dy)


def total_cost(
    source_flat: np.ndarray,
    target_flat: np.ndarray,
    permutation: np.ndarray,
    width: int,
    color_weight: int = 2,
    spatial_weight: int = 13,
) -> int:
    """Sum of :func:`slot_costs` over every slot."""
    return int(np.sum(slot_costs(
        source_flat, target_flat, permutation, width, color_weight, spatial_weight,
    )))


def compute_cost_matrix(
    source_flat: np.ndarray,
    target_flat: np.ndarray,
    width: int,
    color_weight: int = 2,
    spatial_weight: int = 13,
    chunk_size: int = 512,
) -> np.ndarray:
    """Cost of every source pixel in every slot.

    Args:
        source_flat: (N, 3) uint8.
        target_flat: (N, 3) uint8.
        width: Grid width.
        chunk_size: Rows computed per batch (controls peak RAM).

    Returns:
        (N, N) int64 matrix, rows = source pixels, columns = slots.
    """
    s = source_flat.astype(np.int64)
    t = target_flat.astype(np.int64)
    n = len(s)
    idx = np.arange(n, dtype=np.int64)
    xs, ys = idx % width, idx // width

    cost = np.empty((n, n), dtype=np.int64)
    for i in range(0, n, chunk_size):
        j = min(i + chunk_size, n)
        diff = s[i:j, np.newaxis, :] - t[np.newaxis, :, :]
        color = np.sum(diff ** 2, axis=2)
        dx = xs[i:j, np.newaxis] - xs[np.newaxis, :]
        dy = ys[i:j, np.newaxis] - ys[np.newaxis, :]
        cost[i:j] = color_weight * color + spatial_weight * (dx * dx + dy * dy)
    return cost
