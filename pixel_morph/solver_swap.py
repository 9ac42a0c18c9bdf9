"""Greedy swap search with a shrinking neighbourhood radius."""

from __future__ import annotations

import logging
import time

import numpy as np
from numba import njit

from pixel_morph.cost import placement_cost, total_cost
from pixel_morph.grid import as_square_grid

logger = logging.getLogger(__name__)

SHRINK_FACTOR = 0.99
MIN_MAX_DIST = 2
STOP_MAX_DIST = 4
STOP_ACCEPTED = 10
PROGRESS_EVERY = 10  # generations between INFO progress lines


@njit
def _seed(seed):
    np.random.seed(seed)


@njit
def _run_generation(
    origins,
    colors,
    costs,
    target,
    width,
    max_dist,
    trials,
    color_weight,
    spatial_weight,
):
    """Run *trials* swap proposals in place; return the number accepted.

    ``origins``, ``colors`` and ``costs`` are indexed by slot and always
    move together: they are the record currently sitting in that slot.
    """
    n = width * width
    accepted = 0
    for _ in range(trials):
        a = np.random.randint(0, n)
        ax = a % width
        ay = a // width
        bx = min(max(ax + np.random.randint(-max_dist, max_dist + 1), 0), width - 1)
        by = min(max(ay + np.random.randint(-max_dist, max_dist + 1), 0), width - 1)
        b = by * width + bx

        oa = origins[a]
        ob = origins[b]
        a_on_b = placement_cost(
            (oa % width, oa // width), (bx, by), colors[a], target[b],
            color_weight, spatial_weight,
        )
        b_on_a = placement_cost(
            (ob % width, ob // width), (ax, ay), colors[b], target[a],
            color_weight, spatial_weight,
        )

        if (costs[a] - a_on_b) + (costs[b] - b_on_a) > 0:
            origins[a] = ob
            origins[b] = oa
            for c in range(3):
                tmp = colors[a, c]
                colors[a, c] = colors[b, c]
                colors[b, c] = tmp
            costs[a] = b_on_a
            costs[b] = a_on_b
            accepted += 1
    return accepted


def solve_swap(
    source: np.ndarray,
    target: np.ndarray,
    proximity_importance: int = 13,
    color_weight: int = 2,
    seed: int | None = 12345,
    swaps_per_pixel: int = 128,
) -> np.ndarray:
    """Assign every slot a source pixel by greedy local swaps.

    Each generation proposes ``swaps_per_pixel * N`` swaps between a random
    slot and a partner at most ``max_dist`` cells away per axis, and keeps
    a swap only when it lowers the summed cost of both slots. ``max_dist``
    starts at the grid width and shrinks by 1% per generation (never below
    2); the search ends once it is under 4 and a generation accepts fewer
    than 10 swaps.

    Args:
        source:               (S, S, 3) uint8 source image.
        target:               (S, S, 3) uint8 target image.
        proximity_importance: Weight of squared displacement in the cost.
        color_weight:         Weight of squared RGB distance in the cost.
        seed:                 PRNG seed (``None`` = non-deterministic).
        swaps_per_pixel:      Trial swaps per pixel per generation.

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

    src_flat = src.reshape(-1, 3)
    tgt_flat = tgt.reshape(-1, 3)

    origins = np.arange(n, dtype=np.int64)
    colors = src_flat.astype(np.int64)
    target_int = tgt_flat.astype(np.int64)
    # Every record starts in its own slot, so only the colour term counts.
    costs = color_weight * np.sum((colors - target_int) ** 2, axis=1)

    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**32 - 1))
    _seed(seed)

    trials = swaps_per_pixel * n
    logger.info(
        "Swap search start | %dx%d  trials/gen=%s  proximity=%d  cost=%s",
        width, width, f"{trials:,}", proximity_importance, f"{int(costs.sum()):,}",
    )

    max_dist = width
    generation = 0
    accepted_total = 0
    t0 = time.perf_counter()

    while True:
        accepted = _run_generation(
            origins, colors, costs, target_int, width, max_dist, trials,
            color_weight, proximity_importance,
        )
        generation += 1
        accepted_total += accepted
        level = (
            logging.INFO
            if generation == 1 or generation % PROGRESS_EVERY == 0
            else logging.DEBUG
        )
        logger.log(
            level, "  gen %4d  max_dist=%3d  accepted=%s  (%.0f s)",
            generation, max_dist, f"{accepted:,}", time.perf_counter() - t0,
        )

        if max_dist < STOP_MAX_DIST and accepted < STOP_ACCEPTED:
            break
        max_dist = int(max(max_dist * SHRINK_FACTOR, MIN_MAX_DIST))

    final = total_cost(
        src_flat, tgt_flat, origins, width, color_weight, proximity_importance,
    )
    logger.info(
        "Swap search done  | generations=%d  accepted=%s  cost=%s  (%.1f s)",
        generation, f"{accepted_total:,}", f"{final:,}", time.perf_counter() - t0,
    )
    return origins
