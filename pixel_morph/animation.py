"""Eased time sampling and parallel rendering of the morph animation."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from pixel_morph.frames import render_frame
from pixel_morph.grid import as_square_grid, validate_permutation

logger = logging.getLogger(__name__)


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out on [0, 1]; maps 0 -> 0, 0.5 -> 0.5, 1 -> 1."""
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def frame_times(frame_count: int) -> np.ndarray:
    """Eased time of each frame, ``ease(i / (frame_count - 1))``."""
    if frame_count < 2:
        msg = f"frame_count must be at least 2, got {frame_count}"
        raise ValueError(msg)
    return np.array(
        [ease_in_out_cubic(i / (frame_count - 1)) for i in range(frame_count)],
        dtype=np.float64,
    )


def render_animation(
    source: np.ndarray,
    permutation: np.ndarray,
    frame_count: int = 100,
    workers: int | None = None,
) -> list[np.ndarray]:
    """Render every frame of the source -> arrangement morph.

    Frames are independent, so they are rendered on a thread pool; the
    returned list is in frame-index order regardless of completion order.

    Args:
        source:      (S, S, 3) uint8 source image.
        permutation: (N,) ``permutation[slot] = origin``.
        frame_count: Number of frames (>= 2).
        workers:     Thread-pool size (``None`` = executor default).

    Returns:
        ``frame_count`` arrays of shape (S, S, 3) uint8.
    """
    src = as_square_grid(source, "source")
    perm = validate_permutation(permutation, src.shape[0] * src.shape[1])
    times = frame_times(frame_count)

    logger.info("Rendering %d frames (workers=%s) ...", frame_count, workers or "auto")
    t0 = time.perf_counter()

    def _render(indexed: tuple[int, float]) -> np.ndarray:
        idx, t = indexed
        frame = render_frame(src, perm, t, validate=False)
        logger.debug("  frame %d  t=%.4f", idx, t)
        return frame

    with ThreadPoolExecutor(max_workers=workers) as executor:
        frames = list(executor.map(_render, enumerate(times.tolist())))

    logger.info("Frames ready  (%.1f s)", time.perf_counter() - t0)
    return frames
