"""Sub-pixel splat rendering of one interpolated morph frame.

Every slot's source pixel travels in a straight line from where it
started to the slot it was assigned.  At time ``t`` each pixel is
splatted onto the 3x3 cells around ``floor(p)`` with a separable
per-axis weight, the accumulated colours are normalised, and cells no
splat reached are flood-filled from their filled neighbours.

Note: with a zero fractional offset all of a pixel's weight lands on the
``(-1, -1)`` neighbour, so the endpoint frames are the arrangement moved
one cell up-left with the last row and column copied from their
neighbours.
"""

from __future__ import annotations

import numpy as np
from numba import njit

from pixel_morph.grid import as_square_grid, validate_permutation


@njit(nogil=True)
def axis_weight(offset, d):
    """Splat weight along one axis for a cell *offset* in {-1, 0, 1}."""
    if offset == -1:
        return (1.0 - d) ** 2
    if offset == 0:
        return 1.0 - min(1.0, abs(d - 0.5) * 2.0)
    return d ** 2


@njit(nogil=True)
def _splat(colors, permutation, width, height, t):
    n = width * height
    acc = np.zeros((n, 4))
    for slot in range(n):
        origin = permutation[slot]
        fx = (origin % width) * (1.0 - t) + (slot % width) * t
        fy = (origin // width) * (1.0 - t) + (slot // width) * t
        fx0 = np.floor(fx)
        fy0 = np.floor(fy)
        dx = fx - fx0
        dy = fy - fy0
        x0 = int(fx0)
        y0 = int(fy0)

        for oy in range(-1, 2):
            wy = axis_weight(oy, dy)
            for ox in range(-1, 2):
                weight = axis_weight(ox, dx) * wy
                if weight <= 0.0:
                    continue
                nx = x0 + ox
                ny = y0 + oy
                if nx < 0 or nx >= width or ny < 0 or ny >= height:
                    continue
                idx = ny * width + nx
                acc[idx, 0] += colors[origin, 0] * weight
                acc[idx, 1] += colors[origin, 1] * weight
                acc[idx, 2] += colors[origin, 2] * weight
                acc[idx, 3] += weight
    return acc


@njit(nogil=True)
def _resolve(acc):
    n = acc.shape[0]
    frame = np.zeros((n, 3), dtype=np.uint8)
    filled = np.zeros(n, dtype=np.bool_)
    for i in range(n):
        w = acc[i, 3]
        if w > 0.0:
            for c in range(3):
                v = np.floor(acc[i, c] / w + 0.5)
                frame[i, c] = np.uint8(min(max(v, 0.0), 255.0))
            filled[i] = True
    return frame, filled


@njit(nogil=True)
def fill_holes(frame, filled, width, height):
    """Flood unfilled cells breadth-first from all filled cells, in place.

    Seeds are the filled cells in row-major order; each popped cell copies
    its colour into its unfilled 4-neighbours (right, left, down, up).
    A hole takes the colour of whichever seed reaches it first, which is
    not necessarily the nearest one.

    Args:
        frame:  (N, 3) uint8 resolved colours.
        filled: (N,) bool, True where ``frame`` already holds a colour.
    """
    n = width * height
    queue = np.empty(n, dtype=np.int64)
    head = 0
    tail = 0
    for i in range(n):
        if filled[i]:
            queue[tail] = i
            tail += 1

    while head < tail:
        i = queue[head]
        head += 1
        x = i % width
        y = i // width
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx = x + dx
            ny = y + dy
            if nx < 0 or nx >= width or ny < 0 or ny >= height:
                continue
            ni = ny * width + nx
            if not filled[ni]:
                frame[ni, 0] = frame[i, 0]
                frame[ni, 1] = frame[i, 1]
                frame[ni, 2] = frame[i, 2]
                filled[ni] = True
                queue[tail] = ni
                tail += 1


def render_frame(
    source: np.ndarray,
    permutation: np.ndarray,
    t: float,
    *,
    validate: bool = True,
) -> np.ndarray:
    """Render the morph at time *t* (0 = source layout, 1 = assigned layout).

    Args:
        source:      (S, S, 3) uint8 source image.
        permutation: (N,) ``permutation[slot] = origin``.
        t:           Interpolation time in [0, 1].
        validate:    Check that *permutation* is a bijection first.

    Returns:
        (S, S, 3) uint8 frame.
    """
    src = as_square_grid(source, "source")
    h, w = src.shape[:2]
    if not 0.0 <= t <= 1.0:
        msg = f"t must lie in [0, 1], got {t}"
        raise ValueError(msg)
    if validate:
        perm = validate_permutation(permutation, h * w)
    else:
        perm = np.asarray(permutation, dtype=np.int64)

    if h * w == 0:
        return src.copy()
    # A lone pixel always splats outside a 1x1 grid.
    if h * w == 1:
        return src.copy()

    acc = _splat(src.reshape(-1, 3).astype(np.float64), perm, w, h, float(t))
    frame, filled = _resolve(acc)
    if not filled.all():
        fill_holes(frame, filled, w, h)
    return frame.reshape(h, w, 3)
