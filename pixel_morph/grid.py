"""Square pixel-grid checks and permutation helpers."""

from __future__ import annotations

import numpy as np


def as_square_grid(image: np.ndarray, name: str = "image") -> np.ndarray:
    """Return *image* as a (S, S, 3) uint8 array or raise ``ValueError``."""
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 3:
        msg = f"{name} must have shape (S, S, 3), got {arr.shape}"
        raise ValueError(msg)
    if arr.shape[0] != arr.shape[1]:
        msg = f"{name} must be square, got {arr.shape[1]}x{arr.shape[0]}"
        raise ValueError(msg)
    if arr.dtype == np.uint8:
        return arr
    if not np.issubdtype(arr.dtype, np.integer):
        msg = f"{name} must hold 8-bit integer channels, got {arr.dtype}"
        raise ValueError(msg)
    if arr.size and (arr.min() < 0 or arr.max() > 255):
        msg = f"{name} channel values must lie in [0, 255]"
        raise ValueError(msg)
    return arr.astype(np.uint8)


def validate_permutation(permutation: np.ndarray, size: int) -> np.ndarray:
    """Check that *permutation* is a bijection over ``range(size)``.

    Returns:
        (size,) int64 copy of the permutation.
    """
    perm = np.asarray(permutation)
    if perm.ndim != 1 or len(perm) != size:
        msg = f"permutation must have length {size}, got shape {perm.shape}"
        raise ValueError(msg)
    if size and not np.issubdtype(perm.dtype, np.integer):
        msg = f"permutation must hold integers, got {perm.dtype}"
        raise ValueError(msg)
    perm = perm.astype(np.int64)
    if size and (perm.min() < 0 or perm.max() >= size):
        msg = f"permutation values must lie in [0, {size})"
        raise ValueError(msg)
    if len(np.unique(perm)) != size:
        msg = "permutation repeats a source index"
        raise ValueError(msg)
    return perm


def apply_permutation(source: np.ndarray, permutation: np.ndarray) -> np.ndarray:
    """Final arrangement: slot ``s`` shows source pixel ``permutation[s]``."""
    src = as_square_grid(source, "source")
    h, w = src.shape[:2]
    perm = validate_permutation(permutation, h * w)
    return src.reshape(-1, 3)[perm].reshape(h, w, 3)
