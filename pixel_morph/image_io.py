"""Image loading, GIF/PNG saving, comparison grids and permutation files."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


def center_crop_box(width: int, height: int) -> tuple[int, int, int, int]:
    """Box (left, upper, right, lower) of the largest centred square."""
    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return left, top, left + side, top + side


def load_square(path: str | Path, size: int = 128) -> np.ndarray:
    """Load an image, centre-crop it to a square and resize to *size*.

    Returns:
        (size, size, 3) uint8 array.
    """
    img = Image.open(path).convert("RGB")
    img = img.crop(center_crop_box(img.width, img.height))
    img = img.resize((size, size), Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def _upscaled(array: np.ndarray, pixel_upscale: int) -> Image.Image:
    img = Image.fromarray(array.astype(np.uint8))
    if pixel_upscale == 1:
        return img
    h, w = array.shape[:2]
    return img.resize((w * pixel_upscale, h * pixel_upscale), Image.NEAREST)


def save_upscaled(
    array: np.ndarray,
    path: str | Path,
    pixel_upscale: int = 1,
) -> None:
    """Save a small array as a nearest-neighbour-upscaled image."""
    _upscaled(array, pixel_upscale).save(path)


def save_gif(
    frames: Sequence[np.ndarray],
    path: str | Path,
    frame_delay_ms: int = 50,
    pixel_upscale: int = 1,
) -> None:
    """Write *frames* as an infinitely looping animated GIF, in order."""
    if not frames:
        msg = "No frames to save"
        raise ValueError(msg)
    images = [_upscaled(f, pixel_upscale) for f in frames]
    images[0].save(
        path,
        save_all=True,
        append_images=images[1:],
        duration=frame_delay_ms,
        loop=0,
    )
    logger.info("Animation saved: %s (%d frames)", path, len(images))


def save_permutation(permutation: np.ndarray, path: str | Path) -> None:
    """Persist a permutation as a ``.npy`` file."""
    np.save(path, np.asarray(permutation, dtype=np.int64))


def load_permutation(path: str | Path) -> np.ndarray:
    """Read a permutation written by :func:`save_permutation`."""
    return np.load(path, allow_pickle=False)


def make_comparison_grid(
    source: np.ndarray,
    target: np.ndarray,
    result: np.ndarray,
    output_path: str | Path,
    pixel_upscale: int = 4,
) -> None:
    """Create a 3-panel comparison: Source | Target | Result.

    All panels share the grid size, upscaled by *pixel_upscale*.
    """
    side = source.shape[0]
    panel = side * pixel_upscale
    label_height = 36

    panels = [
        Image.fromarray(a).resize((panel, panel), Image.NEAREST)
        for a in (source, target, result)
    ]
    labels = ["Source", f"Target {side}x{side}", "Result"]

    gap = 8
    total_w = len(panels) * panel + (len(panels) - 1) * gap
    total_h = panel + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (img, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel + gap)
        canvas.paste(img, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
