"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class MorphConfig:
    """All tuneable parameters for a morph run.

    Attributes:
        resolution:       Side of the square working grid (images are
                          centre-cropped and resized to it).
        frames:           Number of frames in the animation (>= 2).
        proximity:        Weight of squared displacement in the placement cost.
        color_weight:     Weight of squared RGB distance in the placement cost.
        seed:             Swap-solver seed (None = non-deterministic).
        swaps_per_pixel:  Trial swaps per pixel per solver generation.
        solver:           "swap" (heuristic) or "hungarian" (optimal, small grids).
        frame_delay_ms:   Display time of each GIF frame.
        workers:          Frame-rendering threads (None = executor default).
        pixel_upscale:    Each logical pixel becomes n x n in saved output.
        save_permutation: Write the permutation as .npy beside the GIF.
        save_result:      Write the final arrangement as an upscaled PNG.
        save_comparison:  Write a Source | Target | Result comparison grid.
        target_path:      Image every input is morphed toward.
        input_dir:        Folder scanned by the batch command.
        output_dir:       Folder for batch results.
        output_suffix:    Appended to the input stem for default output names.
    """

    # Grid
    resolution: int = 128

    # Solver
    proximity: int = 13
    color_weight: int = 2
    seed: int | None = 12345
    swaps_per_pixel: int = 128
    solver: str = "swap"  # "swap" | "hungarian"

    # Animation
    frames: int = 100
    frame_delay_ms: int = 50
    workers: int | None = None

    # Output
    pixel_upscale: int = 1
    save_permutation: bool = True
    save_result: bool = True
    save_comparison: bool = False
    output_suffix: str = "_morph"

    # Paths
    target_path: Path = field(default_factory=lambda: Path("target.png"))
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )
