"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from pixel_morph.animation import render_animation
from pixel_morph.config import MorphConfig
from pixel_morph.grid import apply_permutation, validate_permutation
from pixel_morph.image_io import (
    load_permutation,
    load_square,
    make_comparison_grid,
    save_gif,
    save_permutation,
    save_upscaled,
)
from pixel_morph.solver_hungarian import solve_hungarian
from pixel_morph.solver_swap import solve_swap

app = typer.Typer(
    name="pixel-morph",
    help="Rearrange an image's pixels into a target image and animate the morph.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()

SOLVERS = ("swap", "hungarian")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _quality_metric(target: np.ndarray, result: np.ndarray) -> float:
    t = target.reshape(-1, 3).astype(np.float64)
    r = result.reshape(-1, 3).astype(np.float64)
    return float(np.mean(np.sqrt(np.sum((t - r) ** 2, axis=1))))


def default_output_path(input_path: Path, suffix: str = "_morph") -> Path:
    """``<input dir>/<input stem><suffix>.gif``."""
    return input_path.parent / f"{input_path.stem}{suffix}.gif"


def _solve(source: np.ndarray, target: np.ndarray, cfg: MorphConfig) -> np.ndarray:
    if cfg.solver == "hungarian":
        return solve_hungarian(
            source, target,
            proximity_importance=cfg.proximity,
            color_weight=cfg.color_weight,
        )
    return solve_swap(
        source, target,
        proximity_importance=cfg.proximity,
        color_weight=cfg.color_weight,
        seed=cfg.seed,
        swaps_per_pixel=cfg.swaps_per_pixel,
    )


def morph_file(
    input_path: Path,
    target: np.ndarray,
    output: Path,
    cfg: MorphConfig,
    permutation_path: Path | None = None,
) -> float:
    """Morph one image toward *target* and write the GIF (plus extras).

    Returns:
        Mean RGB distance between the final arrangement and the target.
    """
    logger = logging.getLogger("pixel_morph")
    source = load_square(input_path, cfg.resolution)

    if permutation_path is not None:
        permutation = validate_permutation(
            load_permutation(permutation_path), source.shape[0] * source.shape[1],
        )
        logger.info("Permutation loaded from %s", permutation_path)
    else:
        permutation = _solve(source, target, cfg)

    frames = render_animation(source, permutation, cfg.frames, workers=cfg.workers)
    save_gif(frames, output, cfg.frame_delay_ms, cfg.pixel_upscale)

    if cfg.save_permutation and permutation_path is None:
        save_permutation(permutation, output.with_suffix(".npy"))

    result = apply_permutation(source, permutation)
    if cfg.save_result:
        save_upscaled(
            result, output.with_name(f"{output.stem}_result.png"), cfg.pixel_upscale,
        )
    if cfg.save_comparison:
        make_comparison_grid(
            source, target, result,
            output.with_name(f"{output.stem}_comparison.png"),
            max(4, cfg.pixel_upscale),
        )
    return _quality_metric(target, result)


# Defaults come from MorphConfig - single source of truth
_DEFAULTS = MorphConfig()


# -- single-image command ----------------------------------------------

@app.command()
def single(
    input_path: Path = typer.Argument(..., help="Image to morph"),
    target_path: Path = typer.Option(
        _DEFAULTS.target_path, "--target", "-t", help="Image to morph toward",
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output GIF (default: <input>_morph.gif)",
    ),
    resolution: int = typer.Option(
        _DEFAULTS.resolution, "--resolution", "-r",
        help="Width and height of the working grid",
    ),
    frames: int = typer.Option(
        _DEFAULTS.frames, "--frames", "-f", help="Frames in the animation",
    ),
    proximity: int = typer.Option(
        _DEFAULTS.proximity, "--proximity", "-p",
        help="How strongly pixels prefer to stay near their origin",
    ),
    seed: int | None = typer.Option(_DEFAULTS.seed, "--seed", "-s"),
    swaps_per_pixel: int = typer.Option(
        _DEFAULTS.swaps_per_pixel, "--swaps-per-pixel",
        help="Trial swaps per pixel per solver generation",
    ),
    solver: str = typer.Option(
        _DEFAULTS.solver, "--solver", help="'swap' or 'hungarian' (small grids)",
    ),
    permutation: Path | None = typer.Option(
        None, "--permutation", help="Reuse a saved .npy permutation",
    ),
    workers: int | None = typer.Option(
        _DEFAULTS.workers, "--workers", "-w", help="Frame-rendering threads",
    ),
    upscale: int = typer.Option(
        _DEFAULTS.pixel_upscale, "--upscale", "-u", help="Pixel upscale factor",
    ),
    save_perm: bool = typer.Option(
        _DEFAULTS.save_permutation, "--save-permutation/--no-save-permutation",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Save a Source | Target | Result grid",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Morph a single image toward the target."""
    _setup_logging(verbose)

    if solver not in SOLVERS:
        msg = f"Unknown solver '{solver}'. Expected one of {SOLVERS}."
        raise typer.BadParameter(msg, param_hint="--solver")
    for path in (input_path, target_path):
        if not path.exists():
            console.print(f"[red]File not found: {path}[/red]")
            raise typer.Exit(1)

    cfg = MorphConfig(
        resolution=resolution,
        frames=frames,
        proximity=proximity,
        seed=seed,
        swaps_per_pixel=swaps_per_pixel,
        solver=solver,
        workers=workers,
        pixel_upscale=upscale,
        save_permutation=save_perm,
        save_comparison=comparison,
        target_path=target_path,
    )
    output = output or default_output_path(input_path, cfg.output_suffix)
    output.parent.mkdir(parents=True, exist_ok=True)

    console.print(Panel.fit(
        f"[bold]PIXEL MORPH[/bold]\n"
        f"Input: {input_path}  |  Target: {target_path}\n"
        f"Output: {output}\n"
        f"Resolution: {cfg.resolution}x{cfg.resolution}  |  Frames: {cfg.frames}",
        border_style="cyan",
    ))

    t0 = time.perf_counter()
    target = load_square(target_path, cfg.resolution)
    err = morph_file(input_path, target, output, cfg, permutation)
    console.print(
        f"[green]✓[/green] Saved to {output}  "
        f"[dim]error={err:.1f}  time={time.perf_counter() - t0:.1f}s[/dim]"
    )


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    target_path: Path = typer.Option(
        _DEFAULTS.target_path, "--target", "-t", help="Image to morph toward",
    ),
    resolution: int = typer.Option(_DEFAULTS.resolution, "--resolution", "-r"),
    frames: int = typer.Option(_DEFAULTS.frames, "--frames", "-f"),
    proximity: int = typer.Option(_DEFAULTS.proximity, "--proximity", "-p"),
    seed: int | None = typer.Option(_DEFAULTS.seed, "--seed", "-s"),
    solver: str = typer.Option(_DEFAULTS.solver, "--solver"),
    workers: int | None = typer.Option(_DEFAULTS.workers, "--workers", "-w"),
    upscale: int = typer.Option(_DEFAULTS.pixel_upscale, "--upscale", "-u"),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Morph every image in INPUT_DIR toward the target, writing to OUTPUT_DIR."""
    _setup_logging(verbose)

    if solver not in SOLVERS:
        msg = f"Unknown solver '{solver}'. Expected one of {SOLVERS}."
        raise typer.BadParameter(msg, param_hint="--solver")
    if not target_path.exists():
        console.print(f"[red]Target not found: {target_path}[/red]")
        raise typer.Exit(1)

    cfg = MorphConfig(
        resolution=resolution,
        frames=frames,
        proximity=proximity,
        seed=seed,
        solver=solver,
        workers=workers,
        pixel_upscale=upscale,
        save_comparison=comparison,
        target_path=target_path,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]PIXEL MORPH[/bold]\n"
        f"Target: {target_path}  |  Resolution: {cfg.resolution}\n"
        f"Frames: {cfg.frames}  |  Solver: {cfg.solver}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    target = load_square(target_path, cfg.resolution)
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t0 = time.perf_counter()
        output = output_dir / f"{img_path.stem}{cfg.output_suffix}.gif"
        err = morph_file(img_path, target, output, cfg)
        console.print(
            f"  [green]✓[/green] {output.name}  "
            f"[dim]error={err:.1f}  time={time.perf_counter() - t0:.1f}s[/dim]"
        )

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


if __name__ == "__main__":
    app()
