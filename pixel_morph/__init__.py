"""
Pixel Morph
===========

Rearrange the pixels of any square image so that, keeping their colours,
their layout resembles a target image - then animate the pixels flying
from where they started to where they were assigned.

- **Swap solver** (greedy local search with a shrinking search radius)
- **Hungarian solver** (optimal, for small grids)
- **Splat renderer** for the in-between frames
"""

__version__ = "1.0.0"

from pixel_morph.animation import ease_in_out_cubic, frame_times, render_animation
from pixel_morph.config import MorphConfig
from pixel_morph.cost import placement_cost, total_cost
from pixel_morph.frames import render_frame
from pixel_morph.grid import apply_permutation, validate_permutation
from pixel_morph.image_io import load_square, save_gif
from pixel_morph.solver_hungarian import solve_hungarian
from pixel_morph.solver_swap import solve_swap

__all__ = [
    "MorphConfig",
    "apply_permutation",
    "ease_in_out_cubic",
    "frame_times",
    "load_square",
    "placement_cost",
    "render_animation",
    "render_frame",
    "save_gif",
    "solve_hungarian",
    "solve_swap",
    "total_cost",
    "validate_permutation",
]
