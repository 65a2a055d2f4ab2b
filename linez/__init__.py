"""
Linez
=====

Approximate any image by drawing random coloured lines, keeping only the
ones that bring the canvas closer to the target (greedy hill climbing).
Ships two drivers:

- **Single search** (one canvas, strictly sequential)
- **Multi search** (N independent canvases on threads, merged per pixel)
"""

__version__ = "1.0.0"

from linez.canvas import Canvas
from linez.compose import compose
from linez.config import LinezConfig
from linez.driver import MultiSearchDriver, SingleSearchDriver, make_driver, run_frames
from linez.image_io import (
    compute_target_size,
    decode_frame,
    load_target,
    make_comparison_grid,
    save_canvas,
)
from linez.lines import Line, bresenham, random_line
from linez.loss import loss_delta, pixel_loss, total_loss
from linez.search import run_batch, tick

__all__ = [
    "Canvas",
    "LinezConfig",
    "Line",
    "MultiSearchDriver",
    "SingleSearchDriver",
    "bresenham",
    "compose",
    "compute_target_size",
    "decode_frame",
    "load_target",
    "loss_delta",
    "make_comparison_grid",
    "make_driver",
    "pixel_loss",
    "random_line",
    "run_batch",
    "run_frames",
    "save_canvas",
    "tick",
    "total_loss",
]
