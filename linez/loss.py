"""Squared-RGB loss: per pixel, incremental, and over a whole canvas."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from linez.canvas import Canvas, Color, Point


def pixel_loss(a: Color, b: Color) -> float:
    """Squared Euclidean distance between two RGB colours (not perceptual)."""
    dr = float(a[0]) - float(b[0])
    dg = float(a[1]) - float(b[1])
    db = float(a[2]) - float(b[2])
    return dr * dr + dg * dg + db * db


def loss_delta(
    target: Canvas,
    approx: Canvas,
    changes: Iterable[tuple[Point, Color]],
) -> float:
    """Change in total loss if ``changes`` were drawn onto ``approx``.

    Only the touched pixels are visited; every other pixel contributes
    zero.  Negative means the changes bring ``approx`` closer to
    ``target``.

    A point listed more than once is scored each time against the
    *current* ``approx`` colour, so callers should pass changes whose
    points are distinct (a rasterised line is).
    """
    delta = 0.0
    for point, new_color in changes:
        target_color = target.color_at(point)
        delta += (
            pixel_loss(target_color, new_color)
            - pixel_loss(target_color, approx.color_at(point))
        )
    return delta


def pixel_losses(target: Canvas, approx: Canvas) -> np.ndarray:
    """Per-pixel loss map.

    Returns:
        (H, W) float64.
    """
    t = target.array.astype(np.float64)
    a = approx.array.astype(np.float64)
    return np.sum((t - a) ** 2, axis=2)


def total_loss(target: Canvas, approx: Canvas) -> float:
    """Sum of :func:`pixel_loss` over every pixel."""
    return float(np.sum(pixel_losses(target, approx)))
