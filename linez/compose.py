"""Per-pixel ensemble of several approximations."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from linez.canvas import Canvas


def compose(target: Canvas, canvases: Sequence[Canvas]) -> Canvas:
    """Merge approximations by keeping, per pixel, the colour closest to ``target``.

    Args:
        target:   Reference image.
        canvases: One or more approximations with the target's dimensions.

    Returns:
        A new canvas.  Ties go to the earliest canvas in ``canvases``.
    """
    if not canvases:
        raise ValueError("compose() needs at least one canvas")
    for c in canvases:
        if (c.width, c.height) != (target.width, target.height):
            raise ValueError(
                f"{c!r} does not match target {target.width}x{target.height}"
            )

    stack = np.stack([c.array for c in canvases])  # (N, H, W, 3)
    t = target.array.astype(np.float64)
    losses = np.sum((stack.astype(np.float64) - t) ** 2, axis=3)  # (N, H, W)

    # argmin returns the first minimum, which is the tie-break we want
    best = np.argmin(losses, axis=0)
    merged = np.take_along_axis(stack, best[np.newaxis, :, :, np.newaxis], axis=0)[0]
    return Canvas.from_array(merged)
