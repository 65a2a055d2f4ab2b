"""Greedy accept/reject step of the hill climber."""

from __future__ import annotations

import numpy as np

from linez.canvas import Canvas
from linez.lines import random_line
from linez.loss import loss_delta


def tick(rng: np.random.Generator, target: Canvas, approx: Canvas) -> bool:
    """Propose one random line and draw it only if it lowers the loss.

    This is the only place an approximation canvas is mutated.  Accepted
    lines overwrite the canvas and are never rolled back.

    Returns:
        True if the line was drawn.
    """
    line = random_line(rng, target.width, target.height)
    w, h = target.width, target.height

    if loss_delta(target, approx, line.changes(w, h)) >= 0.0:
        return False

    approx.apply(line.changes(w, h))
    return True


def run_batch(
    rng: np.random.Generator,
    target: Canvas,
    approx: Canvas,
    iterations: int,
) -> int:
    """Run ``iterations`` ticks and return how many lines were accepted."""
    accepted = 0
    for _ in range(iterations):
        if tick(rng, target, approx):
            accepted += 1
    return accepted
