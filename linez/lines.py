"""Random line proposals and their rasterisation."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from linez.canvas import Color, Point

# Channels are drawn from [0, COLOR_HIGH); 255 itself is never proposed.
COLOR_HIGH = 255


def bresenham(start: Point, end: Point) -> Iterator[Point]:
    """Integer grid points from ``start`` to ``end``, both included.

    Works in all octants.  Every yielded point lies in the bounding box of
    the two endpoints.
    """
    x0, y0 = start
    x1, y1 = end
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


@dataclass(frozen=True)
class Line:
    """A straight segment painted in a single colour."""

    start: Point
    end: Point
    color: Color

    def points(self) -> Iterator[Point]:
        return bresenham(self.start, self.end)

    def changes(self, width: int, height: int) -> Iterator[tuple[Point, Color]]:
        """Lazily pair every in-bounds rasterised point with the line colour.

        Each call starts a fresh pass, so the same change set can be scored
        and then applied without materialising it.  Points outside
        ``[0, width) x [0, height)`` are dropped; with in-bounds endpoints
        there are none.
        """
        color = self.color
        for x, y in self.points():
            if 0 <= x < width and 0 <= y < height:
                yield (x, y), color


def random_line(rng: np.random.Generator, width: int, height: int) -> Line:
    """Uniformly random endpoints inside the canvas and a random colour.

    The endpoints may coincide, giving a single-pixel line.
    """
    xs = rng.integers(0, width, size=2)
    ys = rng.integers(0, height, size=2)
    r, g, b = rng.integers(0, COLOR_HIGH, size=3)
    return Line(
        start=(int(xs[0]), int(ys[0])),
        end=(int(xs[1]), int(ys[1])),
        color=(int(r), int(g), int(b)),
    )
