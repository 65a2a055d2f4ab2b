"""RGB pixel canvas shared by the target and the approximations.

Pixels live in a flat ``bytearray`` in raster order, three bytes per
pixel.  Point reads and writes index that buffer directly; bulk work
(encoding, composition, loss over the whole image) goes through a numpy
view of the same memory.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

Point = tuple[int, int]
Color = tuple[int, int, int]


class Canvas:
    """A ``width`` x ``height`` RGB image.

    Used both for the read-only target and for the mutable approximations.
    """

    __slots__ = ("width", "height", "pixels")

    def __init__(self, width: int, height: int, pixels: bytearray) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"canvas must be at least 1x1, got {width}x{height}")
        if len(pixels) != width * height * 3:
            raise ValueError(
                f"expected {width * height * 3} bytes for {width}x{height}, "
                f"got {len(pixels)}"
            )
        self.width = width
        self.height = height
        self.pixels = pixels

    # -- construction --------------------------------------------------

    @classmethod
    def blank(cls, width: int, height: int) -> Canvas:
        """All-black canvas."""
        return cls(width, height, bytearray(width * height * 3))

    @classmethod
    def from_array(cls, array: np.ndarray) -> Canvas:
        """Copy an (H, W, 3) uint8 array into a new canvas."""
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"expected an (H, W, 3) array, got shape {array.shape}")
        h, w = array.shape[:2]
        data = np.ascontiguousarray(array, dtype=np.uint8)
        return cls(w, h, bytearray(data.tobytes()))

    def to_array(self) -> np.ndarray:
        """(H, W, 3) uint8 copy of the pixels."""
        return self.array.copy()

    def copy(self) -> Canvas:
        return Canvas(self.width, self.height, bytearray(self.pixels))

    @property
    def array(self) -> np.ndarray:
        """Writable (H, W, 3) uint8 view sharing memory with ``pixels``."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width, 3,
        )

    # -- point access --------------------------------------------------

    def _offset(self, point: Point) -> int:
        x, y = point
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"point {point} outside {self.width}x{self.height} canvas"
            )
        return (y * self.width + x) * 3

    def color_at(self, point: Point) -> Color:
        o = self._offset(point)
        p = self.pixels
        return p[o], p[o + 1], p[o + 2]

    def set_color_at(self, point: Point, color: Color) -> None:
        o = self._offset(point)
        self.pixels[o:o + 3] = bytes(color)

    def apply(self, changes: Iterable[tuple[Point, Color]]) -> None:
        """Overwrite every changed point (no blending)."""
        for point, color in changes:
            self.set_color_at(point, color)

    # -- display encoding ----------------------------------------------

    def encode_to(self, buffer: np.ndarray) -> None:
        """Pack every pixel into ``buffer`` as a big-endian ``(0, r, g, b)`` uint32.

        Args:
            buffer: (W*H,) uint32, overwritten in raster order.
        """
        if buffer.size != self.width * self.height:
            raise ValueError(
                f"buffer holds {buffer.size} pixels, canvas has "
                f"{self.width * self.height}"
            )
        rgb = self.array.reshape(-1, 3).astype(np.uint32)
        buffer[:] = (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]

    def encode(self) -> np.ndarray:
        """Freshly allocated (W*H,) uint32 display buffer."""
        buffer = np.zeros(self.width * self.height, dtype=np.uint32)
        self.encode_to(buffer)
        return buffer

    # -- dunder --------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Canvas):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.pixels == other.pixels
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"
