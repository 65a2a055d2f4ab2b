"""Image loading, saving, frame decoding and comparison-grid generation."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from linez.canvas import Canvas

logger = logging.getLogger(__name__)


def compute_target_size(
    original_width: int,
    original_height: int,
    max_side: int,
) -> tuple[int, int]:
    """Compute downscaled (w, h) preserving aspect ratio.

    The longest side becomes *max_side*; the other is scaled
    proportionally (rounded to the nearest integer, minimum 1).
    Images already within *max_side* keep their size.
    """
    if max(original_width, original_height) <= max_side:
        return original_width, original_height
    if original_width >= original_height:
        w = max_side
        h = max(1, round(original_height * max_side / original_width))
    else:
        h = max_side
        w = max(1, round(original_width * max_side / original_height))
    return w, h


def load_target(path: str | Path, max_side: int | None = None) -> Canvas:
    """Decode an image file into a target canvas.

    Args:
        path:     Any format Pillow can open.
        max_side: Optional longest-side limit (aspect ratio preserved).
    """
    img = Image.open(path).convert("RGB")
    if max_side is not None:
        w, h = compute_target_size(img.width, img.height, max_side)
        if (w, h) != img.size:
            logger.debug("Resizing %s from %dx%d to %dx%d", path, *img.size, w, h)
            img = img.resize((w, h), Image.LANCZOS)
    return Canvas.from_array(np.array(img, dtype=np.uint8))


def canvas_to_image(canvas: Canvas, pixel_upscale: int = 1) -> Image.Image:
    img = Image.fromarray(canvas.to_array())
    if pixel_upscale > 1:
        img = img.resize(
            (canvas.width * pixel_upscale, canvas.height * pixel_upscale),
            Image.NEAREST,
        )
    return img


def save_canvas(
    canvas: Canvas,
    path: str | Path,
    pixel_upscale: int = 1,
) -> None:
    """Save a canvas, optionally nearest-neighbour upscaled."""
    canvas_to_image(canvas, pixel_upscale).save(path)


def decode_frame(buffer: np.ndarray, width: int, height: int) -> np.ndarray:
    """Unpack a ``(0, r, g, b)`` uint32 display buffer.

    Returns:
        (H, W, 3) uint8 array.
    """
    packed = np.asarray(buffer, dtype=np.uint32).reshape(height, width)
    rgb = np.empty((height, width, 3), dtype=np.uint8)
    rgb[..., 0] = (packed >> 16) & 0xFF
    rgb[..., 1] = (packed >> 8) & 0xFF
    rgb[..., 2] = packed & 0xFF
    return rgb


def save_animation(
    frames: list[Image.Image],
    path: str | Path,
    duration: int = 120,
) -> None:
    """Write captured frames as a looping GIF."""
    if not frames:
        logger.warning("No frames captured, skipping %s", path)
        return
    frames[0].save(
        path,
        save_all=True,
        append_images=frames[1:],
        duration=duration,
        loop=0,
    )
    logger.info("Animation saved: %s (%d frames)", path, len(frames))


def make_comparison_grid(
    target: Canvas,
    approx: Canvas,
    output_path: str | Path,
    pixel_upscale: int = 1,
) -> None:
    """Create a 2-panel comparison: Target | Approximation."""
    panel_w = target.width * pixel_upscale
    panel_h = target.height * pixel_upscale
    label_height = 36

    panels = [
        canvas_to_image(target, pixel_upscale),
        canvas_to_image(approx, pixel_upscale),
    ]
    labels = [f"Target {target.width}x{target.height}", "Approximation"]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    grid = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(grid)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        grid.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    grid.save(output_path)
