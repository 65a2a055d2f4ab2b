"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class LinezConfig:
    """All tuneable parameters for a run.

    Attributes:
        iterations:      Search steps per frame, per search.
        searches:        Independent concurrent searches (1 = single-search mode).
        frames:          Frames to run before stopping (0 = until interrupted).
        seed:            Root random seed (None = non-deterministic).
        max_side:        Downscale the target so its longest side fits (None = keep size).
        output:          Where to save the final approximation (None = don't save).
        pixel_upscale:   Each pixel becomes n x n in saved images.
        gif_frames:      Snapshot frames for the progress GIF (0 = no GIF; needs a GIF path).
        log_every:       Emit an INFO progress line every n frames.
        save_comparison: Write a Target | Approximation grid next to the output.
        output_format:   Image format for batch outputs.
        input_dir:       Folder to scan for source images (batch mode).
        output_dir:      Folder for results (batch mode).
    """

    # Search
    iterations: int = 4096
    searches: int = 1
    frames: int = 500
    seed: int | None = None

    # Input
    max_side: int | None = None

    # Output
    output: Path | None = None
    pixel_upscale: int = 1
    gif_frames: int = 60
    log_every: int = 50
    save_comparison: bool = False
    output_format: str = "png"

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"iterations must be positive, got {self.iterations}")
        if self.searches < 1:
            raise ValueError(f"searches must be positive, got {self.searches}")
        if self.frames < 0:
            raise ValueError(f"frames must be >= 0, got {self.frames}")
        if self.pixel_upscale < 1:
            raise ValueError(f"pixel_upscale must be >= 1, got {self.pixel_upscale}")
        if self.max_side is not None and self.max_side < 1:
            raise ValueError(f"max_side must be >= 1, got {self.max_side}")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be >= 0, got {self.seed}")
        if self.gif_frames < 0:
            raise ValueError(f"gif_frames must be >= 0, got {self.gif_frames}")
