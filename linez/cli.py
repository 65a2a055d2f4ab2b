"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import signal
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from PIL import Image, UnidentifiedImageError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from linez.canvas import Canvas
from linez.config import LinezConfig
from linez.driver import Driver, make_driver, run_frames
from linez.image_io import (
    decode_frame,
    load_target,
    make_comparison_grid,
    save_animation,
    save_canvas,
)

app = typer.Typer(
    name="linez",
    help="Approximate images with randomly drawn lines.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()
logger = logging.getLogger("linez")


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


@contextmanager
def _stop_on_interrupt() -> Iterator[list[bool]]:
    """First Ctrl-C asks the loop to stop after the current frame; the second aborts."""
    stop = [False]

    def _handler(signum: int, frame: object) -> None:
        if stop[0]:
            raise KeyboardInterrupt
        stop[0] = True
        console.print("[yellow]Interrupted - finishing the current frame ...[/yellow]")

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield stop
    finally:
        signal.signal(signal.SIGINT, previous)


def _approximate(
    target: Canvas,
    cfg: LinezConfig,
    gif_path: Path | None = None,
) -> Canvas:
    """Drive one search session and return the final (composite) canvas."""
    frames: list[Image.Image] = []
    if cfg.gif_frames > 0 and gif_path is not None:
        interval = max(1, cfg.frames // cfg.gif_frames) if cfg.frames else cfg.log_every
    else:
        interval = 0

    def _capture(driver: Driver, improved: bool) -> None:
        if interval and driver.frame % interval == 0:
            rgb = decode_frame(driver.buffer, target.width, target.height)
            img = Image.fromarray(rgb)
            if cfg.pixel_upscale > 1:
                img = img.resize(
                    (target.width * cfg.pixel_upscale, target.height * cfg.pixel_upscale),
                    Image.NEAREST,
                )
            frames.append(img)

    with make_driver(target, cfg) as driver, _stop_on_interrupt() as stop:
        run_frames(
            driver,
            cfg.frames,
            log_every=cfg.log_every,
            on_frame=_capture,
            should_stop=lambda: stop[0],
        )
        result = driver.result().copy()

    if gif_path is not None and interval:
        save_animation(frames, gif_path)
    return result


def _load_or_exit(path: Path, max_side: int | None) -> Canvas:
    try:
        return load_target(path, max_side)
    except (OSError, UnidentifiedImageError) as exc:
        console.print(f"[red]Couldn't load {path}: {exc}[/red]")
        raise typer.Exit(1) from exc


def _make_config(**kwargs: object) -> LinezConfig:
    try:
        return LinezConfig(**kwargs)  # type: ignore[arg-type]
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2) from exc


# Defaults come from LinezConfig - single source of truth
_DEFAULTS = LinezConfig()


# -- run command -------------------------------------------------------

@app.command()
def run(
    target: Path = typer.Argument(..., help="Path to the target image"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Save the final approximation here",
    ),
    iterations: int = typer.Option(
        _DEFAULTS.iterations, "--iterations", "-i", help="Search steps per frame",
    ),
    searches: int = typer.Option(
        _DEFAULTS.searches, "--searches", "-t",
        help="Concurrent independent searches (1 = single search)",
    ),
    frames: int = typer.Option(
        _DEFAULTS.frames, "--frames", "-f", help="Frames to run (0 = until Ctrl-C)",
    ),
    seed: int | None = typer.Option(
        _DEFAULTS.seed, "--seed", "-s", help="Random seed (None = random)",
    ),
    max_side: int | None = typer.Option(
        _DEFAULTS.max_side, "--max-side", "-m", help="Downscale target to this longest side",
    ),
    upscale: int = typer.Option(
        _DEFAULTS.pixel_upscale, "--upscale", "-u", help="Pixel upscale factor for saved images",
    ),
    gif: Path | None = typer.Option(None, "--gif", help="Save a progress GIF"),
    gif_frames: int = typer.Option(
        _DEFAULTS.gif_frames, "--gif-frames", help="Snapshots in the GIF",
    ),
    comparison: Path | None = typer.Option(
        None, "--comparison", help="Save a Target | Approximation grid",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Approximate a single image."""
    _setup_logging(verbose)

    cfg = _make_config(
        iterations=iterations,
        searches=searches,
        frames=frames,
        seed=seed,
        max_side=max_side,
        output=output,
        pixel_upscale=upscale,
        gif_frames=gif_frames if gif else 0,
    )
    img = _load_or_exit(target, cfg.max_side)

    console.print(Panel.fit(
        f"[bold]LINEZ[/bold]  {target.name}\n"
        f"Size: {img.width}x{img.height}  |  Searches: {cfg.searches}\n"
        f"Iterations/frame: {cfg.iterations:,}  |  "
        f"Frames: {cfg.frames or 'until Ctrl-C'}",
        border_style="cyan",
    ))

    t0 = time.perf_counter()
    approx = _approximate(img, cfg, gif_path=gif)

    if cfg.output is not None:
        cfg.output.parent.mkdir(parents=True, exist_ok=True)
        save_canvas(approx, cfg.output, cfg.pixel_upscale)
        console.print(f"[green]✓[/green] Saved to {cfg.output}")
    if comparison is not None:
        comparison.parent.mkdir(parents=True, exist_ok=True)
        make_comparison_grid(img, approx, comparison, cfg.pixel_upscale)

    console.print(f"[dim]time={time.perf_counter() - t0:.1f}s[/dim]")


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-I", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    iterations: int = typer.Option(_DEFAULTS.iterations, "--iterations", "-i"),
    searches: int = typer.Option(_DEFAULTS.searches, "--searches", "-t"),
    frames: int = typer.Option(
        _DEFAULTS.frames, "--frames", "-f", help="Frames per image (must be > 0)",
    ),
    seed: int | None = typer.Option(_DEFAULTS.seed, "--seed", "-s"),
    max_side: int | None = typer.Option(_DEFAULTS.max_side, "--max-side", "-m"),
    upscale: int = typer.Option(_DEFAULTS.pixel_upscale, "--upscale", "-u"),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Save a comparison grid per image",
    ),
    output_format: str = typer.Option(_DEFAULTS.output_format, "--format"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Approximate every image in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)

    if frames < 1:
        console.print("[red]batch needs a finite --frames count[/red]")
        raise typer.Exit(2)

    cfg = _make_config(
        iterations=iterations,
        searches=searches,
        frames=frames,
        seed=seed,
        max_side=max_side,
        pixel_upscale=upscale,
        save_comparison=comparison,
        output_format=output_format,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    output_dir.mkdir(parents=True, exist_ok=True)

    console.print(Panel.fit(
        f"[bold]LINEZ BATCH[/bold]\n"
        f"Searches: {cfg.searches}  |  Iterations/frame: {cfg.iterations:,}\n"
        f"Frames: {cfg.frames}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    skipped = 0
    for idx, img_path in enumerate(images, 1):
        stem = img_path.stem
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t_total = time.perf_counter()

        try:
            img = load_target(img_path, cfg.max_side)
        except (OSError, UnidentifiedImageError) as exc:
            logger.warning("Skipping %s: %s", img_path.name, exc)
            skipped += 1
            continue
        logger.info("Target: %dx%d = %d pixels", img.width, img.height, img.width * img.height)

        approx = _approximate(img, cfg)

        out_path = output_dir / f"{stem}_linez.{cfg.output_format}"
        save_canvas(approx, out_path, cfg.pixel_upscale)

        if cfg.save_comparison:
            comp_path = output_dir / f"{stem}_comparison.{cfg.output_format}"
            make_comparison_grid(img, approx, comp_path, cfg.pixel_upscale)

        console.print(
            f"  [green]✓[/green] {out_path.name}  "
            f"[dim]{img.width}x{img.height}  time={time.perf_counter() - t_total:.1f}s[/dim]"
        )

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]"
        + (f"  [yellow]({skipped} skipped)[/yellow]" if skipped else ""),
        border_style="green",
    ))


if __name__ == "__main__":
    app()
