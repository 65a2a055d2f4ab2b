"""Frame-by-frame drivers for the single and multi-search variants."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from linez.canvas import Canvas
from linez.compose import compose
from linez.config import LinezConfig
from linez.loss import total_loss
from linez.search import run_batch

logger = logging.getLogger(__name__)


class SingleSearchDriver:
    """One approximation canvas, one random stream, strictly sequential.

    Each :meth:`step` is one frame: ``iterations`` search steps, then a
    re-encode of the display buffer if anything was drawn.
    """

    def __init__(
        self,
        target: Canvas,
        iterations: int = 4096,
        seed: int | np.random.SeedSequence | None = None,
    ) -> None:
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")
        self.target = target
        self.iterations = iterations
        self.approx = Canvas.blank(target.width, target.height)
        self.rng = np.random.default_rng(seed)
        self.buffer = self.approx.encode()
        self.frame = 0
        self.accepted = 0

    @property
    def searches(self) -> int:
        return 1

    def step(self) -> bool:
        """Run one frame; return True if at least one line was accepted."""
        accepted = run_batch(self.rng, self.target, self.approx, self.iterations)
        self.frame += 1
        self.accepted += accepted

        if accepted:
            self.approx.encode_to(self.buffer)

        logger.debug("frame %d  accepted=%d/%d", self.frame, accepted, self.iterations)
        return accepted > 0

    def result(self) -> Canvas:
        return self.approx

    def loss(self) -> float:
        return total_loss(self.target, self.result())

    def close(self) -> None:
        pass

    def __enter__(self) -> SingleSearchDriver:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class MultiSearchDriver:
    """N independent searches run concurrently, merged per pixel each frame.

    Every search owns its canvas and its random stream (spawned from one
    :class:`numpy.random.SeedSequence`); the target is only read.  A frame
    runs one batch per search on a thread pool, waits for all of them, then
    composes the canvases into :attr:`composite`.
    """

    def __init__(
        self,
        target: Canvas,
        iterations: int = 4096,
        searches: int = 2,
        seed: int | np.random.SeedSequence | None = None,
    ) -> None:
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")
        if searches < 1:
            raise ValueError(f"searches must be positive, got {searches}")
        self.target = target
        self.iterations = iterations
        self.canvases = [Canvas.blank(target.width, target.height) for _ in range(searches)]

        root = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
        self.rngs = [np.random.default_rng(s) for s in root.spawn(searches)]

        self.composite = Canvas.blank(target.width, target.height)
        self.buffer = self.composite.encode()
        self.frame = 0
        self.accepted = 0
        self._pool = ThreadPoolExecutor(
            max_workers=searches, thread_name_prefix="linez-search",
        )

    @property
    def searches(self) -> int:
        return len(self.canvases)

    def _search(self, index: int) -> int:
        return run_batch(self.rngs[index], self.target, self.canvases[index], self.iterations)

    def step(self) -> bool:
        """Run one frame on every search; return True if any line was accepted."""
        # map() returns only after every batch finished: that is the barrier
        counts = list(self._pool.map(self._search, range(self.searches)))
        accepted = sum(counts)
        self.frame += 1
        self.accepted += accepted

        if accepted:
            self.composite = compose(self.target, self.canvases)
            self.composite.encode_to(self.buffer)

        logger.debug("frame %d  accepted per search=%s", self.frame, counts)
        return accepted > 0

    def result(self) -> Canvas:
        return self.composite

    def loss(self) -> float:
        return total_loss(self.target, self.result())

    def close(self) -> None:
        self._pool.shutdown(wait=True)

    def __enter__(self) -> MultiSearchDriver:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


Driver = SingleSearchDriver | MultiSearchDriver


def make_driver(target: Canvas, cfg: LinezConfig) -> Driver:
    """Single-search driver for ``searches == 1``, multi-search otherwise."""
    if cfg.searches == 1:
        driver: Driver = SingleSearchDriver(target, cfg.iterations, seed=cfg.seed)
    else:
        driver = MultiSearchDriver(target, cfg.iterations, cfg.searches, seed=cfg.seed)

    logger.info(
        "Driver ready | %dx%d  searches=%d  iterations/frame=%s  seed=%s",
        target.width, target.height, driver.searches, f"{cfg.iterations:,}", cfg.seed,
    )
    return driver


def run_frames(
    driver: Driver,
    frames: int,
    log_every: int = 50,
    on_frame: Callable[[Driver, bool], None] | None = None,
    should_stop: Callable[[], bool] | None = None,
) -> int:
    """Step ``driver`` until ``frames`` frames ran (0 = no limit) or ``should_stop()``.

    ``should_stop`` is only consulted between frames; a batch in flight is
    always finished.  ``on_frame(driver, improved)`` runs after every frame.

    Returns:
        Number of frames run.
    """
    t0 = time.perf_counter()
    done = 0
    while frames == 0 or done < frames:
        if should_stop is not None and should_stop():
            logger.info("Stopped after %d frames", done)
            break
        improved = driver.step()
        done += 1
        if on_frame is not None:
            on_frame(driver, improved)
        if log_every and done % log_every == 0:
            logger.info(
                "  frame %5d  loss=%.0f  lines=%s  (%.0f s)",
                done, driver.loss(), f"{driver.accepted:,}", time.perf_counter() - t0,
            )

    logger.info(
        "Done      | frames=%d  loss=%.0f  lines=%s  (%.1f s)",
        done, driver.loss(), f"{driver.accepted:,}", time.perf_counter() - t0,
    )
    return done
