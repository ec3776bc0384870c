"""
Render drivers.

All three drivers run the same per-sample algorithm and only differ in how
the samples of a pixel are scheduled:

- sequential: every sample on the calling thread
- pool: one task per sample on a bounded thread pool, collected as they finish
- reduce: samples split in chunks, mapped in parallel, then folded with an
  associative sum

Pixel sums are not divided by the sample count; normalize() scales the whole
frame by its maximum, which cancels any factor shared by every pixel.
"""
import functools
import logging
import math
import random
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence

from config import ParallelMode, RenderConfig
from errors import NormalizationError
from raytrace_cpu import sample_pixel
from scene import Scene
from vectors import BLACK, Color, add

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 50


def sample_rng(config: RenderConfig, pixel: int, sample: int) -> random.Random:
    """
    Random source owned by one sample.

    With a seed, the stream only depends on (seed, pixel, sample), so every
    driver draws the same numbers whatever thread runs the sample.
    """
    if config.seed is None:
        return random.Random()
    return random.Random(f"{config.seed}:{pixel}:{sample}")


def render_sample(scene: Scene, config: RenderConfig, line: int, column: int,
                  sample: int) -> Color:
    pixel = line * scene.camera.width() + column
    return sample_pixel(scene, config, column, line, sample_rng(config, pixel, sample))


def render_samples(scene: Scene, config: RenderConfig, line: int, column: int,
                   samples: Sequence[int]) -> Color:
    """Sum of a run of samples for one pixel, computed on the calling thread."""
    return functools.reduce(
        add, (render_sample(scene, config, line, column, s) for s in samples), BLACK)


def _render_lines(scene: Scene, config: RenderConfig,
                  render_pixel: Callable[[int, int], Color]) -> List[float]:
    width, height = scene.camera.width(), scene.camera.height()
    data: List[float] = []
    for line in range(height):
        if line % PROGRESS_EVERY == 0:
            logger.info("Progress: %d/%d (%d%%)", line, height, 100 * line // height)
        for column in range(width):
            data.extend(render_pixel(line, column))
    return data


def render_sequential(scene: Scene, config: RenderConfig) -> List[float]:
    """Raw (unnormalized) row-major RGB buffer, one thread."""
    samples = range(config.samples)
    return _render_lines(
        scene, config,
        lambda line, column: render_samples(scene, config, line, column, samples))


def render_pool(scene: Scene, config: RenderConfig) -> List[float]:
    """Raw RGB buffer; each sample is a task on a pool of config.workers threads."""
    def render_pixel(line: int, column: int) -> Color:
        futures = [pool.submit(render_sample, scene, config, line, column, s)
                   for s in range(config.samples)]
        color = BLACK
        for future in as_completed(futures):
            color = add(color, future.result())
        return color

    with ThreadPoolExecutor(max_workers=config.workers,
                            thread_name_prefix="raytrace-pool") as pool:
        return _render_lines(scene, config, render_pixel)


def split_samples(samples: int, chunks: int) -> List[range]:
    """Cut range(samples) into at most `chunks` contiguous, non-empty runs."""
    chunks = max(1, min(chunks, samples))
    size = math.ceil(samples / chunks)
    return [range(start, min(start + size, samples)) for start in range(0, samples, size)]


def render_reduce(scene: Scene, config: RenderConfig) -> List[float]:
    """Raw RGB buffer; per pixel, chunks of samples are mapped in parallel and summed."""
    chunks = split_samples(config.samples, config.workers)

    def render_pixel(line: int, column: int) -> Color:
        partial = pool.map(
            lambda run: render_samples(scene, config, line, column, run), chunks)
        return functools.reduce(add, partial, BLACK)

    with ThreadPoolExecutor(max_workers=config.workers,
                            thread_name_prefix="raytrace-reduce") as pool:
        return _render_lines(scene, config, render_pixel)


DRIVERS: Dict[ParallelMode, Callable[[Scene, RenderConfig], List[float]]] = {
    ParallelMode.SEQUENTIAL: render_sequential,
    ParallelMode.POOL: render_pool,
    ParallelMode.REDUCE: render_reduce,
}


def normalize(data: Sequence[float]) -> List[float]:
    """
    Divide every channel by the largest one in the frame.

    Raises:
        NormalizationError: if the buffer is empty or its maximum is not a
            positive finite number
    """
    if not data:
        raise NormalizationError("cannot normalize an empty buffer")
    if any(math.isnan(v) for v in data):
        raise NormalizationError("buffer contains NaN radiance")
    max_intensity = max(data)
    if not 0.0 < max_intensity < math.inf:
        raise NormalizationError(f"maximum radiance must be positive and finite, got {max_intensity}")
    return [v / max_intensity for v in data]


def render(scene: Scene, config: Optional[RenderConfig] = None) -> List[float]:
    """
    Render the scene with the driver selected by config.mode.

    Returns:
        Normalized row-major RGB values in [0, 1], 3 per pixel
    """
    config = (config or RenderConfig()).validate()
    width, height = scene.camera.width(), scene.camera.height()
    logger.info("Rendering %dx%d image, %d samples per pixel, %d max bounces (%s)",
                width, height, config.samples, config.max_bounces, config.mode.value)
    if config.mode is not ParallelMode.SEQUENTIAL:
        logger.debug("Using %d worker threads", config.workers)

    start = time.perf_counter()
    data = DRIVERS[config.mode](scene, config)
    logger.info("Rendered in %.2fs", time.perf_counter() - start)
    return normalize(data)
