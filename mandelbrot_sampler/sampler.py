"""Point sampling primitives for the Mandelbrot set."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

LOG2 = math.log(2.0)


@dataclass(frozen=True)
class SampleConfig:
    """Parameters that describe a single sampling pass over the complex plane."""

    x_res: int
    y_res: int
    real_offset: float
    complex_offset: float
    zoom: float
    threshold: float
    max_iterations: int
    samples: int = 1
    smooth: bool = False
    workers: int = 1


def view_offset(config: SampleConfig) -> complex:
    return complex(config.real_offset, config.complex_offset)


def view_center(config: SampleConfig) -> complex:
    """Half the window extent, used to put ``offset`` in the middle of the image."""

    return complex(config.x_res, config.y_res) / config.zoom / 2.0


def pixel_to_complex(x: int, y: int, center: complex, offset: complex, zoom: float) -> complex:
    """Convert a pixel location to a location on the complex plane."""

    sample = complex(x, y) / zoom
    return sample + offset - center


def map_pixel(config: SampleConfig, x: int, y: int) -> complex:
    return pixel_to_complex(x, y, view_center(config), view_offset(config), config.zoom)


def sample_mandelbrot(c: complex, threshold: float, max_iterations: int, smooth: bool = False) -> Optional[float]:
    """Sample the Mandelbrot set at ``c``.

    Returns the 1-indexed iteration at which the orbit left the ``threshold``
    radius, or ``None`` if it stayed bounded for ``max_iterations`` steps.
    """

    z = 0j
    if smooth:
        for iteration in range(max_iterations):
            z = z * z + c
            magnitude = math.hypot(z.real, z.imag)
            if magnitude > threshold:
                return smooth_iteration(iteration + 1, magnitude, threshold)
        return None

    threshold_squared = threshold * threshold
    for iteration in range(max_iterations):
        z = z * z + c
        if z.real * z.real + z.imag * z.imag > threshold_squared:
            return float(iteration + 1)
    return None


def smooth_iteration(iteration: int, magnitude: float, threshold: float) -> float:
    """Continuous escape count for an orbit that left at ``iteration`` with ``|z| = magnitude``.

    Lies in ``[iteration, iteration + 1)`` whenever ``threshold < magnitude <= threshold ** 2``.
    Thresholds of 1 or less make the formula infinite or NaN; the orbit still
    escaped, so the integer ``iteration`` is returned instead.
    """

    with np.errstate(divide="ignore", invalid="ignore"):
        value = iteration + 1.0 - np.log(np.log(magnitude) / np.log(threshold)) / LOG2
    if not np.isfinite(value):
        return float(iteration)
    return float(value)


def subsample_count(samples: int) -> int:
    """Sub-samples taken per side of a pixel; non-square counts round down."""

    return math.isqrt(max(int(samples), 0))


def _open_uniform(rng: np.random.Generator, half_width: float) -> float:
    """Draw from the open interval ``(-half_width, half_width)``."""

    while True:
        value = rng.uniform(-half_width, half_width)
        if value != -half_width or half_width == 0.0:
            return value


def random_offset(c: complex, width: float, rng: np.random.Generator) -> complex:
    half_width = width / 2.0
    re = _open_uniform(rng, half_width)
    im = _open_uniform(rng, half_width)
    return c + complex(re, im)


def super_sample_mandelbrot(
    config: SampleConfig,
    c: complex,
    rng: Optional[np.random.Generator] = None,
) -> Optional[float]:
    """Average jittered samples taken across the pixel whose corner maps to ``c``.

    The pixel is split into ``subsample_count(samples) ** 2`` cells and one
    uniformly jittered point is evaluated per cell. Only diverged samples
    contribute to the average; the result is ``None`` if none diverged.
    A fresh generator is created when ``rng`` is not given, so concurrent
    callers never share random state.
    """

    per_side = subsample_count(config.samples)
    if per_side == 0:
        return None

    if rng is None:
        rng = np.random.default_rng()

    subpixel_width = (1.0 / config.zoom) / math.sqrt(config.samples)
    total = 0.0
    diverged = 0

    for dx in range(per_side):
        for dy in range(per_side):
            subpixel_center = c + complex(dx * subpixel_width, dy * subpixel_width)
            location = random_offset(subpixel_center, subpixel_width, rng)
            value = sample_mandelbrot(location, config.threshold, config.max_iterations, config.smooth)
            if value is not None:
                total += value
                diverged += 1

    if diverged == 0:
        return None
    return total / diverged


def sample_pixel(config: SampleConfig, center: complex, offset: complex, x: int, y: int) -> Optional[float]:
    location = pixel_to_complex(x, y, center, offset, config.zoom)
    return super_sample_mandelbrot(config, location)
