"""Public API for Mandelbrot sampling utilities."""

from .sampler import (
    SampleConfig,
    map_pixel,
    pixel_to_complex,
    sample_mandelbrot,
    smooth_iteration,
    subsample_count,
    super_sample_mandelbrot,
)
from .grid import ProgressCounter, SampleResult, sample_grid
from .progress import NullProgress, ProgressBar, ProgressReporter, build_progress_bar
from .coloring import gray_levels, grid_to_image, iterations_to_color

__all__ = [
    "NullProgress",
    "ProgressBar",
    "ProgressCounter",
    "ProgressReporter",
    "SampleConfig",
    "SampleResult",
    "build_progress_bar",
    "gray_levels",
    "grid_to_image",
    "iterations_to_color",
    "map_pixel",
    "pixel_to_complex",
    "sample_grid",
    "sample_mandelbrot",
    "smooth_iteration",
    "subsample_count",
    "super_sample_mandelbrot",
]
