"""Color mapping from escape values to images."""

from __future__ import annotations

from typing import Optional

import numpy as np
import PIL.Image
from matplotlib import colormaps

from .grid import SampleResult

INSIDE_COLOR = (0, 0, 0)


def _normalize(values: np.ndarray, max_iterations: int) -> tuple[np.ndarray, np.ndarray]:
    inside = np.isnan(values)
    t = np.where(inside, 0.0, values / max(max_iterations, 1))
    return t, inside


def gray_levels(values, max_iterations: int) -> np.ndarray:
    """Gray level ``(1 - v / max_iterations) * 255`` for each escape value; NaN is black."""

    t, inside = _normalize(np.asarray(values, dtype=np.float64), max_iterations)
    gray = np.uint8(np.clip((1.0 - t) * 255.0, 0.0, 255.0))
    return np.where(inside, np.uint8(INSIDE_COLOR[0]), gray).astype(np.uint8)


def iterations_to_color(iterations: Optional[float], max_iterations: int) -> tuple[int, int, int]:
    """Map an escape value to a gray level; bounded orbits are black."""

    if iterations is None:
        return INSIDE_COLOR
    color = int(gray_levels(iterations, max_iterations))
    return (color, color, color)


def get_colormap(name: str):
    return colormaps[name]


def grid_to_image(result: SampleResult, max_iterations: int, *, colormap: Optional[str] = None) -> PIL.Image.Image:
    """Render ``result`` to an RGB image of ``x_res`` by ``y_res`` pixels.

    Without ``colormap`` each pixel gets the gray level of
    :func:`iterations_to_color`. With a matplotlib colormap name the
    normalized escape value ``v / max_iterations`` is looked up instead.
    """

    # grid is indexed (x, y); images are (row, col)
    values = np.asarray(result.grid, dtype=np.float64).T

    if colormap is None:
        rgb = np.stack((gray_levels(values, max_iterations),) * 3, axis=-1)
    else:
        t, inside = _normalize(values, max_iterations)
        cmap = get_colormap(colormap)
        rgba = np.array(cmap(np.clip(t, 0.0, 1.0)), copy=True)
        rgb = np.uint8(np.clip(rgba[..., :3] * 255, 0, 255))
        for k in (0, 1, 2):
            rgb[..., k] = np.where(inside, INSIDE_COLOR[k], rgb[..., k])

    return PIL.Image.fromarray(np.ascontiguousarray(rgb))
