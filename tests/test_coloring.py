import numpy as np
import pytest
from matplotlib import colormaps

from mandelbrot_sampler.coloring import gray_levels, grid_to_image, iterations_to_color
from mandelbrot_sampler.grid import SampleResult


@pytest.mark.parametrize(
    "value, expected",
    [(None, 0), (1.0, 252), (50.0, 127), (100.0, 0), (120.0, 0), (0.0, 255)],
)
def test_iterations_to_color_is_grayscale(value, expected):
    assert iterations_to_color(value, 100) == (expected, expected, expected)


def test_grid_to_image_uses_image_orientation():
    grid = np.array([
        [1.0, np.nan],
        [50.0, 100.0],
        [np.nan, 25.0],
    ])
    result = SampleResult(x_res=3, y_res=2, grid=grid)

    image = grid_to_image(result, 100)

    assert image.size == (3, 2)
    assert image.mode == "RGB"
    for x in range(3):
        for y in range(2):
            assert image.getpixel((x, y)) == iterations_to_color(result.value(x, y), 100)


def test_grid_to_image_with_colormap_keeps_inside_black():
    grid = np.array([[np.nan, 10.0], [40.0, 80.0]])
    result = SampleResult(x_res=2, y_res=2, grid=grid)

    image = grid_to_image(result, 80, colormap="viridis")

    assert image.getpixel((0, 0)) == (0, 0, 0)
    expected = np.uint8(np.clip(np.array(colormaps["viridis"](0.5))[:3] * 255, 0, 255))
    assert image.getpixel((1, 0)) == tuple(int(channel) for channel in expected)


def test_grid_to_image_handles_fully_bounded_grid():
    result = SampleResult(x_res=4, y_res=3, grid=np.full((4, 3), np.nan))
    image = grid_to_image(result, 0)
    assert np.asarray(image).max() == 0


def test_gray_levels_match_single_value_mapping():
    values = np.array([[1.0, np.nan, 33.3], [99.9, 50.0, 7.0]])
    levels = gray_levels(values, 100)
    for index, value in np.ndenumerate(values):
        scalar = None if np.isnan(value) else float(value)
        assert iterations_to_color(scalar, 100) == (int(levels[index]),) * 3


def test_zero_max_iterations_does_not_divide_by_zero():
    assert iterations_to_color(3.0, 0) == (0, 0, 0)
    result = SampleResult(x_res=1, y_res=1, grid=np.array([[3.0]]))
    assert grid_to_image(result, 0).getpixel((0, 0)) == (0, 0, 0)
