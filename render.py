import sys
import time
from argparse import ArgumentParser
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
VERBOSE = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import numpy as np

# Imports for visualization
import PIL.Image
import matplotlib.pyplot as plt

from mandelbrot_sampler import (
    SampleConfig,
    build_progress_bar,
    grid_to_image,
    sample_grid,
    subsample_count,
)
from mandelbrot_sampler.coloring import get_colormap


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set with jittered supersampling.')

    parser.add_argument('-o', '--output', type=str,
                        dest='output', help='output file path to use instead of the image preview window',
                        metavar='OUTPUT', default=None)

    parser.add_argument('-x', '--x-res', type=int,
                        dest='x_res', help='width of the generated image',
                        metavar='X_RES', default=1000)

    parser.add_argument('-y', '--y-res', type=int,
                        dest='y_res', help='height of the generated image',
                        metavar='Y_RES', default=1000)

    parser.add_argument('-r', '--real-offset', type=float,
                        dest='real_offset', help='center location on the real axis',
                        metavar='REAL_OFFSET', default=-1.0)

    parser.add_argument('-c', '--complex-offset', type=float,
                        dest='complex_offset', help='center location on the imaginary axis',
                        metavar='COMPLEX_OFFSET', default=0.0)

    parser.add_argument('-z', '--zoom', type=float,
                        dest='zoom', help='zoom factor (pixels per unit distance on the complex plane)',
                        metavar='ZOOM', default=250.0)

    parser.add_argument('-t', '--threshold', type=float,
                        dest='threshold', help='magnitude past which the sequence is assumed to diverge',
                        metavar='THRESHOLD', default=2.0)

    parser.add_argument('-m', '--max-iterations', type=int,
                        dest='max_iterations', help='number of iterations before assuming the sequence does not diverge',
                        metavar='MAX_ITERATIONS', default=100)

    parser.add_argument('-w', '--workers', type=int,
                        dest='workers', help='number of worker threads to run the calculation on',
                        metavar='WORKERS', default=1)

    parser.add_argument('-s', '--samples', type=int,
                        dest='samples', help='samples per pixel; rounded down to a perfect square',
                        metavar='SAMPLES', default=1)

    parser.add_argument('--smooth', dest='smooth', action='store_true',
                        help='use the continuous escape count for smoother gradients')

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap to colorize the fractal (e.g. "viridis"); grayscale when omitted',
                        metavar='COLORMAP', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging.')

    return parser


def resolve_config(opt, parser: ArgumentParser) -> SampleConfig:
    if opt.x_res <= 0 or opt.y_res <= 0:
        parser.error("--x-res and --y-res must be positive.")
    if opt.zoom <= 0:
        parser.error("--zoom must be positive.")
    if opt.threshold <= 0:
        parser.error("--threshold must be positive.")
    if opt.max_iterations < 0:
        parser.error("--max-iterations must not be negative.")
    if opt.samples < 1:
        parser.error("--samples must be at least 1.")
    if opt.workers < 1:
        parser.error("--workers must be at least 1.")

    if opt.colormap is not None:
        try:
            get_colormap(opt.colormap)
        except (KeyError, ValueError):
            parser.error(f"Unknown colormap '{opt.colormap}'.")

    per_side = subsample_count(opt.samples)
    if per_side * per_side != opt.samples:
        log("%d samples per pixel is not a perfect square, using %d" % (opt.samples, per_side * per_side))

    return SampleConfig(
        x_res=opt.x_res,
        y_res=opt.y_res,
        real_offset=opt.real_offset,
        complex_offset=opt.complex_offset,
        zoom=opt.zoom,
        threshold=opt.threshold,
        max_iterations=opt.max_iterations,
        samples=opt.samples,
        smooth=bool(opt.smooth),
        workers=opt.workers,
    )


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def resolve_output_path(output: str) -> Path:
    output_path = Path(output).expanduser()
    if not output_path.suffix:
        output_path = output_path.with_suffix(".png")
    return output_path.resolve()


def write_single_image(image: PIL.Image.Image, output_path: Path) -> None:
    """Write a single image to ``output_path``; the format follows its extension."""

    pil_format = _pil_format_name(output_path.suffix.lstrip("."))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def show_image(image: PIL.Image.Image) -> None:
    """Display the image in a window and wait for the user to press escape."""

    fig, ax = plt.subplots(num="Mandelbrot")
    ax.imshow(np.asarray(image))
    ax.set_axis_off()
    fig.tight_layout()

    def on_key(event):
        if event.key == "escape":
            plt.close(fig)

    fig.canvas.mpl_connect("key_press_event", on_key)
    plt.show()


def main(argv=None):
    started = time.perf_counter()
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = resolve_config(opt, parser)
    output_path = resolve_output_path(opt.output) if opt.output else None
    log("Sampling %dx%d pixels with %d worker(s)" % (config.x_res, config.y_res, config.workers))

    progress_bar = build_progress_bar(config.x_res * config.y_res)
    progress_bar.set_message("Sampling Mandelbrot")
    result = sample_grid(config, progress_bar)

    image = grid_to_image(result, config.max_iterations, colormap=opt.colormap)

    try:
        if output_path is not None:
            progress_bar.set_message("Saving image")
            write_single_image(image, output_path)
            log("Saved %s" % output_path)
        else:
            progress_bar.set_message("Displaying image")
            show_image(image)
    finally:
        progress_bar.finish()

    elapsed = int((time.perf_counter() - started) * 1000)
    print(f"Finished in {elapsed}ms")


if __name__ == '__main__':
    main()
