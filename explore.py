import os
import sys
import warnings
from argparse import ArgumentParser
from pathlib import Path
from typing import Optional

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_quiet_tensorflow = (not _cli_verbose) and os.environ.get("TF_CPP_MIN_LOG_LEVEL") != "0"

if _quiet_tensorflow:
    os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "3")
    warnings.filterwarnings("ignore", category=UserWarning, module="google.protobuf")

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _quiet_tensorflow:
    tf.get_logger().setLevel("ERROR")

from mandelscope import (
    CenterFinder,
    InvalidConfiguration,
    NoStructureFound,
    Options,
    ZoomStep,
    pixelise,
    random_offset,
    solve,
    write_ppm,
)

_USAGE_LINES = (
    "Available keys and their types / requirements are listed below.",
    "    seed        : non-negative integer below 2**64",
    "    grid_size   : positive floating number",
    "    width       : positive integer number",
    "    height      : positive integer number",
    "    fname       : string which ends with '.ppm'",
    "    zoom_factor : floating number in (0, 1)",
    "    shrinkage   : positive integer number",
)


def select_device() -> str:
    """Use the first visible GPU when TensorFlow can see one, the CPU otherwise."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log("GPU setup failed (%s), using CPU" % e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def build_parser():
    defaults = Options()
    parser = ArgumentParser(
        description='Find a complex region of the Mandelbrot set and render it as a PPM image.')

    parser.add_argument('--seed', type=int,
                        dest='seed', help='random seed for the initial offset of the search',
                        metavar='SEED', default=defaults.seed)

    parser.add_argument('--grid-size', '--grid_size', type=float,
                        dest='grid_size', help='inter-pixel distance of the final image',
                        metavar='GRID_SIZE', default=defaults.grid_size)

    parser.add_argument('--width', type=int,
                        dest='width', help='number of pixels along the x-axis',
                        metavar='WIDTH', default=defaults.width)

    parser.add_argument('--height', type=int,
                        dest='height', help='number of pixels along the y-axis',
                        metavar='HEIGHT', default=defaults.height)

    parser.add_argument('--fname', type=str,
                        dest='fname', help='name of the resulting image, must end with .ppm',
                        metavar='FNAME', default=defaults.fname)

    parser.add_argument('--zoom-factor', '--zoom_factor', type=float,
                        dest='zoom_factor', help='factor applied to the inter-pixel distance at every search step',
                        metavar='ZOOM_FACTOR', default=defaults.zoom_factor)

    parser.add_argument('--shrinkage', type=int,
                        dest='shrinkage', help='divisor turning the image resolution into the coarse search grid',
                        metavar='SHRINKAGE', default=defaults.shrinkage)

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap (e.g. "magma"); the angular phase palette is used when omitted',
                        metavar='COLORMAP', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and per-step search diagnostics.')

    return parser


def resolve_options(opt, parser: ArgumentParser) -> Options:
    options = Options(
        seed=opt.seed,
        grid_size=opt.grid_size,
        width=opt.width,
        height=opt.height,
        fname=opt.fname,
        zoom_factor=opt.zoom_factor,
        shrinkage=opt.shrinkage,
        colormap=opt.colormap,
    )
    try:
        return options.validate()
    except InvalidConfiguration as exc:
        print("ERROR: failed to load command-line arguments.", file=sys.stderr)
        for line in _USAGE_LINES:
            print(line, file=sys.stderr)
        parser.error(str(exc))


def _log_step(step: ZoomStep) -> None:
    log("    delta: {:.1e} center: ({:+.1e}, {:+.1e}), comp: {:8}".format(
        step.delta, step.next_center.x, step.next_center.y, step.complexity))


def run(options: Options, device: Optional[str] = None) -> Path:
    """Search for a center, solve the full image around it and write the PPM file."""

    finder = CenterFinder(shrinkage=options.shrinkage, zoom_factor=options.zoom_factor)

    print("looking for a center, hang on...")
    center = finder.find_center(
        options.resolution,
        options.grid_size,
        offset=random_offset(options.seed),
        device=device,
        on_step=_log_step,
    )
    print("it is found at ({:+.15e}, {:+.15e})".format(center.x, center.y))

    result = solve(options.resolution, center, options.grid_size, device=device)
    pixels = pixelise(result, options.resolution, colormap=options.colormap)
    return write_ppm(pixels, options.output_path)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    options = resolve_options(opt, parser)
    print("The settings are configured as follows.")
    for line in options.summary():
        print(line)

    log("TensorFlow version: %s" % tf.__version__)
    device = select_device()

    try:
        path = run(options, device=device)
    except NoStructureFound as exc:
        log(str(exc))
        print("no structure is found inside the domain")
        print("try another random seed to change the initial condition")
        return 1

    log("image written to %s" % path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
