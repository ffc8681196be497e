import math
import sys
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import PIL.Image

from julia import (
    DEFAULT_ITERATIONS,
    DEFAULT_SCHEME,
    RenderParameters,
    Viewport,
    WorkerStartError,
    fill_julia_set,
    parse_hex_color,
)

SUCCESS = 0
FAILURE = 1
INSUFFICIENT_ARGS_FAIL = 2
ARG_BELOW_ONE_FAIL = 3
ARG_NOT_A_NUMBER_FAIL = 4

WINDOW_TITLE = "Julia Set"

VERBOSE = False


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


# (dest, converter) for the nine positional arguments, in command-line order.
POSITIONALS = (
    ("window_width", int),
    ("window_height", int),
    ("plane_width", float),
    ("plane_height", float),
    ("center_x", float),
    ("center_y", float),
    ("c_real", float),
    ("c_imag", float),
    ("workers", int),
)


@dataclass
class JuliaArguments:
    window_width: int
    window_height: int
    plane_width: float
    plane_height: float
    center_x: float
    center_y: float
    c_real: float
    c_imag: float
    workers: int
    max_iterations: int = DEFAULT_ITERATIONS

    @property
    def viewport(self) -> Viewport:
        return Viewport(
            center_x=self.center_x,
            center_y=self.center_y,
            plane_width=self.plane_width,
            plane_height=self.plane_height,
            window_width=self.window_width,
            window_height=self.window_height,
        )

    @property
    def c(self) -> complex:
        return complex(self.c_real, self.c_imag)


def build_parser():
    parser = ArgumentParser(description='Render a slice of the Julia set of f(z) = z^2 + C.')

    parser.add_argument('values', nargs='*', metavar='ARG',
                        help='WINDOW_WIDTH WINDOW_HEIGHT PLANE_WIDTH PLANE_HEIGHT CENTER_X CENTER_Y A B WORKERS: '
                             'window size in pixels (positive integers), size of the slice of the complex plane '
                             '(positive numbers), the point it is centered on, the complex constant C = A + Bi '
                             'and the number of worker threads (a positive integer)')

    parser.add_argument('--max-iterations', type=str,
                        dest='max_iterations', help='number of iterations applied to each point',
                        metavar='MAX_ITERATIONS', default=str(DEFAULT_ITERATIONS))
    parser.add_argument('--output', dest='output', type=str,
                        help='write the rendered image to this file')
    parser.add_argument('--format', type=str,
                        dest='format', help='file format for --output. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')
    parser.add_argument('--no-display', dest='display', action='store_false',
                        help='do not open a window; useful together with --output')
    parser.add_argument('--inside-color', type=str, default=None,
                        help='Hex color for points inside the Julia set. Default: "#000000".')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging.')

    return parser


def _to_number(raw: str, converter):
    value = converter(raw)
    if not math.isfinite(value):
        raise ValueError(f"{raw!r} is not a finite number")
    return value


def parse_arguments(opt, parser: ArgumentParser) -> JuliaArguments:
    """Convert and validate the positional arguments, exiting on failure.

    Anything after the ninth positional argument is ignored.
    """

    raw_values = list(opt.values)
    if len(raw_values) < len(POSITIONALS):
        parser.exit(INSUFFICIENT_ARGS_FAIL, "Insufficient arguments given.\n")

    values = {}
    for (dest, converter), raw in zip(POSITIONALS, raw_values):
        try:
            values[dest] = _to_number(raw, converter)
        except ValueError:
            parser.exit(ARG_NOT_A_NUMBER_FAIL, "Non-number arg given. All args must be numbers.\n")
    try:
        values["max_iterations"] = _to_number(opt.max_iterations, int)
    except ValueError:
        parser.exit(ARG_NOT_A_NUMBER_FAIL, "Non-number arg given. --max-iterations must be a number.\n")

    args = JuliaArguments(**values)

    if args.window_width <= 0 or args.window_height <= 0:
        parser.exit(ARG_BELOW_ONE_FAIL, "Window dimensions (args 1 and 2) must be greater than 0.\n")
    elif args.plane_width <= 0.0 or args.plane_height <= 0.0:
        parser.exit(ARG_BELOW_ONE_FAIL, "Plane dimensions (args 3 and 4) must be greater than 0.\n")
    elif args.workers <= 0:
        parser.exit(ARG_BELOW_ONE_FAIL, "Number of workers (arg 9) must be greater than 0.\n")
    elif args.max_iterations <= 0:
        parser.exit(ARG_BELOW_ONE_FAIL, "--max-iterations must be greater than 0.\n")

    return args


def resolve_output_path(opt, parser: ArgumentParser):
    if not opt.output:
        return None, None

    image_format = (opt.format or "png").lower().lstrip(".") or "png"
    output_path = Path(opt.output).expanduser()
    if output_path.exists() and output_path.is_dir():
        parser.error("--output must point to a file, not a directory.")
    expected_suffix = f".{image_format}"
    if output_path.suffix:
        if output_path.suffix.lower() != expected_suffix:
            parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(expected_suffix)
    return output_path.resolve(), image_format


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def grid_to_image(grid: np.ndarray) -> PIL.Image.Image:
    """Convert an ``[x, y]`` indexed RGBA grid into a Pillow image."""

    return PIL.Image.fromarray(np.ascontiguousarray(np.transpose(grid, (1, 0, 2))))


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    if pil_format == "JPEG" and image.mode != "RGB":
        image = image.convert("RGB")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def show_grid(grid: np.ndarray, title: str = WINDOW_TITLE) -> None:
    """Show ``grid`` in a window at its pixel size and block until it is closed."""

    import matplotlib.pyplot as plt

    width, height = grid.shape[0], grid.shape[1]
    dpi = 100
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    manager = fig.canvas.manager
    if manager is not None:
        manager.set_window_title(title)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_axis_off()
    ax.imshow(np.transpose(grid, (1, 0, 2)), interpolation='nearest')
    try:
        plt.show()
    finally:
        plt.close(fig)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_intermixed_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    args = parse_arguments(opt, parser)
    output_path, image_format = resolve_output_path(opt, parser)

    scheme = DEFAULT_SCHEME
    if opt.inside_color is not None:
        try:
            scheme = scheme.with_inside(parse_hex_color(opt.inside_color))
        except ValueError:
            print(f"Invalid inside_color '{opt.inside_color}', defaulting to black.")

    params = RenderParameters(
        viewport=args.viewport,
        c=args.c,
        workers=args.workers,
        max_iterations=args.max_iterations,
        scheme=scheme,
    )

    log("Window: %dx%d pixels" % (args.window_width, args.window_height))
    log("Plane: %g x %g centered on (%g, %g)" % (args.plane_width, args.plane_height, args.center_x, args.center_y))
    log("C = %s, %d iterations, %d workers" % (args.c, params.max_iterations, params.workers))

    try:
        result = fill_julia_set(params)
    except WorkerStartError as exc:
        print(f"Failed to start worker: {exc}", file=sys.stderr)
        return FAILURE

    print("Processing time: %dms" % int(result.elapsed_ms))

    if output_path is not None:
        write_single_image(grid_to_image(result.grid), output_path, image_format)
        log("Wrote %s" % output_path)

    if opt.display:
        try:
            show_grid(result.grid)
        except Exception as exc:
            print(f"Failed to display the Julia set: {exc}", file=sys.stderr)
            return FAILURE

    return SUCCESS


if __name__ == '__main__':
    sys.exit(main())
