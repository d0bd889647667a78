import os
import sys
import warnings
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf
import numpy as np

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

import PIL.Image
import imageio

from mandelview import (
    DEFAULT_ALPHA,
    DEFAULT_BATCH_ROWS,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_PALETTE,
    DEFAULT_RECTANGLE,
    DEFAULT_ZOOM_RATE,
    MandelviewError,
    Palette,
    Rectangle,
    SessionConfig,
    ViewerSession,
    parse_color,
)


def select_device() -> str:
    """First GPU with memory growth enabled, otherwise the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def _hex(color) -> str:
    return '#%02x%02x%02x' % tuple(color)


def build_parser():
    parser = ArgumentParser(description='Render the Mandelbrot set and zoom into it by simulated clicks.')

    parser.add_argument('--width', type=int, dest='width', metavar='WIDTH', default=800,
                        help='surface width in pixels')
    parser.add_argument('--height', type=int, dest='height', metavar='HEIGHT', default=400,
                        help='surface height in pixels')

    parser.add_argument('--top', type=float, default=DEFAULT_RECTANGLE.top,
                        help='imaginary value of the top edge of the viewport')
    parser.add_argument('--left', type=float, default=DEFAULT_RECTANGLE.left,
                        help='real value of the left edge of the viewport')
    parser.add_argument('--bottom', type=float, default=DEFAULT_RECTANGLE.bottom,
                        help='imaginary value of the bottom edge of the viewport')
    parser.add_argument('--right', type=float, default=DEFAULT_RECTANGLE.right,
                        help='real value of the right edge of the viewport')

    parser.add_argument('--max-iterations', type=int, dest='max_iterations', metavar='MAX_ITERATIONS',
                        default=DEFAULT_MAX_ITERATIONS,
                        help='iterations after which a point is considered inside the set')
    parser.add_argument('--inside-offset', type=float, dest='inside_offset', default=0.0,
                        help='constant added to the weight of points inside the set')
    parser.add_argument('--zoom-rate', type=float, dest='zoom_rate', metavar='ZOOM_RATE',
                        default=DEFAULT_ZOOM_RATE,
                        help='factor by which every click shrinks the viewport')
    parser.add_argument('--alpha', type=int, default=DEFAULT_ALPHA,
                        help='alpha byte written for every pixel')
    parser.add_argument('--batch-rows', type=int, dest='batch_rows', default=DEFAULT_BATCH_ROWS,
                        help='rows evaluated per batch between cancellation checks')

    parser.add_argument('--inside-color', type=str, default=_hex(DEFAULT_PALETTE.inside_color),
                        help='hex color or named color for points inside the Mandelbrot set')
    parser.add_argument('--outside-color', type=str, default=_hex(DEFAULT_PALETTE.outside_color),
                        help='hex color or named color for points that escape')
    parser.add_argument('--recolor-inside', type=str, dest='recolor_inside', default=None,
                        help='after the last render, recolor the inside points from the cache')
    parser.add_argument('--recolor-outside', type=str, dest='recolor_outside', default=None,
                        help='after the last render, recolor the escaped points from the cache')

    parser.add_argument('--click', type=float, nargs=2, action='append', dest='clicks', metavar=('X', 'Y'),
                        help='page coordinates of a zoom click. May be repeated; each click renders a new frame.')
    parser.add_argument('--canvas-origin', type=float, nargs=2, dest='canvas_origin', metavar=('X', 'Y'),
                        default=(0.0, 0.0), help='page offset of the surface, subtracted from every click')

    parser.add_argument('--output', dest='output', type=str, default='mandelbrot.png',
                        help='destination of the final image')
    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default=None,
                        help='file format for the final image. Defaults to the extension of --output.')
    parser.add_argument('--gif', dest='gif', type=str, default=None,
                        help='also write every rendered frame to this GIF')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


@dataclass
class ViewerOptions:
    rect: Rectangle
    palette: Palette
    recolor_palette: Palette | None
    config: SessionConfig
    output_path: Path
    image_format: str
    gif_path: Path | None


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def _parse_color_option(parser: ArgumentParser, flag: str, value: str):
    try:
        return parse_color(value)
    except ValueError as exc:
        parser.error(f"{flag}: {exc}")


def resolve_options(opt, parser: ArgumentParser) -> ViewerOptions:
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")

    rect = Rectangle(top=opt.top, left=opt.left, bottom=opt.bottom, right=opt.right)
    try:
        rect.validate()
    except MandelviewError as exc:
        parser.error(str(exc))

    palette = Palette(
        inside_color=_parse_color_option(parser, "--inside-color", opt.inside_color),
        outside_color=_parse_color_option(parser, "--outside-color", opt.outside_color),
    )

    recolor_palette = None
    if opt.recolor_inside is not None or opt.recolor_outside is not None:
        recolor_palette = Palette(
            inside_color=(
                _parse_color_option(parser, "--recolor-inside", opt.recolor_inside)
                if opt.recolor_inside is not None
                else palette.inside_color
            ),
            outside_color=(
                _parse_color_option(parser, "--recolor-outside", opt.recolor_outside)
                if opt.recolor_outside is not None
                else palette.outside_color
            ),
        )

    config = SessionConfig(
        max_iterations=opt.max_iterations,
        zoom_rate=opt.zoom_rate,
        inside_offset=opt.inside_offset,
        alpha=opt.alpha,
        batch_rows=opt.batch_rows,
    )
    try:
        config.validate()
    except ValueError as exc:
        parser.error(str(exc))

    output_path = Path(opt.output).expanduser()
    image_format = (opt.format or output_path.suffix or "png").lower().lstrip(".")
    if not output_path.suffix:
        output_path = output_path.with_suffix(f".{image_format}")

    gif_path = None
    if opt.gif:
        gif_path = Path(opt.gif).expanduser()
        if gif_path.suffix:
            if gif_path.suffix.lower() != ".gif":
                parser.error("GIF outputs must end with .gif.")
        else:
            gif_path = gif_path.with_suffix(".gif")

    return ViewerOptions(
        rect=rect,
        palette=palette,
        recolor_palette=recolor_palette,
        config=config,
        output_path=output_path.resolve(),
        image_format=image_format,
        gif_path=gif_path.resolve() if gif_path is not None else None,
    )


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    if pil_format == "JPEG":
        image = image.convert("RGB")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def write_gif(writer: Any, frame_array: np.ndarray) -> None:
    """Append ``frame_array`` to an active GIF writer."""

    writer.append_data(frame_array)


def run_session(session: ViewerSession, options: ViewerOptions, clicks, canvas_origin) -> PIL.Image.Image:
    writer = None
    if options.gif_path is not None:
        options.gif_path.parent.mkdir(parents=True, exist_ok=True)
        writer = imageio.get_writer(str(options.gif_path), mode='I', duration=0.5, loop=0)

    total = len(clicks) + 1
    try:
        print("frame {0} out of {1}".format(1, total), end='\r')
        session.render()
        log("rendered %s" % (session.rect,))
        if writer is not None:
            write_gif(writer, np.array(session.image()))

        for i, (x, y) in enumerate(clicks, start=2):
            print("frame {0} out of {1}".format(i, total), end='\r')
            rect = session.click(x, y, canvas_origin)
            log("click at (%g, %g) zoomed to %s" % (x, y, rect))
            if writer is not None:
                write_gif(writer, np.array(session.image()))
        print()

        if options.recolor_palette is not None:
            session.recolor(options.recolor_palette)
            log("recolored with %s" % (options.recolor_palette,))
            if writer is not None:
                write_gif(writer, np.array(session.image()))
    finally:
        if writer is not None:
            writer.close()

    return session.image()


def main(argv=None) -> int:
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    log("TensorFlow version: %s" % tf.__version__)
    options = resolve_options(opt, parser)

    session = ViewerSession(
        opt.width,
        opt.height,
        rect=options.rect,
        palette=options.palette,
        config=options.config,
        device=select_device(),
    )

    try:
        image = run_session(session, options, opt.clicks or [], tuple(opt.canvas_origin))
    except MandelviewError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    write_single_image(image, options.output_path, options.image_format)
    log("wrote %s" % options.output_path)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == '__main__':
    run()
