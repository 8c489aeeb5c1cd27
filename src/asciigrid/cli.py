import argparse
import logging
import sys
from pathlib import Path

from asciigrid.charsets import DEFAULT_CHARSET
from asciigrid.config import DEFAULT_RESOLUTION, HTML_OUTPUT_FONT, Settings
from asciigrid.converter import MIN_CHARSET_SIZE, AsciiArtAlgorithm
from asciigrid.errors import ConfigurationError, ImageError
from asciigrid.glyph_atlas import GlyphCache
from asciigrid.matcher import RoundMethod
from asciigrid.output import CONSOLE, OUTPUT_METHODS, make_output
from asciigrid.shell import Shell


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image as a grid of characters matched by brightness")
    parser.add_argument("image", type=Path, help="Path to input image")
    parser.add_argument(
        "-r",
        "--resolution",
        type=int,
        default=DEFAULT_RESOLUTION,
        help=f"Characters per row, a power of two (default: {DEFAULT_RESOLUTION})",
    )
    parser.add_argument(
        "--round",
        dest="round_method",
        default=RoundMethod.ABSOLUTE.value,
        choices=[m.value for m in RoundMethod],
        help="How a cell's brightness is rounded to a character (default: abs)",
    )
    parser.add_argument(
        "-c", "--charset", default=DEFAULT_CHARSET, help=f"Characters to draw with (default: {DEFAULT_CHARSET!r})"
    )
    parser.add_argument(
        "-o", "--output", default=CONSOLE, choices=OUTPUT_METHODS, help="Where to write the result (default: console)"
    )
    parser.add_argument("--html-font", default=HTML_OUTPUT_FONT, help=f"Font for HTML output (default: {HTML_OUTPUT_FONT})")
    parser.add_argument("--font", default=None, help="TrueType font used to measure glyphs (default: Pillow's built-in font)")
    parser.add_argument(
        "-i", "--interactive", action="store_true", default=False, help="Start a console to adjust settings between runs"
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if not args.image.exists():
        print(f"File not found: {args.image}", file=sys.stderr)
        return 1

    settings = Settings(
        charset=set(args.charset),
        resolution=args.resolution,
        round_method=RoundMethod(args.round_method),
        output=args.output,
        html_font=args.html_font,
        font_path=args.font,
    )
    algorithm = AsciiArtAlgorithm(GlyphCache(font_path=settings.font_path))

    try:
        if args.interactive:
            Shell(args.image, settings, algorithm).cmdloop()
            return 0
        if len(settings.charset) < MIN_CHARSET_SIZE:
            parser.error(f"--charset must contain at least {MIN_CHARSET_SIZE} distinct characters")
        grid = algorithm.run(args.image, settings.charset, settings.resolution, settings.round_method)
    except ConfigurationError as exc:
        parser.error(str(exc))
    except ImageError as exc:
        print(exc, file=sys.stderr)
        return 1

    make_output(settings.output, args.image, settings.html_font).out(grid)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
