import html
import logging
import sys
from pathlib import Path
from typing import Protocol, TextIO

from asciigrid.errors import ConfigurationError
from asciigrid.grid import AsciiGrid

logger = logging.getLogger(__name__)

CONSOLE = "console"
HTML = "html"
OUTPUT_METHODS = (CONSOLE, HTML)
_CSS_UNSAFE = "\"'\\;{}<>\n"

_HTML_TEMPLATE = """<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>{title}</title>
<style>pre{{font-family:'{font}',monospace; font-size:8px; line-height:1;}}</style>
</head><body>
<pre>{body}</pre>
</body></html>
"""


def css_font_name(font_name: str) -> str:
    """Drop characters that would end the quoted font-family value or the rule around it."""
    return font_name.translate({ord(c): None for c in _CSS_UNSAFE})


class AsciiOutput(Protocol):
    def out(self, grid: AsciiGrid) -> None:
        """Present a finished character grid."""
        ...


class ConsoleOutput:
    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    def out(self, grid: AsciiGrid) -> None:
        stream = self.stream if self.stream is not None else sys.stdout
        for line in grid.lines():
            print(line, file=stream)


class HtmlOutput:
    """Writes the grid into a standalone HTML page using a monospace font."""

    def __init__(self, path: str | Path, font_name: str):
        self.path = Path(path)
        self.font_name = font_name

    def render(self, grid: AsciiGrid) -> str:
        body = "\n".join(html.escape(line) for line in grid.lines())
        return _HTML_TEMPLATE.format(
            title=html.escape(self.path.stem),
            font=css_font_name(self.font_name),
            body=body,
        )

    def out(self, grid: AsciiGrid) -> None:
        self.path.write_text(self.render(grid), encoding="utf-8")
        logger.info("Wrote %dx%d grid to %s", grid.width, grid.height, self.path)


def make_output(name: str, image_path: str | Path, font_name: str, stream: TextIO | None = None) -> AsciiOutput:
    """Build an output by name. HTML pages are named after the image, e.g. cat.png -> cat.html."""
    if name == CONSOLE:
        return ConsoleOutput(stream)
    if name == HTML:
        return HtmlOutput(Path(Path(image_path).stem + "." + HTML), font_name)
    raise ConfigurationError(f"Unknown output method {name!r} (expected one of: {', '.join(OUTPUT_METHODS)})")
