import shutil
import subprocess

import numpy as np
import pytest
from PIL import Image

from asciigrid.glyph_atlas import GlyphCache

_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu-sans-mono-fonts/DejaVuSansMono.ttf",
]


def _find_monospace_font():
    """Find a monospace font on the system."""
    for path in _FONT_CANDIDATES:
        if shutil.os.path.exists(path):
            return path
    result = shutil.which("fc-match")
    if result:
        out = subprocess.run(["fc-match", "-f", "%{file}", "monospace"], capture_output=True, text=True)
        if out.returncode == 0 and out.stdout.strip():
            return out.stdout.strip()
    return None


FONT_PATH = _find_monospace_font()
needs_font = pytest.mark.skipif(FONT_PATH is None, reason="No monospace font found on system")


class FixedGlyphCache(GlyphCache):
    """GlyphCache with known raw brightness values instead of rendered glyphs."""

    def __init__(self, values: dict[str, float]):
        super().__init__()
        self.values = values
        self.rendered: list[str] = []

    def _render_brightness(self, char: str) -> float:
        self.rendered.append(char)
        return self.values[char]


# " " is empty, "#" is solid; "+" sits halfway
FIXED_VALUES = {" ": 0.0, "+": 0.25, "#": 0.5}


@pytest.fixture
def fixed_glyphs():
    return FixedGlyphCache(dict(FIXED_VALUES))


@pytest.fixture
def write_image(tmp_path):
    """Save an RGB array (or a solid colour of a given size) as a PNG and return its path."""

    def _write(pixels=None, size=(4, 4), colour=(255, 255, 255), name="image.png"):
        if pixels is None:
            img = Image.new("RGB", size, colour)
        else:
            img = Image.fromarray(np.asarray(pixels, dtype=np.uint8))
        path = tmp_path / name
        img.save(path)
        return path

    return _write


def halves(width=8, height=8):
    """Black left half, white right half."""
    arr = np.full((height, width, 3), 255, dtype=np.uint8)
    arr[:, : width // 2] = 0
    return arr
