import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

GLYPH_SIZE = 16
# Point size for the default font; leaves room for descenders inside GLYPH_SIZE
DEFAULT_FONT_SIZE = 13
INK_THRESHOLD = 128


def load_font(font_path: str | None = None, font_size: int = DEFAULT_FONT_SIZE):
    if font_path is None:
        return ImageFont.load_default(size=font_size)
    return ImageFont.truetype(font_path, font_size)


def render_glyph(char: str, font, size: int = GLYPH_SIZE) -> np.ndarray:
    """Render a character centred in a size x size cell. Returns a boolean ink mask."""
    img = Image.new("L", (size, size), 0)
    draw = ImageDraw.Draw(img)
    left, top, right, bottom = draw.textbbox((0, 0), char, font=font)
    x = (size - (right - left)) // 2 - left
    y = (size - (bottom - top)) // 2 - top
    draw.text((x, y), char, fill=255, font=font)
    return np.asarray(img) >= INK_THRESHOLD


class CharBrightnessTable:
    """Raw and normalized glyph brightness for one fixed character set.

    Normalization is linear between the set's darkest and brightest
    character. When all characters share one raw value every character
    normalizes to 0.
    """

    def __init__(self, raw: Mapping[str, float]):
        if not raw:
            raise ValueError("Character brightness table needs at least one character")
        self._raw = MappingProxyType(dict(raw))
        self.min_raw = min(self._raw.values())
        self.max_raw = max(self._raw.values())
        span = self.max_raw - self.min_raw
        if span > 0:
            normalized = {c: (v - self.min_raw) / span for c, v in self._raw.items()}
        else:
            normalized = dict.fromkeys(self._raw, 0.0)
        self._normalized = MappingProxyType(normalized)
        self.ordered = tuple(sorted(normalized, key=lambda c: (normalized[c], ord(c))))
        self.values = tuple(normalized[c] for c in self.ordered)

    @property
    def raw(self) -> Mapping[str, float]:
        return self._raw

    @property
    def normalized(self) -> Mapping[str, float]:
        return self._normalized

    def normalized_brightness(self, char: str) -> float:
        return self._normalized[char]

    def __len__(self) -> int:
        return len(self._raw)

    def __contains__(self, char) -> bool:
        return char in self._raw

    def __iter__(self) -> Iterator[str]:
        return iter(self.ordered)

    def __repr__(self) -> str:
        return f"CharBrightnessTable({''.join(self.ordered)!r})"


class GlyphCache:
    """Raw glyph brightness per character plus the table for the current charset.

    Raw values never change for a given font, so they are kept for the
    lifetime of the cache. The table depends on the charset's extremes and
    is rebuilt whenever a different charset is requested; a new table is
    built completely before it replaces the old one.
    """

    def __init__(self, font_path: str | None = None, glyph_size: int = GLYPH_SIZE, font=None):
        self.font_path = font_path
        self.glyph_size = glyph_size
        self._font = font
        self._raw: dict[str, float] = {}
        self._current: tuple[frozenset[str], CharBrightnessTable] | None = None
        self._lock = threading.Lock()

    @property
    def font(self):
        if self._font is None:
            self._font = load_font(self.font_path)
        return self._font

    def _render_brightness(self, char: str) -> float:
        mask = render_glyph(char, self.font, self.glyph_size)
        return float(mask.sum()) / mask.size

    def raw_brightness(self, char: str) -> float:
        with self._lock:
            value = self._raw.get(char)
            if value is None:
                value = self._render_brightness(char)
                self._raw[char] = value
        return value

    def table(self, charset: Iterable[str]) -> CharBrightnessTable:
        charset = frozenset(charset)
        current = self._current
        if current is not None and current[0] == charset:
            return current[1]
        table = CharBrightnessTable({c: self.raw_brightness(c) for c in charset})
        self._current = (charset, table)
        logger.debug("Rebuilt brightness table for %d characters", len(table))
        return table

    def invalidate(self) -> None:
        self._current = None

    def __len__(self) -> int:
        return len(self._raw)
