import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Hashable

import numpy as np
from PIL import Image, UnidentifiedImageError

from asciigrid.errors import ImageError

logger = logging.getLogger(__name__)

WHITE = 255
# ITU-R BT.709 luma weights for (R, G, B)
LUMINANCE_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])
MAX_CHANNEL_VALUE = 255.0


def next_power_of_two(n: int) -> int:
    """Smallest power of two that is >= n."""
    if n < 1:
        raise ValueError(f"Dimension must be positive, got {n}")
    return 1 << (n - 1).bit_length()


def load_image(path: str | Path) -> np.ndarray:
    """Decode an image file into an (h, w, 3) uint8 RGB array."""
    path = Path(path)
    if not path.is_file():
        raise ImageError(f"File not found: {path}")
    try:
        with Image.open(path) as img:
            arr = np.asarray(img.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageError(f"Cannot decode image {path}: {exc}") from exc
    logger.debug("Decoded %s as %dx%d", path, arr.shape[1], arr.shape[0])
    return arr


def as_rgb_array(source) -> np.ndarray:
    """Accept a PIL image or an (h, w) / (h, w, 3) array and return uint8 RGB."""
    if isinstance(source, Image.Image):
        return np.asarray(source.convert("RGB"), dtype=np.uint8)
    arr = np.asarray(source)
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError(f"Expected an (h, w) or (h, w, 3) array, got shape {arr.shape}")
    return arr.astype(np.uint8, copy=False)


@dataclass(frozen=True, eq=False)
class PaddedImage:
    """A source image centred on a white canvas with power-of-two sides."""

    pixels: np.ndarray  # (height, width, 3) uint8, read-only
    luminance: np.ndarray  # (height, width) float64 in [0, 1], read-only
    source_width: int
    source_height: int
    offset: tuple[int, int]  # (x, y) of the source's top-left corner
    key: Hashable = field(default_factory=object)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


def luminance(pixels: np.ndarray) -> np.ndarray:
    """Per-pixel gray level in [0, 1] using LUMINANCE_WEIGHTS."""
    gray = pixels.astype(np.float64) @ LUMINANCE_WEIGHTS / MAX_CHANNEL_VALUE
    return np.clip(gray, 0.0, 1.0)


def pad(source, key: Hashable | None = None) -> PaddedImage:
    """Centre ``source`` on a white canvas whose sides are powers of two.

    Excess width is split so the left margin is ``(pw - w) // 2`` and the
    right margin takes the remainder; the same holds for top and bottom.
    """
    arr = as_rgb_array(source)
    height, width = arr.shape[:2]
    padded_width = next_power_of_two(width)
    padded_height = next_power_of_two(height)
    x0 = (padded_width - width) // 2
    y0 = (padded_height - height) // 2

    canvas = np.full((padded_height, padded_width, 3), WHITE, dtype=np.uint8)
    canvas[y0 : y0 + height, x0 : x0 + width] = arr
    canvas.flags.writeable = False
    gray = luminance(canvas)
    gray.flags.writeable = False

    logger.debug("Padded %dx%d to %dx%d at offset (%d, %d)", width, height, padded_width, padded_height, x0, y0)
    return PaddedImage(
        pixels=canvas,
        luminance=gray,
        source_width=width,
        source_height=height,
        offset=(x0, y0),
        key=object() if key is None else key,
    )
