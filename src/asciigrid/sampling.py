import logging
import threading
from dataclasses import dataclass

import numpy as np

from asciigrid.errors import ConfigurationError, InternalInvariantError
from asciigrid.image import PaddedImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SubImage:
    """A square window onto a padded image. Holds indices, never pixel copies."""

    image: PaddedImage
    row: int
    col: int
    size: int

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        """(x0, y0, x1, y1) in padded-image pixels, end-exclusive."""
        x0 = self.col * self.size
        y0 = self.row * self.size
        return x0, y0, x0 + self.size, y0 + self.size

    @property
    def resolution(self) -> int:
        return self.image.width // self.size

    @property
    def pixels(self) -> np.ndarray:
        x0, y0, x1, y1 = self.bounds
        return self.image.pixels[y0:y1, x0:x1]

    @property
    def luminance(self) -> np.ndarray:
        x0, y0, x1, y1 = self.bounds
        return self.image.luminance[y0:y1, x0:x1]


def _is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def resolution_bounds(image: PaddedImage) -> tuple[int, int]:
    """(min, max) characters per row that tile ``image`` with square cells."""
    return max(1, image.width // image.height), image.width


def check_resolution(image: PaddedImage, resolution: int) -> None:
    lo, hi = resolution_bounds(image)
    if not isinstance(resolution, int) or isinstance(resolution, bool):
        raise ConfigurationError(f"Resolution must be an integer, got {resolution!r}")
    if not _is_power_of_two(resolution):
        raise ConfigurationError(f"Resolution must be a power of two, got {resolution}")
    if not lo <= resolution <= hi:
        raise ConfigurationError(
            f"Resolution {resolution} is outside [{lo}, {hi}] for a {image.width}x{image.height} image"
        )


def partition(image: PaddedImage, resolution: int) -> list[list[SubImage]]:
    """Split ``image`` into ``resolution`` columns of square sub-images, row-major."""
    if resolution < 1 or image.width % resolution:
        raise InternalInvariantError(f"Resolution {resolution} does not divide width {image.width}")
    size = image.width // resolution
    if image.height % size:
        raise InternalInvariantError(f"Cell size {size} does not divide height {image.height}")
    rows = image.height // size
    return [[SubImage(image, r, c, size) for c in range(resolution)] for r in range(rows)]


class SubImageBrightness:
    """Average gray level per sub-image, cached by (image key, resolution, row, col).

    Entries do not depend on the charset or rounding method, so they survive
    edits to either. Call ``invalidate`` when the underlying image changes.
    """

    def __init__(self):
        self._cache: dict[tuple, float] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def compute(sub_image: SubImage) -> float:
        return float(np.clip(sub_image.luminance.mean(), 0.0, 1.0))

    def brightness_of(self, sub_image: SubImage) -> float:
        key = (sub_image.image.key, sub_image.resolution, sub_image.row, sub_image.col)
        with self._lock:
            value = self._cache.get(key)
            if value is not None:
                self.hits += 1
                return value
            self.misses += 1
            value = self.compute(sub_image)
            self._cache[key] = value
        return value

    def invalidate(self) -> None:
        with self._lock:
            logger.debug("Dropping %d cached sub-image brightness values", len(self._cache))
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
