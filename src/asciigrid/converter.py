import logging
from collections.abc import Iterable
from pathlib import Path

from PIL import Image

from asciigrid.errors import ConfigurationError
from asciigrid.glyph_atlas import GlyphCache
from asciigrid.grid import AsciiGrid
from asciigrid.image import PaddedImage, load_image, pad
from asciigrid.matcher import RoundMethod, match
from asciigrid.sampling import SubImageBrightness, check_resolution, partition

logger = logging.getLogger(__name__)

MIN_CHARSET_SIZE = 2


def _check_charset(charset: Iterable[str]) -> frozenset[str]:
    charset = frozenset(charset)
    if len(charset) < MIN_CHARSET_SIZE:
        raise ConfigurationError(
            f"Charset is too small ({len(charset)}). Minimum size is {MIN_CHARSET_SIZE} characters."
        )
    if any(not isinstance(c, str) or len(c) != 1 for c in charset):
        raise ConfigurationError("Charset entries must be single characters")
    return charset


class AsciiArtAlgorithm:
    """Turns images into character grids, keeping caches between runs.

    The padded image is kept while the same path is requested again, so
    changing resolution, charset or rounding reuses it. Sub-image brightness
    is cached per image and resolution; glyph tables per charset.
    """

    def __init__(self, glyphs: GlyphCache | None = None, brightness: SubImageBrightness | None = None):
        self.glyphs = glyphs if glyphs is not None else GlyphCache()
        self.brightness = brightness if brightness is not None else SubImageBrightness()
        self._path: Path | None = None
        self._image: PaddedImage | None = None
        self._key = None

    def load(self, image_path: str | Path) -> PaddedImage:
        path = Path(image_path).resolve()
        if self._image is not None and path == self._path:
            return self._image
        image = pad(load_image(path), key=str(path))
        self._path = path
        self._image = image
        return image

    def convert(
        self,
        image: PaddedImage,
        charset: Iterable[str],
        resolution: int,
        round_method: RoundMethod | str = RoundMethod.ABSOLUTE,
    ) -> AsciiGrid:
        charset = _check_charset(charset)
        method = RoundMethod.parse(round_method)
        check_resolution(image, resolution)

        # Cached brightness belongs to one image at a time
        if self._key is not None and image.key != self._key:
            self.brightness.invalidate()
        self._key = image.key

        table = self.glyphs.table(charset)
        cells = partition(image, resolution)
        logger.debug(
            "Converting %dx%d image into %dx%d cells (%s rounding)",
            image.width,
            image.height,
            resolution,
            len(cells),
            method.value,
        )
        return AsciiGrid.from_rows(
            [match(self.brightness.brightness_of(cell), table, method) for cell in row] for row in cells
        )

    def run(
        self,
        image_path: str | Path,
        charset: Iterable[str],
        resolution: int,
        round_method: RoundMethod | str = RoundMethod.ABSOLUTE,
    ) -> AsciiGrid:
        charset = _check_charset(charset)
        method = RoundMethod.parse(round_method)
        image = self.load(image_path)
        return self.convert(image, charset, resolution, method)


def image_to_ascii(
    image: Image.Image | str | Path,
    charset: Iterable[str],
    resolution: int,
    round_method: RoundMethod | str = RoundMethod.ABSOLUTE,
    algorithm: AsciiArtAlgorithm | None = None,
) -> str:
    """One-shot conversion of a PIL image, pixel array or image path to text."""
    algorithm = algorithm if algorithm is not None else AsciiArtAlgorithm()
    if isinstance(image, (str, Path)):
        return str(algorithm.run(image, charset, resolution, round_method))
    return str(algorithm.convert(pad(image), charset, resolution, round_method))
