from dataclasses import dataclass, field

from asciigrid.charsets import DEFAULT_CHARSET
from asciigrid.matcher import RoundMethod

DEFAULT_RESOLUTION = 2
DEFAULT_OUTPUT = "console"
HTML_OUTPUT_FONT = "Courier New"


@dataclass
class Settings:
    """Configuration for a conversion session, mutated by the shell between runs."""

    charset: set[str] = field(default_factory=lambda: set(DEFAULT_CHARSET))
    resolution: int = DEFAULT_RESOLUTION
    round_method: RoundMethod = RoundMethod.ABSOLUTE
    output: str = DEFAULT_OUTPUT
    html_font: str = HTML_OUTPUT_FONT
    font_path: str | None = None
