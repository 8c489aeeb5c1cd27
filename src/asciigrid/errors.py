class AsciiArtError(Exception):
    """Base class for every error raised by asciigrid."""


class ConfigurationError(AsciiArtError, ValueError):
    """Charset, resolution, rounding or output settings cannot be used."""


class ImageError(AsciiArtError, OSError):
    """The source image is missing or could not be decoded."""


class InternalInvariantError(AsciiArtError, AssertionError):
    """A geometric invariant of the pipeline was broken by the caller."""


class ShellError(AsciiArtError):
    """A console command could not be carried out."""

    def __init__(self, action: str, reason: str | None = None):
        self.action = action
        self.reason = reason
        if reason is None:
            super().__init__(action)
        else:
            super().__init__(f"Did not {action} due to {reason}.")
