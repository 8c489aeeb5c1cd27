"""Interactive console for adjusting settings between conversions.

Commands::

    chars                 show the current charset
    add <spec>            add characters (a char, a-g, space, all)
    remove <spec>         remove characters (same forms as add)
    res [up|down]         double or halve the resolution, or show it
    round up|down|abs     choose how brightness is rounded to a character
    output console|html   choose where results go
    asciiArt              run the conversion
    exit                  leave the console
"""

import cmd
import logging
from pathlib import Path

from asciigrid.charsets import expand_char_spec
from asciigrid.config import Settings
from asciigrid.converter import MIN_CHARSET_SIZE, AsciiArtAlgorithm
from asciigrid.errors import AsciiArtError, ShellError
from asciigrid.matcher import RoundMethod
from asciigrid.output import make_output
from asciigrid.sampling import resolution_bounds

logger = logging.getLogger(__name__)

INCORRECT_FORMAT = "incorrect format"
OUT_OF_BOUNDS = "exceeding boundaries"
RESOLUTION_FACTOR = 2
CHARSET_TOO_SMALL = f"Did not execute. Charset is too small. Minimum size is {MIN_CHARSET_SIZE} characters."
WELCOME = "Welcome to asciigrid. Type help for a list of commands, exit to leave."


class Shell(cmd.Cmd):
    prompt = ">>> "
    intro = WELCOME

    def __init__(
        self,
        image_path: str | Path,
        settings: Settings | None = None,
        algorithm: AsciiArtAlgorithm | None = None,
        stdin=None,
        stdout=None,
    ):
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.image_path = Path(image_path)
        self.settings = settings if settings is not None else Settings()
        self.algorithm = algorithm if algorithm is not None else AsciiArtAlgorithm()
        # Decoding up front fixes the resolution bounds for the session
        image = self.algorithm.load(self.image_path)
        self.min_resolution, self.max_resolution = resolution_bounds(image)
        self.output = make_output(self.settings.output, self.image_path, self.settings.html_font, self.stdout)

    def _print(self, message: str) -> None:
        self.stdout.write(message + "\n")

    def onecmd(self, line: str) -> bool:
        try:
            return super().onecmd(line)
        except AsciiArtError as exc:
            self._print(str(exc))
            return False

    def emptyline(self) -> bool:
        return False

    def default(self, line: str) -> bool:
        raise ShellError("execute", "incorrect command")

    def do_exit(self, arg: str) -> bool:
        """Leave the console."""
        return True

    do_EOF = do_exit

    def do_chars(self, arg: str) -> None:
        """Show the current charset."""
        self._print("[" + ", ".join(sorted(self.settings.charset)) + "]")

    def _edit_charset(self, arg: str, adding: bool) -> None:
        action = "add" if adding else "remove"
        args = arg.split()
        if not args:
            raise ShellError(action, INCORRECT_FORMAT)
        try:
            chars = expand_char_spec(args[0], adding=adding)
        except ValueError:
            raise ShellError(action, INCORRECT_FORMAT) from None
        if adding:
            self.settings.charset.update(chars)
        else:
            self.settings.charset.difference_update(chars)

    def do_add(self, arg: str) -> None:
        """add <char|a-z|space|all>: add characters to the charset."""
        self._edit_charset(arg, adding=True)

    def do_remove(self, arg: str) -> None:
        """remove <char|a-z|space|all>: remove characters from the charset."""
        self._edit_charset(arg, adding=False)

    def do_res(self, arg: str) -> None:
        """res [up|down]: double or halve the characters per row."""
        args = arg.split()
        if args:
            if args[0] == "up":
                resolution = self.settings.resolution * RESOLUTION_FACTOR
                if resolution > self.max_resolution:
                    raise ShellError("change resolution", OUT_OF_BOUNDS)
            elif args[0] == "down":
                resolution = self.settings.resolution // RESOLUTION_FACTOR
                if resolution < self.min_resolution:
                    raise ShellError("change resolution", OUT_OF_BOUNDS)
            else:
                raise ShellError("change resolution", INCORRECT_FORMAT)
            self.settings.resolution = resolution
        self._print(f"Resolution set to {self.settings.resolution}.")

    def do_round(self, arg: str) -> None:
        """round up|down|abs: set how brightness is rounded to a character."""
        args = arg.split()
        if not args or args[0] not in {m.value for m in RoundMethod}:
            raise ShellError("change rounding method", INCORRECT_FORMAT)
        self.settings.round_method = RoundMethod(args[0])

    def do_output(self, arg: str) -> None:
        """output console|html: choose where results are written."""
        args = arg.split()
        if not args:
            raise ShellError("change output method", INCORRECT_FORMAT)
        try:
            self.output = make_output(args[0], self.image_path, self.settings.html_font, self.stdout)
        except AsciiArtError:
            raise ShellError("change output method", INCORRECT_FORMAT) from None
        self.settings.output = args[0]

    def do_asciiArt(self, arg: str) -> None:
        """Convert the image with the current settings."""
        if len(self.settings.charset) < MIN_CHARSET_SIZE:
            raise ShellError(CHARSET_TOO_SMALL)
        logger.debug("Running with %d characters at resolution %d", len(self.settings.charset), self.settings.resolution)
        grid = self.algorithm.run(
            self.image_path,
            self.settings.charset,
            self.settings.resolution,
            self.settings.round_method,
        )
        self.output.out(grid)
