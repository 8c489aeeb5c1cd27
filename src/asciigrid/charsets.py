FIRST_PRINTABLE = 32
LAST_PRINTABLE = 126
ASCII_PRINTABLE = "".join(chr(i) for i in range(FIRST_PRINTABLE, LAST_PRINTABLE + 1))
SPACE = " "
DEFAULT_CHARSET = "0123456789"

# Keywords understood by expand_char_spec
ALL_KEYWORD = "all"
SPACE_KEYWORD = "space"
RANGE_SEPARATOR = "-"


def is_printable_ascii(char: str) -> bool:
    return len(char) == 1 and FIRST_PRINTABLE <= ord(char) <= LAST_PRINTABLE


def char_range(first: str, last: str) -> str:
    """Inclusive range of characters, accepting the ends in either order."""
    lo, hi = sorted((ord(first), ord(last)))
    return "".join(chr(i) for i in range(lo, hi + 1))


def expand_char_spec(spec: str, *, adding: bool = True) -> str:
    """Expand a console charset argument into the characters it names.

    ``all`` is every printable ASCII character, ``space`` is ``" "``, a
    single character stands for itself and ``a-g`` (or ``g-a``) is an
    inclusive range. Single characters must be printable ASCII when
    ``adding``; removal accepts anything. Raises ``ValueError`` otherwise.
    """
    if spec == ALL_KEYWORD:
        return ASCII_PRINTABLE
    if spec == SPACE_KEYWORD:
        return SPACE
    if len(spec) == 1:
        if adding and not is_printable_ascii(spec):
            raise ValueError(f"Not a printable ASCII character: {spec!r}")
        return spec
    if len(spec) == 3 and spec[1] == RANGE_SEPARATOR:
        first, last = spec[0], spec[2]
        if not (is_printable_ascii(first) and is_printable_ascii(last)):
            raise ValueError(f"Range ends must be printable ASCII: {spec!r}")
        return char_range(first, last)
    raise ValueError(f"Unrecognised character spec: {spec!r}")
