import enum
from bisect import bisect_left, bisect_right

from asciigrid.errors import ConfigurationError
from asciigrid.glyph_atlas import CharBrightnessTable


class RoundMethod(enum.Enum):
    UP = "up"
    DOWN = "down"
    ABSOLUTE = "abs"

    @classmethod
    def parse(cls, value: "str | RoundMethod") -> "RoundMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ConfigurationError(f"Unknown rounding method {value!r} (expected one of: {choices})") from None


# Characters in a table are ordered by (normalized brightness, code point), so
# bisect_left on a brightness value lands on the lowest code point among equals.


def _at_or_above(table: CharBrightnessTable, brightness: float) -> int | None:
    i = bisect_left(table.values, brightness)
    return i if i < len(table.values) else None


def _at_or_below(table: CharBrightnessTable, brightness: float) -> int | None:
    i = bisect_right(table.values, brightness) - 1
    if i < 0:
        return None
    return bisect_left(table.values, table.values[i])


def _brightest(table: CharBrightnessTable) -> int:
    return bisect_left(table.values, table.values[-1])


def _match_up(table: CharBrightnessTable, brightness: float) -> str:
    i = _at_or_above(table, brightness)
    return table.ordered[_brightest(table) if i is None else i]


def _match_down(table: CharBrightnessTable, brightness: float) -> str:
    i = _at_or_below(table, brightness)
    return table.ordered[0 if i is None else i]


def _match_absolute(table: CharBrightnessTable, brightness: float) -> str:
    below = _at_or_below(table, brightness)
    above = _at_or_above(table, brightness)
    if below is None:
        return table.ordered[above]
    if above is None:
        return table.ordered[below]
    # Equal distance goes to the darker candidate
    if brightness - table.values[below] <= table.values[above] - brightness:
        return table.ordered[below]
    return table.ordered[above]


_MATCHERS = {
    RoundMethod.UP: _match_up,
    RoundMethod.DOWN: _match_down,
    RoundMethod.ABSOLUTE: _match_absolute,
}


def match(brightness: float, table: CharBrightnessTable, method: RoundMethod) -> str:
    """Pick the character of ``table`` whose normalized brightness best fits ``brightness``."""
    return _MATCHERS[RoundMethod.parse(method)](table, brightness)
