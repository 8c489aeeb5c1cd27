from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class AsciiGrid:
    rows: tuple[tuple[str, ...], ...]  # row-major, one character per sub-image

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[str]]) -> AsciiGrid:
        return cls(tuple(tuple(row) for row in rows))

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def lines(self) -> list[str]:
        return ["".join(row) for row in self.rows]

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        return iter(self.rows)

    def __str__(self) -> str:
        return "\n".join(self.lines())
