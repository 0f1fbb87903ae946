"""Parsing and validation of the map section of a scene file."""

from __future__ import annotations

import re
from dataclasses import dataclass

MAP_CHARS = frozenset("01NSEW \n\r")
WALL = "1"
_BORDER_CHARS = "1 "


class MapError(ValueError):
    """Raised when the map part of a scene is malformed or not closed."""


@dataclass(frozen=True)
class GridMap:
    """A rectangular map, one string per row, with every gap filled by walls."""

    rows: tuple[str, ...]

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def height(self) -> int:
        return len(self.rows)

    def cell(self, x: int, y: int) -> str:
        """Return the character at column ``x`` of row ``y``."""
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise IndexError(f"cell ({x}, {y}) is outside the map")
        return self.rows[y][x]

    def is_wall(self, x: int, y: int) -> bool:
        return self.cell(x, y) == WALL

    def flat(self) -> str:
        """Return all rows joined together, row after row."""
        return "".join(self.rows)

    def with_cell(self, x: int, y: int, value: str) -> GridMap:
        """Return a copy of the map with one cell replaced."""
        if len(value) != 1:
            raise ValueError("a cell holds exactly one character")
        row = self.rows[y] if 0 <= y < self.height else None
        if row is None or not 0 <= x < self.width:
            raise IndexError(f"cell ({x}, {y}) is outside the map")
        new_row = row[:x] + value + row[x + 1:]
        return GridMap(self.rows[:y] + (new_row,) + self.rows[y + 1:])


def _offending(line: str | None, index: int, allowed: str = _BORDER_CHARS) -> bool:
    return line is not None and 0 <= index < len(line) and line[index] not in allowed


def _enclosed(rows: list[str], i: int, j: int) -> bool:
    """Tell whether position ``i`` of row ``j`` only touches walls or spaces."""
    row = rows[j]
    below = rows[j + 1] if j + 1 < len(rows) else None
    above = rows[j - 1] if j > 0 else None
    return not (
        _offending(below, i)
        or _offending(below, i + 1)
        or (i > 0 and _offending(below, i - 1, WALL))
        or _offending(above, i)
        or _offending(above, i + 1)
        or (i > 0 and _offending(above, i - 1))
        or _offending(row, i + 1)
        or (i > 0 and _offending(row, i - 1))
    )


def _limits_closed(rows: list[str]) -> bool:
    for j, row in enumerate(rows):
        for i, char in enumerate(row):
            if char == " " and not _enclosed(rows, i, j):
                return False
        if not _enclosed(rows, len(row), j):
            return False
    return True


def _sides_closed(rows: list[str]) -> bool:
    return all(
        row[0] in _BORDER_CHARS and row[-1] in _BORDER_CHARS for row in rows[1:]
    )


def _only_border(row: str) -> bool:
    return all(char in _BORDER_CHARS for char in row)


def parse_map(text: str) -> GridMap:
    """Validate the map text and return it as a rectangular grid.

    Rows are padded to the widest row and every space becomes a wall.
    """
    if any(char not in MAP_CHARS for char in text):
        raise MapError("Wrong format used.")
    rows = [row for row in re.split(r"[\n\r]+", text) if row]
    if not rows:
        raise MapError("Invalid map.")
    if (
        not _only_border(rows[0])
        or not _only_border(rows[-1])
        or not _sides_closed(rows)
        or not _limits_closed(rows)
    ):
        raise MapError("Invalid map.")
    width = max(len(row) for row in rows)
    filled = tuple(row.ljust(width, WALL).replace(" ", WALL) for row in rows)
    return GridMap(filled)