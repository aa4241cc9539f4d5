"""
Positions on the hex grid.

A Position is a plain (row, column) pair. Positions can arrive from
untrusted players, so construction does not validate; use is_natural()
or the board's validate_tile() before trusting one.
"""

from __future__ import annotations
from dataclasses import dataclass


def is_natural_number(value: object) -> bool:
    """True for integers >= 0 (booleans excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_positive_integer(value: object) -> bool:
    """True for integers >= 1 (booleans excluded)."""
    return is_natural_number(value) and value > 0  # type: ignore[operator]


@dataclass(frozen=True)
class Position:
    """A cell address: row first, then column."""
    row: int
    column: int

    def is_natural(self) -> bool:
        """Check both coordinates are natural numbers."""
        return is_natural_number(self.row) and is_natural_number(self.column)

    def in_range(self, rows: int, columns: int) -> bool:
        """Check the position addresses a cell of a rows x columns grid."""
        return self.is_natural() and self.row < rows and self.column < columns

    def sort_key(self) -> tuple[int, int]:
        return (self.row, self.column)

    def __str__(self) -> str:
        return f"({self.row}, {self.column})"
