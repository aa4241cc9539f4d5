r"""
Board - rectangular grid of spaces in a doubled hex-offset layout.

To reach the hexagon labelled (0, 0) use board.tiles[0][0]:

      _____         _____
     /     \       /     \
    /  0, 0 \_____/ 0, 1  \_____
    \       /     \       /     \
     \_____/ 1, 0  \_____/ 1, 1  \
     /     \       /     \       /
    / 2, 0  \_____/ 2, 1  \_____/
    \       /     \       /     \
     \_____/ 3, 0  \_____/ 3, 1  \
           \       /     \       /
            \_____/       \_____/

Odd rows sit half a hexagon to the right of even rows, so (0, 0) and
(2, 0) are vertical neighbours and (1, 0) touches both of them.

Boards are persistent values: every change returns a new Board.
"""

from __future__ import annotations
from dataclasses import dataclass
from math import ceil, sqrt
from typing import Iterable, Iterator
import random

from ..errors import (
    BoardConstructionError,
    HoleError,
    InvalidCoordinateError,
    OutOfBoundsError,
)
from .position import Position, is_natural_number, is_positive_integer
from .space import HOLE, Space, Tile, fish_on


@dataclass(frozen=True)
class Board:
    """
    A grid of Hole/Tile spaces stored row-major.

    Invariant: every row has the same, non-zero length.
    """
    tiles: tuple[tuple[Space, ...], ...]

    def __post_init__(self):
        if not self.tiles or not self.tiles[0]:
            raise BoardConstructionError("A board needs at least one row and one column")
        width = len(self.tiles[0])
        if any(len(row) != width for row in self.tiles):
            raise BoardConstructionError("Every board row must have the same length")

    @classmethod
    def from_fish(cls, rows: Iterable[Iterable[int]]) -> Board:
        """Build a board from fish counts; 0 marks a hole."""
        return cls(tiles=tuple(
            tuple(Tile(fish) if fish > 0 else HOLE for fish in row)
            for row in rows
        ))

    @property
    def rows(self) -> int:
        return len(self.tiles)

    @property
    def columns(self) -> int:
        return len(self.tiles[0])

    def in_range(self, position: Position) -> bool:
        return position.in_range(self.rows, self.columns)

    def is_tile(self, position: Position) -> bool:
        """True when the position is in range and not a hole."""
        return self.in_range(position) and isinstance(
            self.tiles[position.row][position.column], Tile
        )

    def space_at(self, position: Position) -> Space:
        """Raw space lookup; raises if the position is out of range."""
        _validate_in_range(self, position)
        return self.tiles[position.row][position.column]

    def get_tile(self, position: Position) -> Tile:
        """Get the active tile at a position, see validate_tile()."""
        return get_tile(self, position)

    def fish_at(self, position: Position) -> int:
        """Fish at the position, 0 for holes and invalid positions."""
        if not self.in_range(position):
            return 0
        return fish_on(self.tiles[position.row][position.column])

    def positions(self) -> Iterator[Position]:
        """Every cell position in row-major order."""
        for row in range(self.rows):
            for column in range(self.columns):
                yield Position(row, column)

    def tile_positions(self) -> Iterator[Position]:
        """Positions of active tiles in row-major order."""
        return (p for p in self.positions() if self.is_tile(p))

    def total_fish(self) -> int:
        return sum(fish_on(space) for row in self.tiles for space in row)

    def remove_tile(self, position: Position) -> Board:
        return remove_tile(self, position)

    def add_holes(self, holes: Iterable[Position]) -> Board:
        return add_holes(self, holes)

    def __str__(self) -> str:
        lines = []
        for index, row in enumerate(self.tiles):
            indent = "   " if index % 2 else ""
            lines.append(indent + "    ".join(str(space) for space in row))
        return "\n".join(lines)


def _validate_in_range(board: Board, position: Position) -> None:
    if not isinstance(position, Position) or not position.is_natural():
        raise InvalidCoordinateError(
            "Rows and columns must be natural numbers",
            context={"position": position},
        )
    if position.row >= board.rows or position.column >= board.columns:
        raise OutOfBoundsError(
            "No space at the given position",
            context={"position": position, "rows": board.rows, "columns": board.columns},
        )


def validate_tile(board: Board, position: Position) -> None:
    """
    Ensure a position refers to an active tile.

    Raises:
        InvalidCoordinateError: coordinates are not natural numbers
        OutOfBoundsError: row or column falls outside the board
        HoleError: the position is a hole
    """
    _validate_in_range(board, position)
    if not isinstance(board.tiles[position.row][position.column], Tile):
        raise HoleError("No active tile at the given position", context={"position": position})


def get_tile(board: Board, position: Position) -> Tile:
    validate_tile(board, position)
    return board.tiles[position.row][position.column]  # type: ignore[return-value]


def remove_tile(board: Board, position: Position) -> Board:
    """Return a board where the tile at position has become a hole."""
    validate_tile(board, position)
    row = list(board.tiles[position.row])
    row[position.column] = HOLE
    tiles = list(board.tiles)
    tiles[position.row] = tuple(row)
    return Board(tiles=tuple(tiles))


def validate_hole_positions(rows: int, columns: int, holes: Iterable[Position]) -> None:
    for hole in holes:
        if not isinstance(hole, Position) or not hole.in_range(rows, columns):
            raise BoardConstructionError(
                "Holes must be within the range of the board",
                context={"hole": hole, "rows": rows, "columns": columns},
            )


def add_holes(board: Board, holes: Iterable[Position]) -> Board:
    """Return a board with every given position turned into a hole."""
    holes = list(holes)
    validate_hole_positions(board.rows, board.columns, holes)
    tiles = [list(row) for row in board.tiles]
    for hole in holes:
        tiles[hole.row][hole.column] = HOLE
    return Board(tiles=tuple(tuple(row) for row in tiles))


def create_board(
    rows: int,
    columns: int,
    holes: Iterable[Position],
    max_fish: int,
    min_active_tiles: int,
    randomize_fish: bool = False,
    rng: random.Random | None = None,
) -> Board:
    """
    Create a board with holes at the given positions.

    Args:
        rows: Number of rows (positive)
        columns: Number of columns (positive)
        holes: Positions to turn into holes (duplicates allowed)
        max_fish: Fish per tile, or the upper bound when randomized
        min_active_tiles: Minimum number of tiles that must stay active
        randomize_fish: Give each tile 1..max_fish fish at random
        rng: Random source for randomized fish

    Raises:
        BoardConstructionError: if any argument is out of its domain
    """
    holes = list(holes)
    if not is_positive_integer(rows) or not is_positive_integer(columns):
        raise BoardConstructionError("Rows and columns must be positive integers")
    if not is_positive_integer(max_fish):
        raise BoardConstructionError("Fish per tile must be a positive integer")
    if not is_natural_number(min_active_tiles):
        raise BoardConstructionError("Minimum active tiles must be a natural number")
    validate_hole_positions(rows, columns, holes)
    if len(holes) + min_active_tiles > rows * columns:
        raise BoardConstructionError(
            f"Must have room for at least {min_active_tiles} active tiles",
            context={"holes": len(holes), "cells": rows * columns},
        )

    rng = rng or random.Random()

    def fish() -> int:
        return rng.randint(1, max_fish) if randomize_fish else max_fish

    active = Board(tiles=tuple(
        tuple(Tile(fish()) for _ in range(columns))
        for _ in range(rows)
    ))
    return add_holes(active, holes) if holes else active


def create_board_no_holes(number_of_tiles: int, fish_per_tile: int) -> Board:
    """Smallest square board with at least number_of_tiles uniform tiles."""
    if not is_positive_integer(number_of_tiles):
        raise BoardConstructionError("Number of tiles must be a positive integer")
    side = ceil(sqrt(number_of_tiles))
    return create_board(side, side, [], fish_per_tile, 0)


def create_board_with_minimum_one_fish_tiles(
    holes: list[Position],
    minimum_one_fish_tiles: int,
) -> Board:
    """Square board of one-fish tiles with the given holes and enough room."""
    side = max(1, ceil(sqrt(len(holes) + minimum_one_fish_tiles)))
    return create_board(side, side, holes, 1, minimum_one_fish_tiles)
