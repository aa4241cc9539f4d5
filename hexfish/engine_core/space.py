"""
Board spaces - a cell is either a Hole or a Tile carrying fish.

Space is a closed sum type: code that inspects a cell checks
isinstance(space, Tile) / isinstance(space, Hole) and nothing else.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from .position import is_positive_integer


@dataclass(frozen=True)
class Hole:
    """An empty space. Nothing can stand on or pass over it."""

    def __str__(self) -> str:
        return "--"


@dataclass(frozen=True)
class Tile:
    """An active tile with a positive number of fish."""
    fish: int

    def __post_init__(self):
        if not is_positive_integer(self.fish):
            raise ValueError(f"Tile fish must be a positive integer, got {self.fish!r}")

    def __str__(self) -> str:
        return f"{self.fish:>2}"


Space = Union[Hole, Tile]

HOLE = Hole()


def is_hole(space: Space) -> bool:
    return isinstance(space, Hole)


def fish_on(space: Space) -> int:
    """Fish on a space; holes have none."""
    if isinstance(space, Tile):
        return space.fish
    return 0
