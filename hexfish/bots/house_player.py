"""
House player - the built-in opponent.
"""

from __future__ import annotations

from ..config import HEXFISH_SEARCH_DEPTH, LEVELS_PER_TEAM
from ..engine_core.moves import Move
from ..engine_core.position import Position
from ..engine_core.state import GameState
from ..session.player import Player
from .strategy import minimax_move, penguin_placement


class HousePlayer(Player):
    """
    Places penguins with the row-major scan and moves with minimax.

    Without a configured depth each move searches LEVELS_PER_TEAM levels for
    every team still in the state.

    Stateless between calls, so one instance can sit in several matches.
    """

    def __init__(self, name: str, age: int = 0, depth: int | None = None):
        super().__init__(name, age)
        self.depth = HEXFISH_SEARCH_DEPTH if depth is None else depth
        if self.depth is not None and self.depth < 1:
            raise ValueError("Search depth must be at least 1")

    def search_depth(self, state: GameState) -> int:
        if self.depth is not None:
            return self.depth
        return state.num_teams * LEVELS_PER_TEAM

    def get_penguin_placement(self, state: GameState) -> Position:
        return penguin_placement(state)

    def get_penguin_move(self, state: GameState) -> Move:
        return minimax_move(state, self.search_depth(state))
