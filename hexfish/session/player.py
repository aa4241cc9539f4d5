"""
Player - Interface between the referee and whoever chooses actions.

A Player is asked for two kinds of decisions:
- Where to place a penguin (placement phase)
- Which penguin to slide where (movement phase)

Everything else is a notice. Notices have no-op defaults so a player only
overrides what it cares about. The referee never trusts a player: every
answer is validated, and raising or answering late gets the player ejected.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ..engine_core.moves import Move
    from ..engine_core.position import Position
    from ..engine_core.state import GameColor, GameState


class Player(ABC):
    """
    Abstract base class for players.

    Identity is by object; name and age are only used for ordering and
    reporting, so two players may share a name.
    """

    def __init__(self, name: str, age: int = 0):
        self.name = name
        self.age = age

    @abstractmethod
    def get_penguin_placement(self, state: GameState) -> Position:
        """
        Choose where to place the next penguin.

        Args:
            state: Current game state, this player's team is on duty

        Returns:
            Position of an unoccupied tile
        """
        pass

    @abstractmethod
    def get_penguin_move(self, state: GameState) -> Move:
        """
        Choose the next move for this player's team.

        Only called when the team has at least one legal move.
        """
        pass

    def game_setup_begins(
        self,
        color: GameColor,
        turn_order: Sequence[GameColor],
        state: GameState,
    ) -> None:
        """Notice: the match is set up and this player plays color."""

    def game_is_starting(self, state: GameState) -> None:
        """Notice: placement is over and the first move is about to be asked."""

    def some_player_changed_state(self, state: GameState) -> None:
        """Notice: the state changed after an action, skip or ejection."""

    def kick_out(self) -> None:
        """Notice: this player broke a rule and has left the match."""

    def game_over(self, did_i_win: bool) -> None:
        """Notice: the match has ended."""

    def tournament_over(self, did_i_win: bool) -> bool:
        """
        Notice: the tournament has ended.

        Winners must answer True to accept the result; any other answer
        turns them into losers.
        """
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, age={self.age})"
