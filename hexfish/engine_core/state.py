"""
Game State - board plus penguin teams plus the turn pointer.

Design principles:
- Immutable: every transition returns a new GameState
- Cheap to branch: boards and teams are shared between states
- Safe to hand to players: nothing they do can change the referee's copy

Turn order is the order of penguin_teams. players_turn indexes the team
on duty and turn counts every placement, move and skip taken so far.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Sequence

from ..errors import BoardConstructionError, IllegalPlacementError
from .board import Board, validate_hole_positions, validate_tile
from .position import Position


class GameColor(Enum):
    """Team colours. The value is the colour used to render penguins."""
    BLACK = "#000000"
    RED = "#FF0000"
    WHITE = "#FFFFFF"
    BROWN = "#8B4513"


@dataclass(frozen=True)
class Penguin:
    """A single game piece."""
    position: Position

    def moved_to(self, position: Position) -> Penguin:
        return Penguin(position=position)


@dataclass(frozen=True)
class PenguinTeam:
    """
    The penguins and score of one player.

    Invariant: no two penguins of the team share a position.
    """
    color: GameColor
    penguins: tuple[Penguin, ...] = ()
    score: int = 0

    @property
    def positions(self) -> tuple[Position, ...]:
        return tuple(p.position for p in self.penguins)

    def penguin_at(self, position: Position) -> Penguin | None:
        for penguin in self.penguins:
            if penguin.position == position:
                return penguin
        return None

    def with_penguin(self, position: Position) -> PenguinTeam:
        """Return new team with a penguin added at position."""
        return replace(self, penguins=self.penguins + (Penguin(position),))

    def relocate(self, from_position: Position, to_position: Position, gained: int) -> PenguinTeam:
        """Return new team with one penguin moved and the score increased."""
        penguins = tuple(
            p.moved_to(to_position) if p.position == from_position else p
            for p in self.penguins
        )
        return replace(self, penguins=penguins, score=self.score + gained)


def create_penguin_teams(colors: Iterable[GameColor]) -> tuple[PenguinTeam, ...]:
    """One empty team per colour, in turn order."""
    return tuple(PenguinTeam(color=color) for color in colors)


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    Invariants (checked on construction):
    - 0 <= players_turn < len(penguin_teams) while teams remain
    - no two penguins share a position and none stands on a hole
    """
    board: Board
    penguin_teams: tuple[PenguinTeam, ...] = field(default_factory=tuple)
    turn: int = 0
    players_turn: int = 0

    def __post_init__(self):
        if self.penguin_teams:
            if not 0 <= self.players_turn < len(self.penguin_teams):
                raise ValueError(
                    f"players_turn {self.players_turn} out of range for "
                    f"{len(self.penguin_teams)} team(s)"
                )
        elif self.players_turn != 0:
            raise ValueError("players_turn must be 0 when no teams remain")
        if self.turn < 0:
            raise ValueError("turn must be a natural number")

        seen: set[Position] = set()
        for team in self.penguin_teams:
            for position in team.positions:
                if position in seen:
                    raise ValueError(f"Two penguins share position {position}")
                if not self.board.is_tile(position):
                    raise ValueError(f"Penguin at {position} is not on an active tile")
                seen.add(position)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def num_teams(self) -> int:
        return len(self.penguin_teams)

    @property
    def current_team(self) -> PenguinTeam:
        """The team whose turn it is."""
        return self.penguin_teams[self.players_turn]

    @property
    def colors(self) -> tuple[GameColor, ...]:
        return tuple(team.color for team in self.penguin_teams)

    def team_index(self, color: GameColor) -> int:
        """Index of the team with the given colour."""
        for index, team in enumerate(self.penguin_teams):
            if team.color == color:
                return index
        raise KeyError(f"No penguin team with color {color.name}")

    def penguin_at(self, position: Position) -> Penguin | None:
        for team in self.penguin_teams:
            penguin = team.penguin_at(position)
            if penguin is not None:
                return penguin
        return None

    def is_occupied(self, position: Position) -> bool:
        return self.penguin_at(position) is not None

    def scores(self) -> tuple[int, ...]:
        return tuple(team.score for team in self.penguin_teams)

    def validate_placement(self, position: Position) -> None:
        """
        Ensure a penguin may be placed at position.

        Raises:
            PositionError: the position is not an active tile
            IllegalPlacementError: a penguin already stands there
        """
        validate_tile(self.board, position)
        if self.is_occupied(position):
            raise IllegalPlacementError(
                "Cannot place a penguin where another penguin stands",
                context={"position": position},
            )

    def is_valid_placement(self, position: Position) -> bool:
        return (
            isinstance(position, Position)
            and self.board.is_tile(position)
            and not self.is_occupied(position)
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def next_players_turn(self) -> int:
        if not self.penguin_teams:
            return 0
        return (self.players_turn + 1) % len(self.penguin_teams)

    def with_team(self, index: int, team: PenguinTeam) -> GameState:
        """Return new state with the team at index replaced."""
        teams = list(self.penguin_teams)
        teams[index] = team
        return self._copy_with(penguin_teams=tuple(teams))

    def place_penguin(self, team_index: int, position: Position) -> GameState:
        """
        Place a penguin for the team at team_index and pass the turn on.

        Raises PositionError or IllegalPlacementError, see validate_placement().
        """
        if not 0 <= team_index < len(self.penguin_teams):
            raise IndexError(f"No penguin team at index {team_index}")
        self.validate_placement(position)
        team = self.penguin_teams[team_index].with_penguin(position)
        return self.with_team(team_index, team)._copy_with(
            turn=self.turn + 1,
            players_turn=self.next_players_turn(),
        )

    def skip_turn(self) -> GameState:
        """Pass the turn to the next team without acting."""
        return self._copy_with(turn=self.turn + 1, players_turn=self.next_players_turn())

    def remove_team(self, index: int) -> GameState:
        """
        Remove a team (its penguins leave the board, its tiles stay).

        players_turn keeps pointing at the same team when that team
        survives, and at the team that followed the removed one otherwise.
        """
        if not 0 <= index < len(self.penguin_teams):
            raise IndexError(f"No penguin team at index {index}")
        teams = self.penguin_teams[:index] + self.penguin_teams[index + 1:]
        players_turn = self.players_turn
        if players_turn > index:
            players_turn -= 1
        if players_turn >= len(teams):
            players_turn = 0
        return self._copy_with(penguin_teams=teams, players_turn=players_turn)

    def add_holes(self, holes: Sequence[Position]) -> GameState:
        """Return new state whose board has extra holes."""
        validate_hole_positions(self.board.rows, self.board.columns, holes)
        for hole in holes:
            if self.is_occupied(hole):
                raise BoardConstructionError(
                    "Cannot put a hole under a penguin", context={"position": hole}
                )
        return self._copy_with(board=self.board.add_holes(holes))


def create_game_state(colors: Iterable[GameColor], board: Board) -> GameState:
    """Initial state: empty teams in the given colour order, first team on duty."""
    return GameState(board=board, penguin_teams=create_penguin_teams(colors))
