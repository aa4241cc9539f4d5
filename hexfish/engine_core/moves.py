"""
Moves - hex slides and move legality.

A penguin slides in a straight line along one of six directions and may
stop on any tile it passes. A slide ends before the first cell that is
off the board, a hole, or occupied by any penguin.

Directions (see board.py for the layout):
- up/down move two rows in the same column
- diagonals move one row; on even rows the left diagonals step one column
  left, on odd rows the right diagonals step one column right
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ..errors import IllegalMoveError, PositionError, RuleViolationError
from .board import Board, validate_tile
from .position import Position
from .state import GameState, Penguin, PenguinTeam


class Direction(Enum):
    """The six slide directions, in the order destinations are listed."""
    UP = "up"
    UP_LEFT = "up_left"
    UP_RIGHT = "up_right"
    DOWN_LEFT = "down_left"
    DOWN_RIGHT = "down_right"
    DOWN = "down"


DIRECTIONS: tuple[Direction, ...] = tuple(Direction)


@dataclass(frozen=True)
class Move:
    """A penguin move from one tile to another."""
    from_position: Position
    to_position: Position

    def sort_key(self) -> tuple[int, int, int, int]:
        return (
            self.from_position.row,
            self.from_position.column,
            self.to_position.row,
            self.to_position.column,
        )

    def __str__(self) -> str:
        return f"{self.from_position} -> {self.to_position}"


def step(position: Position, direction: Direction) -> Position:
    """The cell one step away, whether or not it exists on a board."""
    row, column = position.row, position.column
    if direction is Direction.UP:
        return Position(row - 2, column)
    if direction is Direction.DOWN:
        return Position(row + 2, column)

    down = direction in (Direction.DOWN_LEFT, Direction.DOWN_RIGHT)
    left = direction in (Direction.UP_LEFT, Direction.DOWN_LEFT)
    even_row = row % 2 == 0
    if even_row and left:
        column -= 1
    elif not even_row and not left:
        column += 1
    return Position(row + 1 if down else row - 1, column)


def neighbor(position: Position, board: Board, direction: Direction) -> Position | None:
    """The adjacent tile in a direction, or None for holes and off-board cells."""
    candidate = step(position, direction)
    if board.is_tile(candidate):
        return candidate
    return None


def slide(position: Position, state: GameState, direction: Direction) -> list[Position]:
    """Every free tile reachable from position in one direction, nearest first."""
    reachable: list[Position] = []
    current = neighbor(position, state.board, direction)
    while current is not None and not state.is_occupied(current):
        reachable.append(current)
        current = neighbor(current, state.board, direction)
    return reachable


def get_destinations_by_direction(position: Position, state: GameState) -> list[list[Position]]:
    """
    Destinations from position grouped by direction (see DIRECTIONS).

    Raises PositionError if position is not an active tile.
    """
    validate_tile(state.board, position)
    return [slide(position, state, direction) for direction in DIRECTIONS]


def get_all_destinations(position: Position, state: GameState) -> list[Position]:
    """Every tile a penguin at position could move to."""
    return [
        destination
        for group in get_destinations_by_direction(position, state)
        for destination in group
    ]


def can_penguin_move(penguin: Penguin, state: GameState) -> bool:
    """A penguin can move when any direction has a free first step."""
    for direction in DIRECTIONS:
        first = neighbor(penguin.position, state.board, direction)
        if first is not None and not state.is_occupied(first):
            return True
    return False


def can_team_move(team: PenguinTeam, state: GameState) -> bool:
    return any(can_penguin_move(penguin, state) for penguin in team.penguins)


def can_any_penguin_move(state: GameState) -> bool:
    return any(can_team_move(team, state) for team in state.penguin_teams)


def legal_moves(state: GameState, team_index: int | None = None) -> list[Move]:
    """
    All legal moves for a team (default: the team on duty).

    Penguins are taken in team order and destinations in direction order.
    """
    if not state.penguin_teams:
        return []
    index = state.players_turn if team_index is None else team_index
    return [
        Move(penguin.position, destination)
        for penguin in state.penguin_teams[index].penguins
        for destination in get_all_destinations(penguin.position, state)
    ]


def validate_move(move: Move, state: GameState, team_index: int) -> None:
    """
    Ensure the team at team_index may make move.

    Raises:
        IllegalMoveError: not a Move, no own penguin at the origin,
            or the destination is not reachable
        PositionError: origin or destination is not an active tile
    """
    if not isinstance(move, Move):
        raise IllegalMoveError("Proposed action is not a move", context={"action": move})
    team = state.penguin_teams[team_index]
    if team.penguin_at(move.from_position) is None:
        raise IllegalMoveError(
            "No penguin owned by this team at the origin",
            context={"from": move.from_position, "team": team.color.name},
        )
    state.validate_placement(move.to_position)
    if move.to_position not in get_all_destinations(move.from_position, state):
        raise IllegalMoveError(
            "Destination is not reachable from the origin",
            context={"move": str(move)},
        )


def is_valid_move(move: Move, state: GameState, team_index: int | None = None) -> bool:
    """Boolean form of validate_move() for the given or on-duty team."""
    if not state.penguin_teams:
        return False
    index = state.players_turn if team_index is None else team_index
    try:
        validate_move(move, state, index)
    except (PositionError, RuleViolationError):
        return False
    return True


def move_penguin(state: GameState, team_index: int, move: Move) -> GameState:
    """
    Apply a move for the team at team_index.

    The team scores the fish on the origin tile, the origin becomes a
    hole, and the turn passes to the next team.
    """
    validate_move(move, state, team_index)
    return apply_move(state, team_index, move)


def apply_move(state: GameState, team_index: int, move: Move) -> GameState:
    """Apply a move already known to be legal."""
    gained = state.board.fish_at(move.from_position)
    team = state.penguin_teams[team_index].relocate(
        move.from_position, move.to_position, gained
    )
    return state.with_team(team_index, team)._copy_with(
        board=state.board.remove_tile(move.from_position),
        turn=state.turn + 1,
        players_turn=state.next_players_turn(),
    )


def move_sort_key(move: Move) -> tuple[int, int, int, int]:
    return move.sort_key()


def move_tie_breaker(move_a: Move | None, move_b: Move | None) -> Move | None:
    """
    Prefer the move whose origin has the lower row, then lower column;
    when origins match, apply the same rule to the destinations.

    Two distinct legal moves never share both origin and destination.
    """
    if move_a is None:
        return move_b
    if move_b is None:
        return move_a
    return move_a if move_a.sort_key() <= move_b.sort_key() else move_b
