"""
Tests for hex geometry, slides and move legality.

Tests:
- Neighbour offsets on even and odd rows
- Slides stop at holes, edges and penguins
- Legal moves round-trip through validation
- Moving credits the origin tile and leaves a hole
"""

import pytest

from ..engine_core.board import Board, create_board
from ..engine_core.moves import (
    Direction,
    Move,
    can_any_penguin_move,
    can_team_move,
    get_all_destinations,
    get_destinations_by_direction,
    is_valid_move,
    legal_moves,
    move_penguin,
    move_tie_breaker,
    step,
)
from ..engine_core.position import Position
from ..errors import HoleError, IllegalMoveError
from .conftest import make_state


def P(row, column=0):
    return Position(row, column)


class TestGeometry:
    """Neighbour offsets."""

    def test_even_row_neighbours(self):
        """Left diagonals step one column left on even rows."""
        origin = P(2, 1)
        assert step(origin, Direction.UP) == P(0, 1)
        assert step(origin, Direction.UP_LEFT) == P(1, 0)
        assert step(origin, Direction.UP_RIGHT) == P(1, 1)
        assert step(origin, Direction.DOWN_LEFT) == P(3, 0)
        assert step(origin, Direction.DOWN_RIGHT) == P(3, 1)
        assert step(origin, Direction.DOWN) == P(4, 1)

    def test_odd_row_neighbours(self):
        """Right diagonals step one column right on odd rows."""
        origin = P(3, 1)
        assert step(origin, Direction.UP) == P(1, 1)
        assert step(origin, Direction.UP_LEFT) == P(2, 1)
        assert step(origin, Direction.UP_RIGHT) == P(2, 2)
        assert step(origin, Direction.DOWN_LEFT) == P(4, 1)
        assert step(origin, Direction.DOWN_RIGHT) == P(4, 2)
        assert step(origin, Direction.DOWN) == P(5, 1)


class TestDestinations:
    """Slides in every direction."""

    def test_open_board_from_corner(self):
        """From the corner of an open board only the down-right and down lines are open."""
        state = make_state(create_board(6, 3, [], 1, 0), [[0]])
        assert get_all_destinations(P(0, 0), state) == [
            P(1, 0), P(2, 1), P(3, 1), P(4, 2), P(5, 2),
            P(2, 0), P(4, 0),
        ]

    def test_grouped_by_direction(self):
        """Destinations are grouped in direction order."""
        state = make_state(create_board(6, 3, [], 1, 0), [[0]])
        groups = get_destinations_by_direction(P(0, 0), state)
        assert len(groups) == 6
        assert groups[4] == [P(1, 0), P(2, 1), P(3, 1), P(4, 2), P(5, 2)]
        assert groups[5] == [P(2, 0), P(4, 0)]
        assert groups[0] == groups[1] == groups[2] == groups[3] == []

    def test_column_board(self, placed_state):
        """Penguins stop before other penguins on the column board."""
        assert get_all_destinations(P(6), placed_state) == [P(8), P(10)]
        assert get_all_destinations(P(7), placed_state) == [P(8), P(9), P(11)]
        assert get_all_destinations(P(2), placed_state) == []

    def test_slide_stops_before_hole(self):
        """A hole ends the slide."""
        board = Board.from_fish([[1], [1], [1], [1], [0], [1], [1]])
        state = make_state(board, [[0]])
        assert get_all_destinations(P(0), state) == [P(1), P(2)]

    def test_origin_must_be_tile(self):
        """Asking for destinations from a hole fails."""
        state = make_state(Board.from_fish([[0], [1]]), [[1]])
        with pytest.raises(HoleError):
            get_all_destinations(P(0), state)


class TestMobility:
    """Can a penguin, team or anyone move."""

    def test_placed_state(self, placed_state):
        """Both teams can move in the placed column state."""
        assert can_team_move(placed_state.penguin_teams[0], placed_state)
        assert can_team_move(placed_state.penguin_teams[1], placed_state)
        assert can_any_penguin_move(placed_state)

    def test_boxed_in_team(self, skip_state):
        """A boxed-in team cannot move while the other can."""
        assert not can_team_move(skip_state.penguin_teams[0], skip_state)
        assert can_team_move(skip_state.penguin_teams[1], skip_state)

    def test_legal_moves_order(self, placed_state):
        """Legal moves follow penguin order, then direction order."""
        assert legal_moves(placed_state) == [Move(P(6), P(8)), Move(P(6), P(10))]
        assert legal_moves(placed_state, 1) == [
            Move(P(7), P(8)), Move(P(7), P(9)), Move(P(7), P(11)),
        ]


class TestMoveValidation:
    """Legality checks and applying moves."""

    def test_every_legal_move_validates(self, placed_state):
        """Generated moves pass validation."""
        for move in legal_moves(placed_state):
            assert is_valid_move(move, placed_state)

    def test_opponents_penguin(self, placed_state):
        """A team cannot move another team's penguin."""
        with pytest.raises(IllegalMoveError):
            move_penguin(placed_state, 0, Move(P(7), P(9)))

    def test_unreachable_destination(self, placed_state):
        """A tile behind another penguin is not reachable."""
        assert not is_valid_move(Move(P(4), P(8)), placed_state)

    def test_destination_hole(self):
        """Moving onto a hole fails with a hole error."""
        board = Board.from_fish([[1], [0], [1]])
        state = make_state(board, [[0]])
        with pytest.raises(HoleError):
            move_penguin(state, 0, Move(P(0), P(1)))

    def test_not_a_move(self, placed_state):
        """Only Move values are accepted."""
        with pytest.raises(IllegalMoveError):
            move_penguin(placed_state, 0, "6 -> 8")

    def test_move_scores_origin_fish(self, placed_state):
        """The team scores the origin's fish and the origin becomes a hole."""
        state = move_penguin(placed_state, 0, Move(P(6), P(10)))
        assert state.penguin_teams[0].score == 1
        assert state.penguin_teams[0].positions == (P(0), P(2), P(4), P(10))
        assert not state.board.is_tile(P(6))
        assert state.turn == placed_state.turn + 1
        assert state.players_turn == 1

    def test_tie_breaker(self):
        """Smaller origin wins, then smaller destination."""
        a = Move(P(1, 2), P(3, 2))
        b = Move(P(1, 3), P(0, 0))
        c = Move(P(1, 2), P(2, 2))
        assert move_tie_breaker(a, b) == a
        assert move_tie_breaker(a, c) == c
        assert move_tie_breaker(None, b) == b
