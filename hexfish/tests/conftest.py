"""
Pytest fixtures for HexFish tests.
"""

import threading
import time

import pytest

from ..config import RefereeSettings
from ..engine_core.board import Board
from ..engine_core.position import Position
from ..engine_core.state import GameColor, GameState, Penguin, PenguinTeam, create_game_state
from ..session.player import Player

COLUMN_FISH = [1, 3, 2, 6, 5, 4, 1, 3, 2, 6, 5, 4]


def make_state(board, team_rows, players_turn=0, turn=0, scores=None, column=0):
    """State with one team per entry of team_rows, penguins in that column."""
    colors = list(GameColor)
    scores = scores or [0] * len(team_rows)
    teams = tuple(
        PenguinTeam(
            color=colors[i],
            penguins=tuple(Penguin(Position(row, column)) for row in rows),
            score=scores[i],
        )
        for i, rows in enumerate(team_rows)
    )
    return GameState(board=board, penguin_teams=teams, turn=turn, players_turn=players_turn)


@pytest.fixture
def column_board() -> Board:
    """The 12x1 board used across strategy and referee tests."""
    return Board.from_fish([[fish] for fish in COLUMN_FISH])


@pytest.fixture
def unplaced_state(column_board) -> GameState:
    """Two empty teams on the column board."""
    return create_game_state([GameColor.BLACK, GameColor.RED], column_board)


@pytest.fixture
def placed_state(column_board) -> GameState:
    """Every penguin placed: BLACK on even rows 0-6, RED on odd rows 1-7."""
    return make_state(column_board, [[0, 2, 4, 6], [1, 3, 5, 7]], turn=8)


@pytest.fixture
def skip_state() -> GameState:
    """BLACK is boxed in while RED can still slide down."""
    board = Board.from_fish([[1], [1], [0], [1]])
    return make_state(board, [[0], [1]])


@pytest.fixture
def fast_settings() -> RefereeSettings:
    """Short timeouts so misbehaving players are ejected quickly."""
    return RefereeSettings(action_timeout=0.2, notification_timeout=1.0)


class RecordingPlayer(Player):
    """Places with the first free tile, moves with the first legal move, records notices."""

    def __init__(self, name, age=0):
        super().__init__(name, age)
        self.notices = []
        self.lock = threading.Lock()

    def _record(self, *notice):
        with self.lock:
            self.notices.append(notice)

    def get_penguin_placement(self, state):
        from ..bots.strategy import penguin_placement
        return penguin_placement(state)

    def get_penguin_move(self, state):
        from ..engine_core.moves import legal_moves
        return legal_moves(state)[0]

    def game_setup_begins(self, color, turn_order, state):
        self._record("setup", color)

    def game_is_starting(self, state):
        self._record("starting")

    def some_player_changed_state(self, state):
        self._record("changed")

    def kick_out(self):
        self._record("kick_out")

    def game_over(self, did_i_win):
        self._record("game_over", did_i_win)

    def count(self, kind):
        with self.lock:
            return sum(1 for notice in self.notices if notice[0] == kind)


class RaisingMovePlayer(RecordingPlayer):
    """Places normally but raises when asked for a move."""

    def get_penguin_move(self, state):
        raise RuntimeError("cannot decide")


class StubbornPlacementPlayer(RecordingPlayer):
    """Always asks for the top-left tile."""

    def get_penguin_placement(self, state):
        return Position(0, 0)


class SlowPlacementPlayer(RecordingPlayer):
    """Answers placements long after any reasonable timeout."""

    def get_penguin_placement(self, state):
        time.sleep(1.0)
        return super().get_penguin_placement(state)


class GarbageMovePlayer(RecordingPlayer):
    """Answers move requests with something that is not a move."""

    def get_penguin_move(self, state):
        return "north"
