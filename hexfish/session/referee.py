"""
Referee - runs one match from setup to the final report.

Phases (strictly sequential per match):
1. SETUP: colours are handed out in palette order and every player hears
   its colour and the turn order
2. PLACEMENT: 6 - N rounds, each active player places one penguin per round
3. MOVEMENT: players slide penguins until no team can move; a team that is
   stuck is skipped without being asked
4. COMPLETE: the players tied on the highest score win

RULE VIOLATIONS:
- An answer that is not a legal placement or move, an exception, or an
  answer later than action_timeout ejects the player
- An ejected player's team leaves the state (its captured tiles stay holes,
  its penguins disappear) and the player gets a single kick_out() notice
- Ejected players are reported separately and never win or lose

Every call to a player goes through its ActorProxy. Every run_* call owns
its match record, so one Referee can run several matches at once.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from math import ceil, sqrt
from typing import Sequence
import logging
import random

from ..config import MAX_FISH, RefereeSettings
from ..engine_core.board import Board, create_board
from ..engine_core.moves import can_any_penguin_move, can_team_move, move_penguin
from ..engine_core.position import Position
from ..engine_core.state import GameState, create_game_state
from ..errors import EJECTION_ERRORS, BoardConstructionError, ConfigurationError, HexFishError
from .actor import ActorProxy
from .player import Player

logger = logging.getLogger(__name__)


class RefereePhase(Enum):
    """Where a match is in its lifecycle."""
    SETUP = "setup"
    PLACEMENT = "placement"
    MOVEMENT = "movement"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PlayerResult:
    """A player and the score its team finished with."""
    player: Player
    score: int


@dataclass
class GameEndReport:
    """
    Outcome of a match.

    winners and losers partition the players that were never ejected;
    kicked_players lists ejected players in ejection order.
    """
    winners: list[PlayerResult] = field(default_factory=list)
    losers: list[PlayerResult] = field(default_factory=list)
    kicked_players: list[Player] = field(default_factory=list)
    final_state: GameState | None = None

    @property
    def winner_names(self) -> list[str]:
        return [result.player.name for result in self.winners]


@dataclass
class _Match:
    """Mutable bookkeeping of one running match."""
    state: GameState
    actors: list[ActorProxy]
    kicked: list[ActorProxy] = field(default_factory=list)
    phase: RefereePhase = RefereePhase.SETUP

    def check_lock_step(self) -> None:
        if len(self.actors) != self.state.num_teams:
            raise AssertionError("Roster and penguin teams are out of step")


# =============================================================================
# Board construction
# =============================================================================

def get_number_of_holes(rows: int, columns: int, number_of_players: int) -> int:
    """Hole budget: one hole per five cells left after every penguin has a tile."""
    return (rows * columns - number_of_players * (6 - number_of_players)) // 5


def get_holes(
    rows: int,
    columns: int,
    number_of_players: int,
    rng: random.Random | None = None,
) -> list[Position]:
    """Random hole positions. The same cell may be picked more than once."""
    rng = rng or random.Random()
    return [
        Position(rng.randrange(rows), rng.randrange(columns))
        for _ in range(max(0, get_number_of_holes(rows, columns, number_of_players)))
    ]


def construct_board(
    rows: int,
    columns: int,
    number_of_players: int,
    rng: random.Random | None = None,
    max_fish: int = MAX_FISH,
) -> Board:
    """
    Random board for a match: random holes and 1..max_fish fish per tile.

    Raises:
        BoardConstructionError: the grid cannot hold every penguin
    """
    penguins = number_of_players * (6 - number_of_players)
    if rows * columns < penguins:
        raise BoardConstructionError(
            "Board too small for every penguin",
            context={"rows": rows, "columns": columns, "penguins": penguins},
        )
    rng = rng or random.Random()
    holes = get_holes(rows, columns, number_of_players, rng)
    return create_board(
        rows,
        columns,
        holes,
        max_fish,
        rows * columns - len(holes),
        randomize_fish=True,
        rng=rng,
    )


def create_board_for_players(number_of_players: int, rng: random.Random | None = None) -> Board:
    """Smallest square random board with room for every penguin."""
    side = ceil(sqrt(number_of_players * (6 - number_of_players)))
    return construct_board(side, side, number_of_players, rng)


# =============================================================================
# Referee
# =============================================================================

class Referee:
    """
    Supervises matches between Players.

    Usage:
        referee = Referee(RefereeSettings(action_timeout=2.0))
        report = referee.run_game(players, rows=5, columns=5)
    """

    def __init__(
        self,
        settings: RefereeSettings | None = None,
        rng: random.Random | None = None,
    ):
        self.settings = settings or RefereeSettings()
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def run_game(self, players: Sequence[Player], rows: int, columns: int) -> GameEndReport:
        """Run a match on a freshly constructed random board."""
        self._check_player_count(len(players))
        board = construct_board(rows, columns, len(players), self.rng, self.settings.max_fish)
        return self.run_game_with_board(players, board)

    def run_game_with_board(self, players: Sequence[Player], board: Board) -> GameEndReport:
        """Run a match on the given board; players are in turn order."""
        self._check_player_count(len(players))
        colors = self.settings.color_ordering[:len(players)]
        return self.run_game_with_state(players, create_game_state(colors, board))

    def run_game_with_state(self, players: Sequence[Player], state: GameState) -> GameEndReport:
        """
        Run a match from the given state.

        players[i] plays state.penguin_teams[i]. Placement only fills teams
        up to the team size, so a state with every penguin already placed
        goes straight to the movement phase.
        """
        self._check_player_count(len(players))
        if len(players) != state.num_teams:
            raise ConfigurationError(
                "Every penguin team needs exactly one player",
                context={"players": len(players), "teams": state.num_teams},
            )

        match = _Match(state=state, actors=[
            ActorProxy(player, notice_timeout=self.settings.notification_timeout)
            for player in players
        ])
        try:
            self._setup(match)
            self._placement_phase(match)
            self._movement_phase(match)
            report = self._complete(match)
        finally:
            for actor in match.actors + match.kicked:
                actor.close(self.settings.notification_timeout)
        return report

    def _check_player_count(self, count: int) -> None:
        if not self.settings.min_players <= count <= self.settings.max_players:
            raise ConfigurationError(
                "Unsupported number of players",
                context={
                    "players": count,
                    "min": self.settings.min_players,
                    "max": self.settings.max_players,
                },
            )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _setup(self, match: _Match) -> None:
        turn_order = match.state.colors
        logger.info("Setting up match for %s", ", ".join(a.name for a in match.actors))
        for actor, color in zip(match.actors, turn_order):
            actor.tell("game_setup_begins", color, turn_order, match.state)

    def _placement_phase(self, match: _Match) -> None:
        match.phase = RefereePhase.PLACEMENT
        team_size = self.settings.team_size(len(match.actors))
        placed = min((len(team.penguins) for team in match.state.penguin_teams), default=team_size)
        rounds = max(0, team_size - placed)
        logger.info("Placement phase: %d round(s)", rounds)

        for _ in range(rounds):
            # One action per player that was active when the round began
            for _ in range(len(match.actors)):
                if not match.actors:
                    return
                self._take_placement(match)
                self._notify_changed(match)

    def _take_placement(self, match: _Match) -> None:
        index = match.state.players_turn
        actor = match.actors[index]
        try:
            position = actor.ask(
                "get_penguin_placement", match.state, timeout=self.settings.action_timeout
            )
            match.state = match.state.place_penguin(index, position)
        except EJECTION_ERRORS as e:
            self._eject(match, index, e)
            return
        logger.debug("%s placed a penguin at %s", actor.name, position)

    def _movement_phase(self, match: _Match) -> None:
        match.phase = RefereePhase.MOVEMENT
        logger.info("Movement phase")
        for actor in match.actors:
            actor.tell("game_is_starting", match.state)

        while match.actors and can_any_penguin_move(match.state):
            index = match.state.players_turn
            actor = match.actors[index]
            if not can_team_move(match.state.current_team, match.state):
                logger.debug("%s cannot move and is skipped", actor.name)
                match.state = match.state.skip_turn()
            else:
                self._take_move(match, index, actor)
            self._notify_changed(match)

    def _take_move(self, match: _Match, index: int, actor: ActorProxy) -> None:
        try:
            move = actor.ask("get_penguin_move", match.state, timeout=self.settings.action_timeout)
            match.state = move_penguin(match.state, index, move)
        except EJECTION_ERRORS as e:
            self._eject(match, index, e)
            return
        logger.debug("%s moved %s", actor.name, move)

    def _complete(self, match: _Match) -> GameEndReport:
        match.phase = RefereePhase.COMPLETE
        match.check_lock_step()
        scores = match.state.scores()
        best = max(scores, default=0)

        report = GameEndReport(
            kicked_players=[actor.player for actor in match.kicked],
            final_state=match.state,
        )
        for actor, score in zip(match.actors, scores):
            result = PlayerResult(player=actor.player, score=score)
            won = score == best
            (report.winners if won else report.losers).append(result)
            actor.tell("game_over", won)

        logger.info(
            "Match complete: winners=%s losers=%s kicked=%s",
            [r.player.name for r in report.winners],
            [r.player.name for r in report.losers],
            [p.name for p in report.kicked_players],
        )
        return report

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _eject(self, match: _Match, index: int, reason: HexFishError) -> None:
        actor = match.actors.pop(index)
        match.state = match.state.remove_team(index)
        match.kicked.append(actor)
        match.check_lock_step()
        logger.warning("Ejecting %s during %s: %s", actor.name, match.phase.value, reason)
        actor.tell("kick_out")

    def _notify_changed(self, match: _Match) -> None:
        for actor in match.actors:
            actor.tell("some_player_changed_state", match.state)

