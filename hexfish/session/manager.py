"""
Tournament Manager - knock-out tournaments driven by the referee.

LIFECYCLE:
1. Contestants are split into groups of at most max_players
2. Each group plays one match; the match winners advance
3. Rounds repeat until one of:
   - fewer than min_players contestants are left
   - the round was a single final match (at most max_players contestants)
   - a round produced no eliminations (winners are the contestants)
4. Losers hear tournament_over(False); winners are asked
   tournament_over(True) and must accept within result_timeout

Players ejected by a referee are tracked separately from losers and are
never told the tournament result.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import repeat
from typing import Iterable, Sequence
import logging

from ..config import RefereeSettings, TournamentSettings
from ..engine_core.board import Board
from ..errors import ActorError
from .actor import call_with_timeout, run_detached
from .player import Player
from .referee import GameEndReport, Referee

logger = logging.getLogger(__name__)


def sort_players(players: Iterable[Player]) -> list[Player]:
    """Youngest first; equal ages ordered by name."""
    return sorted(players, key=lambda player: (player.age, player.name))


def _log_notice_failure(name: str):
    def callback(future) -> None:
        if not future.cancelled() and future.exception() is not None:
            logger.debug("tournament_over failed for %s: %r", name, future.exception())
    return callback


def same_names(first: Sequence[Player], second: Sequence[Player]) -> bool:
    """True when both groups hold the same multiset of player names."""
    return sorted(p.name for p in first) == sorted(p.name for p in second)


@dataclass
class RoundResult:
    """Who advanced from a round and who dropped out."""
    remaining_players: list[Player] = field(default_factory=list)
    losers: list[Player] = field(default_factory=list)
    kicked_players: list[Player] = field(default_factory=list)
    reports: list[GameEndReport] = field(default_factory=list)


@dataclass
class TournamentResult:
    """Final standings of a tournament."""
    winners: list[Player] = field(default_factory=list)
    losers: list[Player] = field(default_factory=list)
    kicked_players: list[Player] = field(default_factory=list)
    rounds: int = 0


class TournamentManager:
    """
    Runs knock-out tournaments.

    Usage:
        manager = TournamentManager()
        result = manager.run_tournament_with_results(players)
    """

    def __init__(
        self,
        referee: Referee | None = None,
        settings: TournamentSettings | None = None,
    ):
        self.settings = settings or TournamentSettings()
        self.referee = referee or Referee(RefereeSettings(
            min_players=self.settings.min_players,
            max_players=self.settings.max_players,
        ))

    def allocate_players_to_games(self, contestants: Sequence[Player]) -> list[list[Player]]:
        """
        Split contestants into match groups, in contestant order.

        Groups hold max_players. When the leftover group would be too small
        the previous group goes back into the pool and groups shrink by one.
        Each group is sorted by age, then name.
        """
        pool = list(contestants)
        groups: list[list[Player]] = []
        size = self.settings.max_players
        while pool:
            if len(pool) < size and len(pool) < self.settings.min_players and groups:
                pool.extend(groups.pop())
                if size == self.settings.max_players:
                    size -= 1
            group, pool = pool[:size], pool[size:]
            groups.append(sort_players(group))
        logger.info("Allocated %d player(s) into groups of %s",
                    len(contestants), [len(g) for g in groups])
        return groups

    def play_game(self, players: Sequence[Player], board: Board | None = None) -> GameEndReport:
        """Play one match on a random board, or on the given board."""
        if board is None:
            return self.referee.run_game(players, self.settings.rows, self.settings.columns)
        return self.referee.run_game_with_board(players, board)

    def play_round(self, contestants: Sequence[Player], board: Board | None = None) -> RoundResult:
        """Play every group of a round and collect who advanced."""
        groups = self.allocate_players_to_games(contestants)
        if self.settings.max_parallel_games > 1 and len(groups) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.max_parallel_games) as pool:
                reports = list(pool.map(self.play_game, groups, repeat(board)))
        else:
            reports = [self.play_game(group, board) for group in groups]

        result = RoundResult(reports=reports)
        for report in reports:
            result.remaining_players.extend(r.player for r in report.winners)
            result.losers.extend(r.player for r in report.losers)
            result.kicked_players.extend(report.kicked_players)
        logger.info(
            "Round over: %d advance, %d lose, %d kicked",
            len(result.remaining_players), len(result.losers), len(result.kicked_players),
        )
        return result

    def run_tournament(self, contestants: Sequence[Player], board: Board | None = None) -> TournamentResult:
        """Play rounds until a stop condition holds; nobody is notified."""
        contestants = list(contestants)
        result = TournamentResult()
        while len(contestants) >= self.settings.min_players:
            round_result = self.play_round(contestants, board)
            result.rounds += 1
            result.losers.extend(round_result.losers)
            result.kicked_players.extend(round_result.kicked_players)

            final = len(contestants) <= self.settings.max_players
            stalled = same_names(round_result.remaining_players, contestants)
            contestants = round_result.remaining_players
            if final or stalled:
                break

        result.winners = contestants
        return result

    def run_tournament_with_results(
        self,
        contestants: Sequence[Player],
        board: Board | None = None,
    ) -> TournamentResult:
        """
        Run the tournament and tell everyone how it went.

        Winners that refuse the result, raise, or do not answer within
        result_timeout are moved to the losers.
        """
        result = self.run_tournament(contestants, board)
        self.tell_players_they_lost(result.losers)

        accepted: list[Player] = []
        for player in result.winners:
            if self._accepts_win(player):
                accepted.append(player)
            else:
                logger.info("%s did not accept the tournament win", player.name)
                result.losers.append(player)
        result.winners = accepted
        return result

    def tell_players_they_lost(self, losers: Iterable[Player]) -> None:
        """Send tournament_over(False) without waiting for answers."""
        for player in losers:
            future = run_detached(player.tournament_over, False, name=f"hexfish-loser-{player.name}")
            future.add_done_callback(_log_notice_failure(player.name))

    def _accepts_win(self, player: Player) -> bool:
        try:
            answer = call_with_timeout(
                player.tournament_over, True, timeout=self.settings.result_timeout
            )
        except ActorError as e:
            logger.debug("tournament_over failed for %s: %s", player.name, e)
            return False
        return answer is True
