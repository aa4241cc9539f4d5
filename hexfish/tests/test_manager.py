"""
Tests for the tournament manager.

Tests:
- Group allocation
- Round and tournament termination
- Result notification
"""

import threading
import time

import pytest

from ..bots import HousePlayer
from ..config import TournamentSettings
from ..session.manager import TournamentManager, sort_players
from ..session.player import Player
from ..session.referee import GameEndReport, PlayerResult, Referee


class Contestant(Player):
    """A player the scripted referee never asks anything."""

    def __init__(self, name, age=0, accept=True, delay=0.0):
        super().__init__(name, age)
        self.accept = accept
        self.delay = delay
        self.told = threading.Event()
        self.result = None

    def get_penguin_placement(self, state):
        raise NotImplementedError

    def get_penguin_move(self, state):
        raise NotImplementedError

    def tournament_over(self, did_i_win):
        time.sleep(self.delay)
        self.result = did_i_win
        self.told.set()
        return self.accept


class FirstPlayerWinsReferee(Referee):
    """Declares the first player of each group the only winner."""

    def run_game(self, players, rows, columns):
        first, *rest = players
        return GameEndReport(
            winners=[PlayerResult(first, 1)],
            losers=[PlayerResult(p, 0) for p in rest],
        )


class EveryoneWinsReferee(Referee):
    """Declares every match a tie."""

    def run_game(self, players, rows, columns):
        return GameEndReport(winners=[PlayerResult(p, 0) for p in players])


def contestants(count):
    return [Contestant(f"p{i}", age=i) for i in range(1, count + 1)]


def group_names(groups):
    return [[p.name for p in group] for group in groups]


class TestAllocation:
    """Splitting contestants into groups."""

    def test_even_split(self):
        """Eight players make two full groups."""
        groups = TournamentManager().allocate_players_to_games(contestants(8))
        assert [len(g) for g in groups] == [4, 4]

    def test_small_remainder_is_redistributed(self):
        """A lone leftover takes back the previous group and groups shrink."""
        groups = TournamentManager().allocate_players_to_games(contestants(5))
        assert group_names(groups) == [["p1", "p2", "p5"], ["p3", "p4"]]

    def test_nine_players(self):
        """Only the group before the leftover shrinks."""
        groups = TournamentManager().allocate_players_to_games(contestants(9))
        assert [len(g) for g in groups] == [4, 3, 2]

    def test_six_players(self):
        """A remainder of two is a valid group."""
        groups = TournamentManager().allocate_players_to_games(contestants(6))
        assert [len(g) for g in groups] == [4, 2]

    def test_single_player(self):
        """A single contestant forms a single group."""
        groups = TournamentManager().allocate_players_to_games(contestants(1))
        assert group_names(groups) == [["p1"]]

    def test_groups_sorted_by_age_then_name(self):
        """Groups are ordered youngest first, then by name."""
        players = [Contestant("zed", 3), Contestant("amy", 3), Contestant("kid", 1)]
        assert [p.name for p in sort_players(players)] == ["kid", "amy", "zed"]


class TestTournament:
    """Rounds and stop conditions."""

    def test_knockout(self):
        """Winners advance until a final match decides the tournament."""
        manager = TournamentManager(referee=FirstPlayerWinsReferee())
        result = manager.run_tournament(contestants(8))
        assert [p.name for p in result.winners] == ["p1"]
        assert len(result.losers) == 7
        assert result.rounds == 2

    def test_too_few_contestants(self):
        """Fewer than the minimum plays no rounds."""
        manager = TournamentManager(referee=FirstPlayerWinsReferee())
        result = manager.run_tournament(contestants(1))
        assert [p.name for p in result.winners] == ["p1"]
        assert result.rounds == 0

    def test_stalled_round_stops(self):
        """A round without eliminations ends the tournament."""
        manager = TournamentManager(referee=EveryoneWinsReferee())
        result = manager.run_tournament(contestants(8))
        assert len(result.winners) == 8
        assert result.rounds == 1

    def test_parallel_rounds_keep_group_order(self):
        """Games run in parallel still report in group order."""
        manager = TournamentManager(
            referee=FirstPlayerWinsReferee(),
            settings=TournamentSettings(max_parallel_games=3),
        )
        round_result = manager.play_round(contestants(12))
        assert [p.name for p in round_result.remaining_players] == ["p1", "p5", "p9"]

    def test_house_players_tournament(self):
        """A real tournament of house players finishes with a winner."""
        players = [HousePlayer(f"h{i}", age=i, depth=1) for i in range(5)]
        result = TournamentManager().run_tournament(players)
        assert result.winners
        assert not result.kicked_players
        assert len(result.winners) + len(result.losers) == 5


class TestResults:
    """Telling players how the tournament went."""

    def test_winner_accepts(self):
        """A winner that accepts stays a winner and losers are told."""
        players = contestants(4)
        manager = TournamentManager(referee=FirstPlayerWinsReferee())
        result = manager.run_tournament_with_results(players)
        assert [p.name for p in result.winners] == ["p1"]
        assert players[0].result is True
        for loser in players[1:]:
            assert loser.told.wait(timeout=2.0)
            assert loser.result is False

    def test_refusing_winner_becomes_loser(self):
        """A winner answering False is moved to the losers."""
        players = contestants(4)
        players[0].accept = False
        manager = TournamentManager(referee=FirstPlayerWinsReferee())
        result = manager.run_tournament_with_results(players)
        assert result.winners == []
        assert players[0] in result.losers

    def test_slow_winner_becomes_loser(self):
        """A winner that does not answer in time is moved to the losers."""
        players = contestants(2)
        players[0].delay = 0.5
        manager = TournamentManager(
            referee=FirstPlayerWinsReferee(),
            settings=TournamentSettings(result_timeout=0.05),
        )
        result = manager.run_tournament_with_results(players)
        assert result.winners == []
        assert [p.name for p in result.losers] == ["p2", "p1"]

    def test_loser_notices_do_not_hold_the_process(self):
        """Loser notices run on daemon threads and are not awaited."""
        loser = Contestant("slowpoke", delay=0.5)
        TournamentManager().tell_players_they_lost([loser])
        workers = [t for t in threading.enumerate() if t.name == "hexfish-loser-slowpoke"]
        assert workers
        assert all(t.daemon for t in workers)
        assert loser.told.wait(timeout=2.0)
        assert loser.result is False


@pytest.mark.parametrize("count", [2, 3, 4])
def test_final_round_for_small_fields(count):
    """A field that fits one match plays exactly one round."""
    manager = TournamentManager(referee=FirstPlayerWinsReferee())
    result = manager.run_tournament(contestants(count))
    assert result.rounds == 1
