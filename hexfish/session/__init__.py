"""
Session - running matches and tournaments against untrusted players.

Contains:
- Player: the interface every participant implements
- ActorProxy: ordered, time-bounded calls into one player
- Referee: one match from setup to report
- TournamentManager: knock-out rounds of referee matches
"""

from .player import Player
from .actor import ActorProxy, call_with_timeout, run_detached
from .referee import (
    GameEndReport,
    PlayerResult,
    Referee,
    RefereePhase,
    construct_board,
    create_board_for_players,
    get_number_of_holes,
)
from .manager import RoundResult, TournamentManager, TournamentResult, sort_players

__all__ = [
    "Player",
    "ActorProxy",
    "call_with_timeout",
    "run_detached",
    "GameEndReport",
    "PlayerResult",
    "Referee",
    "RefereePhase",
    "construct_board",
    "create_board_for_players",
    "get_number_of_holes",
    "RoundResult",
    "TournamentManager",
    "TournamentResult",
    "sort_players",
]
