"""
HexFish CLI - run house-player matches and tournaments.

Usage:
    hexfish play --players 3 --rows 5 --columns 5     One match
    hexfish tournament --players 9 --parallel 2       A knock-out tournament

Both commands print a JSON summary on stdout.
"""

import argparse
import logging
import random
import sys

from pydantic import ValidationError

from .bots import HousePlayer
from .config import HEXFISH_LOG_LEVEL, HEXFISH_SEARCH_DEPTH, RefereeSettings, TournamentSettings
from .errors import HexFishError
from .schemas import GameEndSummary, TournamentSummary
from .session import Referee, TournamentManager

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="HexFish - hex tile-capture referee and AI",
        prog="hexfish",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at INFO level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Run one match of house players")
    play_parser.add_argument("--players", type=int, default=2, help="Number of house players")
    play_parser.add_argument("--rows", type=int, default=5, help="Board rows")
    play_parser.add_argument("--columns", type=int, default=5, help="Board columns")
    play_parser.add_argument("--depth", type=int, default=HEXFISH_SEARCH_DEPTH, help="Search depth (default: three levels per team)")
    play_parser.add_argument("--seed", type=int, help="Random seed for the board")
    play_parser.add_argument("--timeout", type=float, help="Seconds per action")

    # Tournament command
    tournament_parser = subparsers.add_parser("tournament", help="Run a knock-out tournament")
    tournament_parser.add_argument("--players", type=int, default=8, help="Number of house players")
    tournament_parser.add_argument("--depth", type=int, default=HEXFISH_SEARCH_DEPTH, help="Search depth (default: three levels per team)")
    tournament_parser.add_argument("--seed", type=int, help="Random seed for the boards")
    tournament_parser.add_argument("--parallel", type=int, default=1, help="Games run at once")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else HEXFISH_LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "play":
            cmd_play(args)
        elif args.command == "tournament":
            cmd_tournament(args)
        else:
            parser.print_help()
            sys.exit(1)
    except (HexFishError, ValidationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def make_house_players(count: int, depth: int | None) -> list[HousePlayer]:
    """House players named player-1.. with increasing ages."""
    return [HousePlayer(f"player-{i + 1}", age=i, depth=depth) for i in range(count)]


def cmd_play(args):
    """Run one match and print its summary."""
    overrides = {} if args.timeout is None else {"action_timeout": args.timeout}
    referee = Referee(RefereeSettings.from_env(**overrides), rng=random.Random(args.seed))
    players = make_house_players(args.players, args.depth)
    report = referee.run_game(players, args.rows, args.columns)
    print(GameEndSummary.from_report(report).model_dump_json(indent=2))


def cmd_tournament(args):
    """Run a tournament and print its summary."""
    settings = TournamentSettings(max_parallel_games=args.parallel)
    referee = Referee(
        RefereeSettings.from_env(min_players=settings.min_players, max_players=settings.max_players),
        rng=random.Random(args.seed),
    )
    manager = TournamentManager(referee=referee, settings=settings)
    players = make_house_players(args.players, args.depth)
    logger.info("Starting tournament with %d players", len(players))
    result = manager.run_tournament_with_results(players)
    print(TournamentSummary.from_result(result).model_dump_json(indent=2))


if __name__ == "__main__":
    main()
