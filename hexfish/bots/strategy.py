"""
Strategy - placement scan and fixed-depth minimax search.

Placement: the first free tile in row-major order.

Movement: minimax over the game tree, counting every individual action
(skips included) as one level.
- At the depth limit or a terminal state the value is the searching
  team's current score
- The searching team maximises, every opponent minimises
- A forced skip is always taken
- Ties go to the move with the smaller origin (row, then column), then the
  smaller destination

No pruning: the whole bounded tree is visited, so the chosen move is fully
determined by the state and the depth.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..engine_core.game_tree import SKIP, Action, generate_children
from ..engine_core.moves import Move
from ..engine_core.position import Position
from ..engine_core.state import GameState
from ..errors import NoLegalMoveError, NoPlacementAvailableError


@dataclass(frozen=True)
class SearchResult:
    """Value of a searched state and the principal line leading to it."""
    score: int
    path: tuple[Action, ...] = ()

    @property
    def first_action(self) -> Action | None:
        return self.path[0] if self.path else None


def penguin_placement(state: GameState) -> Position:
    """
    First unoccupied tile scanning rows top to bottom, columns left to right.

    Raises:
        NoPlacementAvailableError: every tile is a hole or occupied
    """
    for position in state.board.tile_positions():
        if not state.is_occupied(position):
            return position
    raise NoPlacementAvailableError("No free tile left for a penguin")


def _prefer(candidate: Move, score: int, best: Move | None, best_score: int, maximize: bool) -> bool:
    if best is None:
        return True
    if score != best_score:
        return score > best_score if maximize else score < best_score
    return candidate.sort_key() < best.sort_key()


def _search(state: GameState, levels: int, root: int) -> SearchResult:
    if levels == 0:
        return SearchResult(score=state.penguin_teams[root].score)

    children = generate_children(state)
    if not children:
        return SearchResult(score=state.penguin_teams[root].score)

    first_action, first_node = children[0]
    if first_action is SKIP:
        below = _search(first_node.state, levels - 1, root)
        return SearchResult(score=below.score, path=(SKIP,) + below.path)

    maximize = state.players_turn == root
    best_move: Move | None = None
    best: SearchResult | None = None
    for move, node in children:
        below = _search(node.state, levels - 1, root)
        if _prefer(move, below.score, best_move, best.score if best else 0, maximize):
            best_move, best = move, below

    return SearchResult(score=best.score, path=(best_move,) + best.path)


def minimax_path(state: GameState, levels: int, team_index: int | None = None) -> SearchResult:
    """
    Search levels actions ahead on behalf of a team (default: the team on duty).

    Returns the backed-up score and the line of play that achieves it.
    """
    if levels < 0:
        raise ValueError("Search depth must be a natural number")
    if not state.penguin_teams:
        return SearchResult(score=0)
    root = state.players_turn if team_index is None else team_index
    return _search(state, levels, root)


def minimax_move(state: GameState, levels: int) -> Move:
    """
    Best move for the team on duty searching levels actions ahead.

    Raises:
        ValueError: levels < 1
        NoLegalMoveError: the team on duty cannot move
    """
    if levels < 1:
        raise ValueError("Must search at least one level")
    action = minimax_path(state, levels).first_action
    if not isinstance(action, Move):
        raise NoLegalMoveError(
            "The team on duty has no legal move",
            context={"players_turn": state.players_turn},
        )
    return action
