"""
Engine Core - immutable game model and rules.

The engine is the rules layer that:
1. Models positions, spaces and boards
2. Tracks penguin teams, scores and the turn pointer
3. Enumerates and validates hex slides
4. Expands the game tree for search
"""

from .position import Position
from .space import HOLE, Hole, Space, Tile
from .board import (
    Board,
    add_holes,
    create_board,
    create_board_no_holes,
    create_board_with_minimum_one_fish_tiles,
    get_tile,
    remove_tile,
    validate_tile,
)
from .state import GameColor, GameState, Penguin, PenguinTeam, create_game_state
from .moves import (
    DIRECTIONS,
    Direction,
    Move,
    can_any_penguin_move,
    can_team_move,
    get_all_destinations,
    is_valid_move,
    legal_moves,
    move_penguin,
    move_sort_key,
    move_tie_breaker,
)
from .game_tree import (
    SKIP,
    Action,
    GameTree,
    Skip,
    expand,
    expand_layer,
    generate_children,
    generate_whole_tree,
    has_more_states,
)

__all__ = [
    "Position",
    "HOLE",
    "Hole",
    "Space",
    "Tile",
    "Board",
    "add_holes",
    "create_board",
    "create_board_no_holes",
    "create_board_with_minimum_one_fish_tiles",
    "get_tile",
    "remove_tile",
    "validate_tile",
    "GameColor",
    "GameState",
    "Penguin",
    "PenguinTeam",
    "create_game_state",
    "DIRECTIONS",
    "Direction",
    "Move",
    "can_any_penguin_move",
    "can_team_move",
    "get_all_destinations",
    "is_valid_move",
    "legal_moves",
    "move_penguin",
    "move_sort_key",
    "move_tie_breaker",
    "SKIP",
    "Action",
    "GameTree",
    "Skip",
    "expand",
    "expand_layer",
    "generate_children",
    "generate_whole_tree",
    "has_more_states",
]
