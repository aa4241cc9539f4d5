"""
Bots - built-in decision making.

Contains:
- strategy: row-major placement and fixed-depth minimax
- house_player: a Player driven by that strategy
"""

from .strategy import SearchResult, minimax_move, minimax_path, penguin_placement
from .house_player import HousePlayer

__all__ = [
    "SearchResult",
    "minimax_move",
    "minimax_path",
    "penguin_placement",
    "HousePlayer",
]
