"""
HexFish - rules engine, referee and AI for a hex tile-capture game.

Architecture:
- engine_core: immutable board, state, move rules and game tree
- session: player interface, referee, tournament manager
- bots: placement scan and minimax house player
"""

__version__ = "0.1.0"
