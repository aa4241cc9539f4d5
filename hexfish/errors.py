"""
Error hierarchy for HexFish.

Errors fall into five groups:
1. Structural errors (bad board or settings) - surfaced to the caller
2. Out-of-range positions - a rule violation when a player sends them
3. Semantic violations (holes, unreachable moves, occupied tiles)
4. Actor failures (a player raised or timed out)
5. Search contract errors (no move when one was assumed)

The referee converts groups 2-4 into ejections. Groups 1 and 5 propagate.
"""

from __future__ import annotations
from typing import Any


class HexFishError(Exception):
    """Base class for all HexFish errors."""
    code: str = "HEXFISH_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"


# =============================================================================
# Structural errors
# =============================================================================

class BoardConstructionError(HexFishError):
    """Board parameters are malformed (dimensions, fish, holes, capacity)."""
    code = "BOARD_CONSTRUCTION"


class ConfigurationError(HexFishError):
    """A referee or tournament was set up with unusable arguments."""
    code = "CONFIGURATION"


# =============================================================================
# Position errors
# =============================================================================

class PositionError(HexFishError):
    """A position does not resolve to an active tile."""
    code = "POSITION"


class InvalidCoordinateError(PositionError):
    """Row or column is not a natural number."""
    code = "INVALID_COORDINATE"


class OutOfBoundsError(PositionError):
    """Row or column lies outside the board."""
    code = "OUT_OF_BOUNDS"


class HoleError(PositionError):
    """The position is in range but refers to a hole."""
    code = "HOLE"


# =============================================================================
# Rule violations
# =============================================================================

class RuleViolationError(HexFishError):
    """A proposed action breaks the rules of the game."""
    code = "RULE_VIOLATION"


class IllegalPlacementError(RuleViolationError):
    """A penguin cannot be placed at the proposed position."""
    code = "ILLEGAL_PLACEMENT"


class IllegalMoveError(RuleViolationError):
    """A penguin cannot make the proposed move."""
    code = "ILLEGAL_MOVE"


# =============================================================================
# Actor errors
# =============================================================================

class ActorError(HexFishError):
    """A player raised while answering the referee."""
    code = "ACTOR_ERROR"


class ActorTimeoutError(ActorError):
    """A player did not answer within its time budget."""
    code = "ACTOR_TIMEOUT"

    def __init__(self, message: str, timeout: float | None = None):
        super().__init__(message, context={"timeout": timeout} if timeout is not None else None)
        self.timeout = timeout


# =============================================================================
# Search errors
# =============================================================================

class NoLegalMoveError(HexFishError):
    """Search was asked for a move but the team on duty cannot move."""
    code = "NO_LEGAL_MOVE"


class NoPlacementAvailableError(HexFishError):
    """Every tile on the board is a hole or already occupied."""
    code = "NO_PLACEMENT_AVAILABLE"


#: Errors a referee treats as a rule violation by the acting player.
EJECTION_ERRORS = (PositionError, RuleViolationError, ActorError)
