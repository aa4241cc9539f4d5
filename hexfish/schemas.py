"""
Pydantic Schemas - serialisable summaries of matches and tournaments.

These models are what the command line prints. They hold names and
numbers only, never live Player objects, so they round-trip through JSON.
"""

from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field

from .engine_core.position import Position
from .engine_core.state import GameState
from .session.manager import TournamentResult
from .session.referee import GameEndReport


# =============================================================================
# Shared Models
# =============================================================================

class PositionModel(BaseModel):
    """A board cell."""
    row: int = Field(ge=0)
    column: int = Field(ge=0)

    model_config = {"from_attributes": True}

    def to_position(self) -> Position:
        return Position(self.row, self.column)


class PlayerScore(BaseModel):
    """A player's name and final score."""
    name: str
    age: int = 0
    score: int = 0


class TeamInfo(BaseModel):
    """One penguin team in a final state."""
    color: str
    score: int
    penguins: list[PositionModel] = Field(default_factory=list)


class BoardInfo(BaseModel):
    """Fish per cell, 0 for holes."""
    rows: int
    columns: int
    fish: list[list[int]]


# =============================================================================
# Result Models
# =============================================================================

class GameEndSummary(BaseModel):
    """Outcome of one match."""
    winners: list[PlayerScore] = Field(default_factory=list)
    losers: list[PlayerScore] = Field(default_factory=list)
    kicked_players: list[str] = Field(default_factory=list)
    turns: Optional[int] = Field(None, description="Actions taken, skips included")
    board: Optional[BoardInfo] = None
    teams: list[TeamInfo] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: GameEndReport) -> GameEndSummary:
        summary = cls(
            winners=[
                PlayerScore(name=r.player.name, age=r.player.age, score=r.score)
                for r in report.winners
            ],
            losers=[
                PlayerScore(name=r.player.name, age=r.player.age, score=r.score)
                for r in report.losers
            ],
            kicked_players=[p.name for p in report.kicked_players],
        )
        if report.final_state is not None:
            summary = summary.model_copy(update=_state_fields(report.final_state))
        return summary


class TournamentSummary(BaseModel):
    """Outcome of a tournament."""
    winners: list[str] = Field(default_factory=list)
    losers: list[str] = Field(default_factory=list)
    kicked_players: list[str] = Field(default_factory=list)
    rounds: int = 0

    @classmethod
    def from_result(cls, result: TournamentResult) -> TournamentSummary:
        return cls(
            winners=[p.name for p in result.winners],
            losers=[p.name for p in result.losers],
            kicked_players=[p.name for p in result.kicked_players],
            rounds=result.rounds,
        )


def _state_fields(state: GameState) -> dict:
    board = state.board
    return {
        "turns": state.turn,
        "board": BoardInfo(
            rows=board.rows,
            columns=board.columns,
            fish=[
                [board.fish_at(Position(row, column)) for column in range(board.columns)]
                for row in range(board.rows)
            ],
        ),
        "teams": [
            TeamInfo(
                color=team.color.name.lower(),
                score=team.score,
                penguins=[PositionModel.model_validate(p) for p in team.positions],
            )
            for team in state.penguin_teams
        ],
    }
