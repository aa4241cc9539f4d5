"""
Configuration - environment defaults and validated settings models.

Environment variables (read once at import):
- HEXFISH_ACTION_TIMEOUT: seconds a player may take per placement or move
- HEXFISH_NOTIFICATION_TIMEOUT: seconds to wait for notices on shutdown
- HEXFISH_SEARCH_DEPTH: fixed minimax depth for house players (unset:
  three levels per team in the searched state)
- HEXFISH_LOG_LEVEL: log level used by the command line

Settings objects are immutable and validated on construction; invalid
values raise pydantic's ValidationError.
"""

from __future__ import annotations
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .engine_core.state import GameColor

HEXFISH_ACTION_TIMEOUT = float(os.getenv("HEXFISH_ACTION_TIMEOUT", "5.0"))
HEXFISH_NOTIFICATION_TIMEOUT = float(os.getenv("HEXFISH_NOTIFICATION_TIMEOUT", "1.0"))
HEXFISH_SEARCH_DEPTH: int | None = (
    int(os.environ["HEXFISH_SEARCH_DEPTH"]) if os.getenv("HEXFISH_SEARCH_DEPTH") else None
)
HEXFISH_LOG_LEVEL = os.getenv("HEXFISH_LOG_LEVEL", "WARNING")

BASE_TEAM_SIZE = 6
MAX_FISH = 5
LEVELS_PER_TEAM = 3
DEFAULT_COLOR_ORDERING: tuple[GameColor, ...] = (
    GameColor.BLACK,
    GameColor.RED,
    GameColor.WHITE,
    GameColor.BROWN,
)


class RefereeSettings(BaseModel):
    """Limits and palette a referee runs matches with."""
    model_config = ConfigDict(frozen=True)

    action_timeout: float = Field(default=HEXFISH_ACTION_TIMEOUT, gt=0)
    notification_timeout: float = Field(default=HEXFISH_NOTIFICATION_TIMEOUT, gt=0)
    min_players: int = Field(default=2, ge=1)
    max_players: int = Field(default=4, le=4)
    base_team_size: int = Field(default=BASE_TEAM_SIZE, ge=1)
    max_fish: int = Field(default=MAX_FISH, ge=1)
    color_ordering: tuple[GameColor, ...] = DEFAULT_COLOR_ORDERING

    @field_validator("color_ordering")
    @classmethod
    def check_unique_colors(cls, value: tuple[GameColor, ...]) -> tuple[GameColor, ...]:
        if len(set(value)) != len(value):
            raise ValueError("color_ordering must not repeat a colour")
        return value

    @model_validator(mode="after")
    def check_bounds(self) -> RefereeSettings:
        if self.min_players > self.max_players:
            raise ValueError("min_players must not exceed max_players")
        if len(self.color_ordering) < self.max_players:
            raise ValueError("color_ordering needs a colour for every player")
        if self.base_team_size <= self.max_players:
            raise ValueError("base_team_size must leave every player at least one penguin")
        return self

    def team_size(self, number_of_players: int) -> int:
        """Penguins each player places in a game of number_of_players."""
        return self.base_team_size - number_of_players

    @classmethod
    def from_env(cls, **overrides) -> RefereeSettings:
        """Settings seeded from the environment as it is now."""
        values = {
            "action_timeout": float(os.getenv("HEXFISH_ACTION_TIMEOUT", str(HEXFISH_ACTION_TIMEOUT))),
            "notification_timeout": float(
                os.getenv("HEXFISH_NOTIFICATION_TIMEOUT", str(HEXFISH_NOTIFICATION_TIMEOUT))
            ),
        }
        values.update(overrides)
        return cls(**values)


class TournamentSettings(BaseModel):
    """Board size, group size and parallelism for knock-out tournaments."""
    model_config = ConfigDict(frozen=True)

    rows: int = Field(default=5, ge=1)
    columns: int = Field(default=5, ge=1)
    min_players: int = Field(default=2, ge=1)
    max_players: int = Field(default=4, le=4)
    max_parallel_games: int = Field(default=1, ge=1)
    result_timeout: float = Field(default=HEXFISH_NOTIFICATION_TIMEOUT, gt=0)

    @model_validator(mode="after")
    def check_bounds(self) -> TournamentSettings:
        if self.min_players > self.max_players:
            raise ValueError("min_players must not exceed max_players")
        return self
