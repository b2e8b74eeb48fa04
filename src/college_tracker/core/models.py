"""
Pydantic models for every persisted document.

These models are used for:
- Validating documents read back from the data directory
- Building canonical stat records from normalized box scores
- Serializing documents with the camelCase keys the read layer expects

All models accept snake_case or camelCase input. Use ``to_document()`` to get
the on-disk JSON shape.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .types import FREE_AGENT, UNKNOWN_PLAYER_NAME, UNKNOWN_POSITION, GameStatus, StatGroup


class DocumentModel(BaseModel):
    """Base for models serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready dict written to disk."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Stat Groups
# =============================================================================


class PassingStats(DocumentModel):
    completions: int = 0
    attempts: int = 0
    yards: int = 0
    touchdowns: int = 0
    interceptions: int = 0


class RushingStats(DocumentModel):
    attempts: int = 0
    yards: int = 0
    touchdowns: int = 0


class ReceivingStats(DocumentModel):
    receptions: int = 0
    yards: int = 0
    touchdowns: int = 0


class DefenseStats(DocumentModel):
    tackles: int = 0
    sacks: float = 0.0
    interceptions: int = 0


class KickingStats(DocumentModel):
    field_goals_made: int = 0
    field_goals_attempted: int = 0
    extra_points_made: int = 0
    extra_points_attempted: int = 0


class ReturnStats(DocumentModel):
    count: int = 0
    yards: int = 0
    touchdowns: int = 0


class StatBundle(DocumentModel):
    """
    One player's canonical stats for one game.

    A group is None when the player did not appear in that provider category,
    which is different from appearing with zero production.
    """

    passing: Optional[PassingStats] = None
    rushing: Optional[RushingStats] = None
    receiving: Optional[ReceivingStats] = None
    defense: Optional[DefenseStats] = None
    kicking: Optional[KickingStats] = None
    returns: Optional[ReturnStats] = None

    def is_empty(self) -> bool:
        """Whether every group is absent."""
        return all(getattr(self, group.value) is None for group in StatGroup)


# =============================================================================
# Game Records
# =============================================================================


class TeamGameInfo(DocumentModel):
    """One competitor's view of a game, keyed by team abbreviation in GameMeta."""

    team_abbr: str
    team_name: Optional[str] = None
    is_home: bool = False
    team_score: int = 0
    opponent_abbr: Optional[str] = None
    opponent_name: Optional[str] = None
    opponent_score: Optional[int] = None


class GameMeta(DocumentModel):
    """Canonical game header extracted from a box score."""

    game_id: str
    game_date: date = Field(alias="date")
    status: GameStatus = GameStatus.scheduled
    clock_text: Optional[str] = None
    teams: dict[str, TeamGameInfo] = Field(default_factory=dict)


class GameLog(DocumentModel):
    """A player's participation in one game."""

    game_id: str
    game_date: date = Field(alias="date")
    team_abbr: str
    opponent_abbr: Optional[str] = None
    opponent_name: Optional[str] = None
    is_home: bool = False
    team_score: int = 0
    opponent_score: Optional[int] = None
    status: GameStatus = GameStatus.scheduled
    clock_text: Optional[str] = None
    production_score: float = 0.0
    player_stats: StatBundle = Field(default_factory=StatBundle)

    @field_validator("production_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> float:
        if isinstance(value, bool):
            return 0.0
        if isinstance(value, (int, float)):
            return float(value)
        return 0.0


# =============================================================================
# Players
# =============================================================================


class BaselinePlayer(DocumentModel):
    """Roster snapshot entry used to initialise a player document."""

    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    position: Optional[str] = None
    college: Optional[str] = None
    nfl_team: Optional[str] = None
    nfl_team_abbr: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value


class Player(DocumentModel):
    """Per-player document owned by the player store."""

    id: str = Field(..., min_length=1)
    name: str = UNKNOWN_PLAYER_NAME
    college: Optional[str] = None
    college_slug: Optional[str] = None
    position: Optional[str] = None
    nfl_team: Optional[str] = None
    nfl_team_abbr: Optional[str] = None
    last_game_id: Optional[str] = None
    game_logs: dict[str, GameLog] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _last_game_is_logged(self) -> "Player":
        if self.last_game_id is not None and self.last_game_id not in self.game_logs:
            raise ValueError(
                f"lastGameId {self.last_game_id!r} has no entry in gameLogs"
            )
        return self

    @property
    def last_game(self) -> Optional[GameLog]:
        if self.last_game_id is None:
            return None
        return self.game_logs.get(self.last_game_id)


# =============================================================================
# Aggregates
# =============================================================================


class PlayerSummary(DocumentModel):
    """Denormalized player entry inside a college aggregate."""

    id: str
    name: str = UNKNOWN_PLAYER_NAME
    position: str = UNKNOWN_POSITION
    nfl_team: str = FREE_AGENT
    last_game: Optional[GameLog] = None


class CollegeAggregate(DocumentModel):
    """All tracked players from one college."""

    college: str
    slug: str
    conference: str
    group: str
    players: list[PlayerSummary] = Field(default_factory=list)

    @property
    def player_count(self) -> int:
        return len(self.players)


class ConferenceEntry(DocumentModel):
    college: str
    slug: str
    player_count: int


class TopSchool(DocumentModel):
    college: str
    slug: str
    total_production: float = 0.0
    latest_game_date: Optional[date] = None


class PositionLeader(DocumentModel):
    college: str
    slug: str
    count: int = 0


class HomeSummary(DocumentModel):
    """League-wide homepage document."""

    week: str
    last_updated: datetime
    conference_groups: dict[str, list[ConferenceEntry]] = Field(default_factory=dict)
    top_schools_this_week: list[TopSchool] = Field(default_factory=list)
    position_leaders: dict[str, list[PositionLeader]] = Field(default_factory=dict)


class PositionCollege(DocumentModel):
    """One college's players within a position group."""

    college: str
    slug: str
    players: list[PlayerSummary] = Field(default_factory=list)


class PositionDrilldown(DocumentModel):
    """Colleges with at least one player in a position group, alphabetical."""

    group: str
    colleges: list[PositionCollege] = Field(default_factory=list)


class RunMeta(DocumentModel):
    """Summary of the most recent pipeline run."""

    last_successful_run: datetime
    games_requested: int = 0
    games_updated: int = 0
    players_updated: int = 0
    failed_games: list[str] = Field(default_factory=list)
    aggregates_written: int = 0
