"""
Schemas for the box-score ``players`` block and its stat categories.

The provider sends, per team, a list of category blocks. Each block names the
category, lists its stat keys in order, and gives every athlete a parallel
list of values:

    {"team": {"abbreviation": "MIA"},
     "statistics": [
        {"name": "passing",
         "keys": ["completions/passingAttempts", "passingYards", ...],
         "athletes": [{"athlete": {"id": "4241479"}, "stats": ["21/30", "251", ...]}]}
     ]}

Each recognized category has its own line schema that knows which provider
keys it reads and how it folds them into a StatBundle. Unknown categories
have no schema and are ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.models import (
    DefenseStats,
    KickingStats,
    PassingStats,
    ReceivingStats,
    ReturnStats,
    RushingStats,
    StatBundle,
)
from .parsers import parse_made_attempts, to_float, to_int


def coerce_id(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


# =============================================================================
# Envelope schemas
# =============================================================================


class AthleteRef(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., min_length=1)
    display_name: Optional[str] = Field(default=None, alias="displayName")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return coerce_id(value)


class AthleteLine(BaseModel):
    """One athlete's values inside a category block."""

    model_config = ConfigDict(extra="ignore")

    athlete: AthleteRef
    stats: list[Any] = Field(default_factory=list)

    @field_validator("stats", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class CategoryBlock(BaseModel):
    """A named stat category. Athlete lines are validated one at a time."""

    model_config = ConfigDict(extra="ignore")

    name: str
    keys: list[str] = Field(default_factory=list)
    athletes: list[Any] = Field(default_factory=list)

    @field_validator("keys", "athletes", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class TeamRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    abbreviation: str = Field(..., min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return coerce_id(value)


class TeamStatBlock(BaseModel):
    """One team's list of category blocks."""

    model_config = ConfigDict(extra="ignore")

    team: TeamRef
    statistics: list[Any] = Field(default_factory=list)

    @field_validator("statistics", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# =============================================================================
# Category line schemas
# =============================================================================


class ProviderCategory(str, Enum):
    """Provider category names the normalizer understands."""

    passing = "passing"
    rushing = "rushing"
    receiving = "receiving"
    defensive = "defensive"
    interceptions = "interceptions"
    kicking = "kicking"
    kick_returns = "kickReturns"
    punt_returns = "puntReturns"


class CategoryLine(BaseModel):
    """Base for a zipped key -> value lookup of one category line.

    Field aliases are the provider's key names; unknown keys are dropped.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def apply(self, bundle: StatBundle) -> None:
        raise NotImplementedError


class PassingLine(CategoryLine):
    completions_attempts: Any = Field(default=None, alias="completions/passingAttempts")
    passing_yards: Any = Field(default=None, alias="passingYards")
    passing_touchdowns: Any = Field(default=None, alias="passingTouchdowns")
    interceptions: Any = None

    def apply(self, bundle: StatBundle) -> None:
        completions, attempts = parse_made_attempts(self.completions_attempts)
        bundle.passing = PassingStats(
            completions=completions,
            attempts=attempts,
            yards=to_int(self.passing_yards),
            touchdowns=to_int(self.passing_touchdowns),
            interceptions=to_int(self.interceptions),
        )


class RushingLine(CategoryLine):
    rushing_attempts: Any = Field(default=None, alias="rushingAttempts")
    rushing_yards: Any = Field(default=None, alias="rushingYards")
    rushing_touchdowns: Any = Field(default=None, alias="rushingTouchdowns")

    def apply(self, bundle: StatBundle) -> None:
        bundle.rushing = RushingStats(
            attempts=to_int(self.rushing_attempts),
            yards=to_int(self.rushing_yards),
            touchdowns=to_int(self.rushing_touchdowns),
        )


class ReceivingLine(CategoryLine):
    receptions: Any = None
    receiving_yards: Any = Field(default=None, alias="receivingYards")
    receiving_touchdowns: Any = Field(default=None, alias="receivingTouchdowns")

    def apply(self, bundle: StatBundle) -> None:
        bundle.receiving = ReceivingStats(
            receptions=to_int(self.receptions),
            yards=to_int(self.receiving_yards),
            touchdowns=to_int(self.receiving_touchdowns),
        )


class DefensiveLine(CategoryLine):
    total_tackles: Any = Field(default=None, alias="totalTackles")
    sacks: Any = None

    def apply(self, bundle: StatBundle) -> None:
        # Shares the defense group with InterceptionsLine; only touch our fields.
        if bundle.defense is None:
            bundle.defense = DefenseStats()
        bundle.defense.tackles = to_int(self.total_tackles)
        bundle.defense.sacks = to_float(self.sacks)


class InterceptionsLine(CategoryLine):
    interceptions: Any = None

    def apply(self, bundle: StatBundle) -> None:
        if bundle.defense is None:
            bundle.defense = DefenseStats()
        bundle.defense.interceptions = to_int(self.interceptions)


class KickingLine(CategoryLine):
    field_goals: Any = Field(default=None, alias="fieldGoalsMade/fieldGoalAttempts")
    extra_points: Any = Field(default=None, alias="extraPointsMade/extraPointAttempts")

    def apply(self, bundle: StatBundle) -> None:
        fg_made, fg_attempted = parse_made_attempts(self.field_goals)
        xp_made, xp_attempted = parse_made_attempts(self.extra_points)
        bundle.kicking = KickingStats(
            field_goals_made=fg_made,
            field_goals_attempted=fg_attempted,
            extra_points_made=xp_made,
            extra_points_attempted=xp_attempted,
        )


class _ReturnLine(CategoryLine):
    returns: Any = None
    yards: Any = None
    touchdowns: Any = None

    def apply(self, bundle: StatBundle) -> None:
        # Kick and punt returns both land in one group, so add rather than replace.
        if bundle.returns is None:
            bundle.returns = ReturnStats()
        bundle.returns.count += to_int(self.returns)
        bundle.returns.yards += to_int(self.yards)
        bundle.returns.touchdowns += to_int(self.touchdowns)


class KickReturnsLine(_ReturnLine):
    returns: Any = Field(default=None, alias="kickReturns")
    yards: Any = Field(default=None, alias="kickReturnYards")
    touchdowns: Any = Field(default=None, alias="kickReturnTouchdowns")


class PuntReturnsLine(_ReturnLine):
    returns: Any = Field(default=None, alias="puntReturns")
    yards: Any = Field(default=None, alias="puntReturnYards")
    touchdowns: Any = Field(default=None, alias="puntReturnTouchdowns")


CATEGORY_SCHEMAS: dict[ProviderCategory, type[CategoryLine]] = {
    ProviderCategory.passing: PassingLine,
    ProviderCategory.rushing: RushingLine,
    ProviderCategory.receiving: ReceivingLine,
    ProviderCategory.defensive: DefensiveLine,
    ProviderCategory.interceptions: InterceptionsLine,
    ProviderCategory.kicking: KickingLine,
    ProviderCategory.kick_returns: KickReturnsLine,
    ProviderCategory.punt_returns: PuntReturnsLine,
}


def schema_for(category_name: str) -> type[CategoryLine] | None:
    """Return the line schema for a provider category name, or None if unrecognized."""
    try:
        return CATEGORY_SCHEMAS[ProviderCategory(category_name)]
    except ValueError:
        return None
