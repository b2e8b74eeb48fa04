"""
Game meta extractor: box-score header -> GameMeta.

Reads ``header.competitions[0]`` for the game date, status and the two
competitors, and produces one TeamGameInfo per team abbreviation with the
opponent linked in. The scoreboard carries the same competition block per
event, so ``extract_scoreboard_games`` reuses the same decode.

Header blocks are decoded through the schemas below; any shape they reject
becomes a BoxscoreShapeError, so a bad game is skipped rather than crashing
the run.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..core.models import GameMeta, TeamGameInfo
from ..core.types import GameStatus
from ..providers.base import BoxscoreShapeError
from .categories import coerce_id
from .parsers import to_int

logger = logging.getLogger(__name__)

_DATETIME = TypeAdapter(datetime)
_DATE = TypeAdapter(date)


# =============================================================================
# Header schemas
# =============================================================================


class _HeaderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class StatusType(_HeaderModel):
    state: Optional[str] = None
    completed: bool = False
    short_detail: Optional[str] = Field(default=None, alias="shortDetail")


class StatusBlock(_HeaderModel):
    type: Optional[StatusType] = None


class CompetitorTeam(_HeaderModel):
    abbreviation: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")


class CompetitorBlock(_HeaderModel):
    home_away: Optional[str] = Field(default=None, alias="homeAway")
    score: Any = None
    team: Optional[CompetitorTeam] = None


class CompetitionBlock(_HeaderModel):
    id: Optional[str] = None
    date: Any = None
    status: Any = None
    competitors: list[Any] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return coerce_id(value)

    @field_validator("competitors", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class HeaderBlock(_HeaderModel):
    """``header`` of a game package, or one ``events[]`` entry of the scoreboard."""

    id: Optional[str] = None
    competitions: list[Any] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return coerce_id(value)

    @field_validator("competitions", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def _decode(model: type[BaseModel], raw: Any, what: str) -> Any:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise BoxscoreShapeError(f"Malformed {what}: {e.errors()[0]['msg']}") from e


# =============================================================================
# Extraction
# =============================================================================


def parse_game_date(raw: Any) -> date:
    """Truncate a provider UTC instant (e.g. "2025-12-07T18:00Z") to its calendar date."""
    if not raw:
        raise BoxscoreShapeError("Competition has no date")
    try:
        instant = _DATETIME.validate_python(raw)
    except ValidationError:
        try:
            return _DATE.validate_python(raw)
        except ValidationError as e:
            raise BoxscoreShapeError(f"Unparseable competition date {raw!r}") from e
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc).date()


def resolve_status(status_block: Any) -> tuple[GameStatus, Optional[str]]:
    """
    Map the provider status block to (status, clock_text).

    ``state == "in"`` wins over ``completed``; clock text is only kept while
    the game is in progress.

    Raises:
        BoxscoreShapeError: If the block is not shaped like a status
    """
    if status_block is None:
        return GameStatus.scheduled, None
    status_type = _decode(StatusBlock, status_block, "status block").type or StatusType()

    if status_type.state == "in":
        return GameStatus.in_progress, status_type.short_detail or None
    if status_type.completed:
        return GameStatus.final, None
    return GameStatus.scheduled, None


def _team_info(game_id: str, raw: Any) -> Optional[TeamGameInfo]:
    try:
        competitor = CompetitorBlock.model_validate(raw)
    except ValidationError as e:
        logger.warning("Game %s: skipping malformed competitor: %s", game_id, e.errors()[0]["msg"])
        return None
    team = competitor.team or CompetitorTeam()
    if not team.abbreviation:
        logger.warning("Game %s: competitor without team abbreviation skipped", game_id)
        return None
    return TeamGameInfo(
        team_abbr=team.abbreviation,
        team_name=team.display_name,
        is_home=competitor.home_away == "home",
        team_score=to_int(competitor.score),
    )


def _link_opponents(first: TeamGameInfo, second: TeamGameInfo) -> None:
    first.opponent_abbr = second.team_abbr
    first.opponent_name = second.team_name
    first.opponent_score = second.team_score

    second.opponent_abbr = first.team_abbr
    second.opponent_name = first.team_name
    second.opponent_score = first.team_score


def _meta_from_header(header: HeaderBlock, what: str) -> GameMeta:
    if not header.competitions:
        raise BoxscoreShapeError(f"{what} has no competitions")
    competition = _decode(CompetitionBlock, header.competitions[0], f"{what} competition")

    game_id = header.id or competition.id
    if not game_id:
        raise BoxscoreShapeError(f"{what} has no id")

    status, clock_text = resolve_status(competition.status)

    infos = []
    for raw in competition.competitors:
        info = _team_info(game_id, raw)
        if info is not None:
            infos.append(info)

    if len(competition.competitors) != 2:
        logger.warning(
            "Game %s has %d competitors; opponent linkage left unset",
            game_id,
            len(competition.competitors),
        )
    elif len(infos) != 2:
        logger.warning(
            "Game %s: only %d of 2 competitors usable; opponent linkage left unset",
            game_id,
            len(infos),
        )
    else:
        _link_opponents(infos[0], infos[1])

    return GameMeta(
        game_id=game_id,
        game_date=parse_game_date(competition.date),
        status=status,
        clock_text=clock_text,
        teams={info.team_abbr: info for info in infos},
    )


def extract_game_meta(package: Mapping[str, Any]) -> GameMeta:
    """
    Build the canonical game record from a provider game package.

    Args:
        package: The ``gamepackageJSON`` block (needs ``header``)

    Raises:
        BoxscoreShapeError: If the header, competition, or date is missing or malformed
    """
    if not isinstance(package, Mapping) or package.get("header") is None:
        raise BoxscoreShapeError("Game package has no header")
    header = _decode(HeaderBlock, package["header"], "game header")
    return _meta_from_header(header, "Game header")


def extract_scoreboard_games(scoreboard: Any) -> list[GameMeta]:
    """
    One GameMeta per scoreboard event, in provider order.

    Events that fail to decode are logged and skipped.
    """
    events = scoreboard.get("events") if isinstance(scoreboard, Mapping) else None
    if not isinstance(events, list):
        logger.warning("Scoreboard has no events list")
        return []

    games = []
    for index, raw_event in enumerate(events):
        try:
            event = _decode(HeaderBlock, raw_event, f"scoreboard event #{index}")
            games.append(_meta_from_header(event, f"Scoreboard event #{index}"))
        except BoxscoreShapeError as e:
            logger.warning("Skipping scoreboard event #%d: %s", index, e)
    return games
