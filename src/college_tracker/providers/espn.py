"""
ESPN NFL client.

Provides box scores, the scoreboard, teams, and rosters from ESPN's public
endpoints:
    - https://cdn.espn.com/core/nfl/boxscore?xhr=1&gameId={gameId}
    - https://site.api.espn.com/apis/site/v2/sports/football/nfl/scoreboard
    - https://site.api.espn.com/apis/site/v2/sports/football/nfl/teams
    - https://site.api.espn.com/apis/site/v2/sports/football/nfl/teams/{id}/roster
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.config import Settings
from ..core.http import ExternalAPIError, InvalidResponseError, JsonApiClient, RetryPolicy
from ..core.models import BaselinePlayer
from .base import BoxscoreShapeError, DataProviderProtocol, ProviderHTTPError

logger = logging.getLogger(__name__)


class EspnClient(JsonApiClient, DataProviderProtocol):
    """ESPN NFL API client."""

    provider_name = "espn"
    BASE_URL = "https://site.api.espn.com/apis/site/v2/sports/football/nfl"
    BOXSCORE_URL = "https://cdn.espn.com/core/nfl"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        boxscore_url: str | None = None,
        requests_per_minute: int = 120,
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            base_url=base_url,
            headers={"Accept": "application/json"},
            requests_per_minute=requests_per_minute,
            timeout=timeout,
            retry=RetryPolicy(attempts=max_retries),
            transport=transport,
        )
        self._boxscore_url = (boxscore_url or self.BOXSCORE_URL).rstrip("/")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "EspnClient":
        return cls(
            base_url=settings.espn_site_url,
            boxscore_url=settings.espn_boxscore_url,
            requests_per_minute=settings.requests_per_minute,
            timeout=settings.http_timeout,
            max_retries=settings.http_max_retries,
            transport=transport,
        )

    async def _fetch(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            data = await self.get_json(url, params)
        except InvalidResponseError as e:
            raise BoxscoreShapeError(e.message, resource=url) from e
        except ExternalAPIError as e:
            raise ProviderHTTPError(e.message, resource=url, status_code=e.status_code) from e
        if not isinstance(data, dict):
            raise BoxscoreShapeError(
                f"Expected a JSON object from {url}, got {type(data).__name__}",
                resource=url,
            )
        return data

    # =========================================================================
    # Box scores / Scoreboard
    # =========================================================================

    async def fetch_boxscore(self, game_id: str) -> dict[str, Any]:
        """Return the ``gamepackageJSON`` block for one game."""
        logger.info("Fetching boxscore for game %s", game_id)
        data = await self._fetch(
            f"{self._boxscore_url}/boxscore",
            {"xhr": 1, "gameId": game_id},
        )
        package = data.get("gamepackageJSON")
        if not isinstance(package, dict):
            raise BoxscoreShapeError(
                f"Unexpected ESPN response for game {game_id}: missing gamepackageJSON",
                resource=game_id,
            )
        return package

    async def fetch_scoreboard(self, dates: str | None = None) -> dict[str, Any]:
        """Current week's scoreboard, or the games on ``dates`` (YYYYMMDD)."""
        params = {"dates": dates} if dates else None
        logger.info("Fetching scoreboard%s", f" for {dates}" if dates else "")
        data = await self._fetch("/scoreboard", params)
        if not isinstance(data.get("events"), list):
            raise BoxscoreShapeError("Unexpected ESPN scoreboard: missing events", resource="scoreboard")
        return data

    # =========================================================================
    # Teams / Rosters
    # =========================================================================

    async def fetch_teams(self) -> list[dict[str, Any]]:
        """Get all NFL teams."""
        data = await self._fetch("/teams")
        try:
            entries = data["sports"][0]["leagues"][0]["teams"]
        except (KeyError, IndexError, TypeError) as e:
            raise BoxscoreShapeError("Unexpected ESPN teams payload", resource="teams") from e

        teams = []
        for entry in entries:
            team = (entry or {}).get("team") or {}
            if not team.get("id"):
                continue
            teams.append(
                {
                    "id": str(team["id"]),
                    "name": team.get("displayName"),
                    "abbreviation": team.get("abbreviation"),
                }
            )
        return teams

    async def fetch_team_roster(self, team: dict[str, Any]) -> list[BaselinePlayer]:
        """Get one team's roster as baseline players."""
        data = await self._fetch(f"/teams/{team['id']}/roster")
        players = []
        for group in data.get("athletes") or []:
            for item in (group or {}).get("items") or []:
                player = self._normalize_athlete(item, team)
                if player is not None:
                    players.append(player)
        return players

    def _normalize_athlete(
        self, raw: dict[str, Any], team: dict[str, Any]
    ) -> BaselinePlayer | None:
        if not raw.get("id"):
            return None

        position = raw.get("position")
        if isinstance(position, dict):
            position = position.get("abbreviation")

        college = raw.get("college")
        if isinstance(college, dict):
            college = college.get("text") or college.get("name")

        return BaselinePlayer(
            id=str(raw["id"]),
            name=raw.get("displayName") or raw.get("fullName"),
            position=position or None,
            college=college or None,
            nfl_team=team.get("name"),
            nfl_team_abbr=team.get("abbreviation"),
        )
