"""
Pytest configuration for college-tracker-data tests.

Fixtures build an isolated data directory per test and ESPN-shaped payloads,
so nothing here touches the network or the real data directory.
"""

from __future__ import annotations

from typing import Any, Optional

import pytest

from college_tracker.core.config import Settings
from college_tracker.core.models import BaselinePlayer
from college_tracker.providers.base import DataProviderProtocol, ProviderError
from college_tracker.store.documents import DocumentStore
from college_tracker.store.players import PlayerStore
from college_tracker.store.roster import RosterStore

PASSING_KEYS = [
    "completions/passingAttempts",
    "passingYards",
    "yardsPerPassAttempt",
    "passingTouchdowns",
    "interceptions",
    "sacks-sackYardsLost",
]
RUSHING_KEYS = ["rushingAttempts", "rushingYards", "yardsPerRushAttempt", "rushingTouchdowns", "longRushing"]
RECEIVING_KEYS = ["receptions", "receivingYards", "yardsPerReception", "receivingTouchdowns", "longReception"]
DEFENSIVE_KEYS = ["totalTackles", "soloTackles", "sacks", "tacklesForLoss", "passesDefended"]
INTERCEPTION_KEYS = ["interceptions", "interceptionYards", "interceptionTouchdowns"]
KICKING_KEYS = [
    "fieldGoalsMade/fieldGoalAttempts",
    "fieldGoalPct",
    "longFieldGoalMade",
    "extraPointsMade/extraPointAttempts",
    "totalKickingPoints",
]
KICK_RETURN_KEYS = ["kickReturns", "kickReturnYards", "yardsPerKickReturn", "longKickReturn", "kickReturnTouchdowns"]
PUNT_RETURN_KEYS = ["puntReturns", "puntReturnYards", "yardsPerPuntReturn", "longPuntReturn", "puntReturnTouchdowns"]


# =========================================================================
# Payload builders
# =========================================================================


def make_category(name: str, keys: list[str], lines: dict[str, list[Any]]) -> dict[str, Any]:
    """One category block; ``lines`` maps athlete id -> stat values."""
    return {
        "name": name,
        "keys": keys,
        "athletes": [
            {"athlete": {"id": athlete_id, "displayName": f"Player {athlete_id}"}, "stats": stats}
            for athlete_id, stats in lines.items()
        ],
    }


def make_team_block(abbr: str, categories: list[dict[str, Any]]) -> dict[str, Any]:
    return {"team": {"id": abbr.lower(), "abbreviation": abbr}, "statistics": categories}


def make_competitor(abbr: str, name: str, home_away: str, score: Any) -> dict[str, Any]:
    return {
        "homeAway": home_away,
        "score": score,
        "team": {"abbreviation": abbr, "displayName": name},
    }


def make_scoreboard_event(
    game_id: str = "G1",
    date: str = "2025-12-07T18:00Z",
    state: str = "post",
    completed: bool = True,
    short_detail: Optional[str] = "Final",
    competitors: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    """An event with one competition; also the ``header`` of a game package."""
    if competitors is None:
        competitors = [
            make_competitor("MIA", "Miami Dolphins", "home", "24"),
            make_competitor("NYJ", "New York Jets", "away", "17"),
        ]
    return {
        "id": game_id,
        "competitions": [
            {
                "id": game_id,
                "date": date,
                "status": {
                    "type": {
                        "state": state,
                        "completed": completed,
                        "shortDetail": short_detail,
                    }
                },
                "competitors": competitors,
            }
        ],
    }


def make_package(
    game_id: str = "G1",
    date: str = "2025-12-07T18:00Z",
    state: str = "post",
    completed: bool = True,
    short_detail: Optional[str] = "Final",
    competitors: Optional[list[dict[str, Any]]] = None,
    players: Optional[list[dict[str, Any]]] = None,
) -> dict[str, Any]:
    """A ``gamepackageJSON`` block with a header and box score."""
    return {
        "header": make_scoreboard_event(game_id, date, state, completed, short_detail, competitors),
        "boxscore": {"players": players or []},
    }


# =========================================================================
# Fakes
# =========================================================================


class FakeProvider(DataProviderProtocol):
    """In-memory provider: packages by game id, rosters by team id, one scoreboard."""

    provider_name = "fake"

    def __init__(
        self,
        packages: Optional[dict[str, Any]] = None,
        teams: Optional[list[dict[str, Any]]] = None,
        rosters: Optional[dict[str, list[BaselinePlayer]]] = None,
        scoreboard: Optional[dict[str, Any]] = None,
    ):
        self.packages = packages or {}
        self.teams = teams or []
        self.rosters = rosters or {}
        self.scoreboard = scoreboard
        self.requested: list[str] = []
        self.closed = False

    async def fetch_boxscore(self, game_id: str) -> dict[str, Any]:
        self.requested.append(game_id)
        package = self.packages.get(game_id)
        if isinstance(package, list):
            # Successive snapshots for the same game id
            package = package.pop(0)
        if package is None:
            raise ProviderError(f"HTTP 404 for game {game_id}", resource=game_id)
        return package

    async def fetch_teams(self) -> list[dict[str, Any]]:
        return list(self.teams)

    async def fetch_team_roster(self, team: dict[str, Any]) -> list[BaselinePlayer]:
        roster = self.rosters.get(team["id"])
        if roster is None:
            raise ProviderError(f"No roster for team {team['id']}")
        return roster

    async def fetch_scoreboard(self, dates: Optional[str] = None) -> dict[str, Any]:
        if self.scoreboard is None:
            raise ProviderError("No scoreboard", resource="scoreboard")
        return self.scoreboard

    async def close(self) -> None:
        self.closed = True


# =========================================================================
# Fixtures
# =========================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at an empty per-test data directory."""
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "data",
        batch_size=2,
        batch_delay=0,
        compare_game_dates=False,
        top_schools_limit=10,
    )


@pytest.fixture
def player_store(settings) -> PlayerStore:
    return PlayerStore.from_settings(settings)


@pytest.fixture
def roster_store(settings) -> RosterStore:
    return RosterStore(settings.roster_path)


@pytest.fixture
def documents(settings) -> DocumentStore:
    return DocumentStore.from_settings(settings)


@pytest.fixture
def tua() -> BaselinePlayer:
    return BaselinePlayer(
        id="4241479",
        name="Tua Tagovailoa",
        position="QB",
        college="Alabama",
        nfl_team="Miami Dolphins",
        nfl_team_abbr="MIA",
    )


@pytest.fixture
def garrett() -> BaselinePlayer:
    return BaselinePlayer(
        id="3915416",
        name="Garrett Wilson",
        position="WR",
        college="Ohio State",
        nfl_team="New York Jets",
        nfl_team_abbr="NYJ",
    )
