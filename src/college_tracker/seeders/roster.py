"""
Roster seeding.

Two steps, both safe to re-run:
    1) RosterSeeder: fetch every NFL team's roster and replace allPlayers.json
    2) seed_player_documents: create an empty players/<id>.json for every
       roster entry that has no document yet (existing documents are kept)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from ..core.models import BaselinePlayer
from ..providers.base import DataProviderProtocol, ProviderError
from ..store.players import PlayerStore
from ..store.roster import RosterStore
from .utils import run_parallel_batches

logger = logging.getLogger(__name__)


@dataclass
class RosterSeedResult:
    """Result of a roster snapshot rebuild."""
    teams: int = 0
    players: int = 0
    duplicates: int = 0
    failed_teams: list[str] = field(default_factory=list)


@dataclass
class PlayerSeedResult:
    """Result of seeding empty player documents."""
    created: int = 0
    existing: int = 0


class RosterSeeder:
    """
    Builds the roster snapshot from the provider's team and roster endpoints.

    Usage:
        async with get_provider(settings) as provider:
            seeder = RosterSeeder(provider, RosterStore(settings.roster_path))
            result = await seeder.seed()
    """

    def __init__(
        self,
        provider: DataProviderProtocol,
        roster_store: RosterStore,
        batch_size: int = 5,
        batch_delay: float = 0.5,
    ):
        self.provider = provider
        self.roster_store = roster_store
        self.batch_size = batch_size
        self.batch_delay = batch_delay

    async def seed(self) -> RosterSeedResult:
        """
        Fetch all rosters and replace the snapshot.

        Teams whose roster fetch fails are logged and left out. When no player
        at all could be fetched the existing snapshot is kept.

        Raises:
            ProviderError: If the team list cannot be fetched or every roster failed
        """
        result = RosterSeedResult()

        teams = await self.provider.fetch_teams()
        result.teams = len(teams)
        logger.info("Fetching rosters for %d teams", len(teams))

        fetched = await run_parallel_batches(
            teams,
            self.provider.fetch_team_roster,
            batch_size=self.batch_size,
            delay_between_batches=self.batch_delay,
        )

        players: dict[str, BaselinePlayer] = {}
        for team, roster, error in fetched:
            label = _team_label(team)
            if error is not None:
                logger.error("Roster fetch failed for %s: %s", label, error)
                result.failed_teams.append(label)
                continue
            logger.info("-> %s: %d players", label, len(roster))
            for player in roster:
                if player.id in players:
                    result.duplicates += 1
                    continue
                players[player.id] = player

        if not players:
            raise ProviderError("No roster entries fetched; keeping existing snapshot")

        result.players = self.roster_store.save(players.values())
        if result.duplicates:
            logger.warning("Dropped %d duplicate roster entries", result.duplicates)
        return result


def _team_label(team: dict[str, Any]) -> str:
    return team.get("abbreviation") or team.get("name") or str(team.get("id"))


def seed_player_documents(
    roster: Iterable[BaselinePlayer],
    player_store: PlayerStore,
) -> PlayerSeedResult:
    """Create an empty document for each roster player that has none."""
    result = PlayerSeedResult()
    for baseline in roster:
        if player_store.seed(baseline):
            result.created += 1
        else:
            result.existing += 1

    logger.info(
        "Created %d player documents (%d already existed)",
        result.created,
        result.existing,
    )
    return result
