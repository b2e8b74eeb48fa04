"""
Batch pipeline orchestration.

Game ids come from the caller, a games file, or the provider scoreboard
(``scoreboard_game_ids``).

Pipeline for run_update():
    1) Merge every requested game into the player documents
    2) Rebuild per-college aggregates (aggregates/, indices/)
    3) Rebuild homeSummary.json
    4) Write meta.json describing the run

Each stage is a full, independent pass over the data directory, so any stage
can also be run on its own from the CLI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from .aggregators.colleges import AggregationResult, write_college_aggregates
from .aggregators.summary import write_home_summary
from .core.config import Settings
from .core.models import HomeSummary, RunMeta
from .core.types import GameStatus
from .normalizers.game_meta import extract_scoreboard_games
from .providers import get_provider
from .providers.base import DataProviderProtocol
from .seeders.boxscores import BoxscoreSeeder, GameUpdateResult
from .seeders.roster import PlayerSeedResult, RosterSeeder, RosterSeedResult, seed_player_documents
from .store.documents import DocumentStore
from .store.players import PlayerStore
from .store.roster import RosterStore
from .tables.conferences import DEFAULT_CLASSIFICATION, ClassificationTable
from .tables.positions import DEFAULT_POSITIONS, PositionTable

logger = logging.getLogger(__name__)


def load_game_ids(path: Path) -> list[str]:
    """
    Read game ids from a text file: one id per line, ``#`` starts a comment.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    game_ids = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            game_id = line.split("#", 1)[0].strip().strip(",").strip("\"'")
            if game_id:
                game_ids.append(game_id)
    return game_ids


@dataclass
class UpdateResult:
    """Everything one full update produced."""
    games: GameUpdateResult
    aggregation: AggregationResult
    summary: HomeSummary
    meta: RunMeta


class Pipeline:
    """
    Wires the stores, seeders and builders for one data directory.

    Args:
        settings: Pipeline settings (paths, batching, provider)
        provider: Optional provider; defaults to the ESPN client from settings
        classification: College classification table
        positions: Position group table
    """

    def __init__(
        self,
        settings: Settings,
        provider: Optional[DataProviderProtocol] = None,
        classification: ClassificationTable = DEFAULT_CLASSIFICATION,
        positions: PositionTable = DEFAULT_POSITIONS,
    ):
        self.settings = settings
        self._provider = provider
        self.classification = classification
        self.positions = positions

        self.roster_store = RosterStore(settings.roster_path)
        self.player_store = PlayerStore.from_settings(settings, classification)
        self.documents = DocumentStore.from_settings(settings)

    @property
    def provider(self) -> DataProviderProtocol:
        if self._provider is None:
            self._provider = get_provider(self.settings)
        return self._provider

    async def close(self) -> None:
        if self._provider is not None:
            await self._provider.close()

    async def __aenter__(self) -> "Pipeline":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Stages
    # =========================================================================

    async def seed_roster(self) -> RosterSeedResult:
        seeder = RosterSeeder(
            self.provider,
            self.roster_store,
            batch_size=self.settings.batch_size,
            batch_delay=self.settings.batch_delay,
        )
        return await seeder.seed()

    def seed_players(self) -> PlayerSeedResult:
        return seed_player_documents(self.roster_store.load(), self.player_store)

    async def scoreboard_game_ids(self, live_only: bool = False, dates: Optional[str] = None) -> list[str]:
        """
        Discover game ids from the provider scoreboard and snapshot it to scoreboard.json.

        Scheduled games are never returned: they have no box score yet and
        merging them would give every rostered player an empty log.

        Args:
            live_only: Only return games currently in progress
            dates: Provider date filter (``YYYYMMDD``); None means the current week

        Raises:
            ProviderError: If the scoreboard cannot be fetched
        """
        payload = await self.provider.fetch_scoreboard(dates)
        games = extract_scoreboard_games(payload)
        self.documents.write_scoreboard(games)

        wanted = {GameStatus.in_progress} if live_only else {GameStatus.in_progress, GameStatus.final}
        game_ids = [game.game_id for game in games if game.status in wanted]
        logger.info(
            "Scoreboard: %d games, %d %s",
            len(games),
            len(game_ids),
            "in progress" if live_only else "started or finished",
        )
        return game_ids

    async def update_games(self, game_ids: Sequence[str]) -> GameUpdateResult:
        """
        Merge games into player documents.

        Raises:
            RosterNotFoundError: If the roster snapshot is missing
        """
        roster = self.roster_store.load()
        seeder = BoxscoreSeeder(
            self.provider,
            self.player_store,
            batch_size=self.settings.batch_size,
            batch_delay=self.settings.batch_delay,
        )
        return await seeder.update_players_from_games(game_ids, roster)

    def aggregate(self) -> AggregationResult:
        return write_college_aggregates(
            self.roster_store,
            self.player_store,
            self.documents,
            self.classification,
        )

    def build_summary(self, now: Optional[datetime] = None) -> HomeSummary:
        return write_home_summary(
            self.documents,
            self.classification,
            self.positions,
            top_n=self.settings.top_schools_limit,
            now=now,
        )

    async def run_update(self, game_ids: Sequence[str], now: Optional[datetime] = None) -> UpdateResult:
        """Merge games, rebuild aggregates and summary, then record the run."""
        logger.info("=== Merging %d games ===", len(game_ids))
        games = await self.update_games(game_ids)

        logger.info("=== Rebuilding college aggregates ===")
        aggregation = self.aggregate()

        logger.info("=== Rebuilding home summary ===")
        summary = self.build_summary(now)

        meta = RunMeta(
            last_successful_run=now or datetime.now(timezone.utc),
            games_requested=games.games_requested,
            games_updated=games.games_updated,
            players_updated=games.players_updated,
            failed_games=games.failed_games,
            aggregates_written=aggregation.aggregates_written,
        )
        self.documents.write_run_meta(meta)
        logger.info("=== Update complete ===")
        return UpdateResult(games=games, aggregation=aggregation, summary=summary, meta=meta)
