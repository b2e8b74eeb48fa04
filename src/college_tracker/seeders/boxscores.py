"""
Box-score seeder: fetch games, normalize, merge into player documents.

High-level flow for update_players_from_games():
    1. Fetch box scores in parallel batches (bounded by batch_size).
    2. After each batch, for each game in input order:
        a. Extract the game meta and per-player stats.
        b. Roster players with a stat line are merged under the team the box
           score lists them for; roster players without one are merged under
           their roster team when it played (all groups null).
    3. Return how many games and players were updated.

A failure for one game (transport, payload shape, anything raised while
merging it) or one player (write error) is logged and skipped; the rest of
the run continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from ..core.models import BaselinePlayer, GameMeta
from ..core.types import GameStatus
from ..normalizers.game_meta import extract_game_meta
from ..normalizers.stats import PlayerGameStats, normalize_player_stats
from ..providers.base import DataProviderProtocol, ProviderError
from ..store.players import PlayerStore
from .utils import run_parallel_batches

logger = logging.getLogger(__name__)


@dataclass
class GameUpdateResult:
    """Result of merging a list of games."""
    games_requested: int = 0
    games_updated: int = 0
    players_updated: int = 0
    failed_games: list[str] = field(default_factory=list)
    skipped_games: list[str] = field(default_factory=list)
    failed_players: list[str] = field(default_factory=list)


def index_roster(roster: Iterable[BaselinePlayer]) -> dict[str, BaselinePlayer]:
    """Player id -> roster entry. The first entry for a duplicated id wins."""
    by_id: dict[str, BaselinePlayer] = {}
    for player in roster:
        by_id.setdefault(player.id, player)
    return by_id


class BoxscoreSeeder:
    """
    Merges provider box scores into the player store.

    Args:
        provider: Source of box-score packages
        player_store: Destination for merged game logs
        batch_size: Concurrent box-score fetches
        batch_delay: Pause between fetch batches (seconds)
    """

    def __init__(
        self,
        provider: DataProviderProtocol,
        player_store: PlayerStore,
        batch_size: int = 5,
        batch_delay: float = 0.5,
    ):
        self.provider = provider
        self.player_store = player_store
        self.batch_size = batch_size
        self.batch_delay = batch_delay

    async def update_players_from_games(
        self,
        game_ids: Sequence[str],
        roster: Iterable[BaselinePlayer],
    ) -> GameUpdateResult:
        """
        Fetch and merge every game in ``game_ids``.

        Args:
            game_ids: Provider game ids, merged in this order
            roster: Baseline players; only players on a team in the game are touched

        Returns:
            GameUpdateResult summary
        """
        game_ids = [str(g).strip() for g in game_ids if str(g).strip()]
        result = GameUpdateResult(games_requested=len(game_ids))
        if not game_ids:
            logger.info("No games to process")
            return result

        roster_by_id = index_roster(roster)
        seen_status: dict[str, GameStatus] = {}
        updated_ids: set[str] = set()

        def merge_one(game_id: str, package: Any) -> None:
            meta = extract_game_meta(package)
            if self._regresses(meta, seen_status):
                result.skipped_games.append(game_id)
                return
            seen_status[meta.game_id] = meta.status

            updated_ids.update(self.apply_game(meta, package, roster_by_id, result))
            result.games_updated += 1
            logger.info("Finished game %s (%s)", meta.game_id, meta.status.value)

        def merge_batch(batch: list[tuple[str, Any, Exception | None]]) -> None:
            for game_id, package, error in batch:
                if error is not None:
                    logger.error("Failed to fetch game %s: %s", game_id, error)
                    result.failed_games.append(game_id)
                    continue
                try:
                    merge_one(game_id, package)
                except ProviderError as e:
                    logger.error("Skipping game %s: %s", game_id, e)
                    result.failed_games.append(game_id)
                except Exception:
                    logger.exception("Unexpected error merging game %s", game_id)
                    result.failed_games.append(game_id)

        await run_parallel_batches(
            game_ids,
            self.provider.fetch_boxscore,
            batch_size=self.batch_size,
            delay_between_batches=self.batch_delay,
            on_batch=merge_batch,
        )

        result.players_updated = len(updated_ids)
        logger.info(
            "Updated %d players across %d/%d games (%d failed)",
            result.players_updated,
            result.games_updated,
            result.games_requested,
            len(result.failed_games),
        )
        return result

    @staticmethod
    def _regresses(meta: GameMeta, seen_status: dict[str, GameStatus]) -> bool:
        previous = seen_status.get(meta.game_id)
        if previous is not None and meta.status.rank < previous.rank:
            logger.warning(
                "Game %s went from %s back to %s within this run; keeping the earlier snapshot",
                meta.game_id,
                previous.value,
                meta.status.value,
            )
            return True
        return False

    def apply_game(
        self,
        meta: GameMeta,
        package: dict[str, Any],
        roster_by_id: dict[str, BaselinePlayer],
        result: GameUpdateResult,
    ) -> set[str]:
        """
        Merge one game into every affected player's document.

        A roster player with a stat line is merged under the team the box
        score lists them for, whatever the roster says (trades, missing
        abbreviations). A roster player without one gets an all-null log only
        if their roster team played.

        Returns:
            Ids of the players whose documents were written
        """
        boxscore = package.get("boxscore")
        players_block = boxscore.get("players") if isinstance(boxscore, dict) else None
        per_player: dict[str, PlayerGameStats] = normalize_player_stats(players_block)

        updated: set[str] = set()
        for player_id, baseline in roster_by_id.items():
            entry = per_player.get(player_id)
            if entry is not None:
                team_abbr, stats = entry.team_abbr, entry.stats
            elif baseline.nfl_team_abbr in meta.teams:
                team_abbr, stats = baseline.nfl_team_abbr, None
            else:
                continue

            try:
                player = self.player_store.upsert_game(player_id, baseline, meta, team_abbr, stats)
            except (OSError, ValueError) as e:
                logger.error(
                    "Failed to merge game %s into player %s: %s",
                    meta.game_id,
                    player_id,
                    e,
                )
                result.failed_players.append(player_id)
                continue
            if player is not None:
                updated.add(player_id)
        return updated
