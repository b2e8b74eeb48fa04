"""
Per-player document store.

One JSON document per player under ``players/<id>.json``. The store owns the
merge of a single game into a player's game-log history:

    store = PlayerStore.from_settings(settings)
    store.upsert_game(player_id, baseline, game_meta, "MIA", bundle_or_none)

Merges are idempotent: re-merging the same game id overwrites its GameLog, so
running the same game twice leaves the document byte-for-byte unchanged.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional

from pydantic import ValidationError

from ..core.models import BaselinePlayer, GameLog, GameMeta, Player, StatBundle
from ..core.types import UNKNOWN_PLAYER_NAME
from ..normalizers.scoring import production_score
from ..tables.conferences import DEFAULT_CLASSIFICATION, ClassificationTable, normalize_college_name
from .files import read_json, write_json_atomic

if TYPE_CHECKING:
    from ..core.config import Settings

logger = logging.getLogger(__name__)

CORRUPT_SUFFIX = ".corrupt"


class PlayerStore:
    """
    Durable per-player documents keyed by provider player id.

    Args:
        players_dir: Directory holding ``<id>.json`` documents
        classification: Table used to derive a new player's college slug
        compare_game_dates: When True, ``lastGameId`` only moves to a game
            dated on or after the current last game
    """

    def __init__(
        self,
        players_dir: Path,
        classification: ClassificationTable = DEFAULT_CLASSIFICATION,
        compare_game_dates: bool = False,
    ):
        self.players_dir = Path(players_dir)
        self.classification = classification
        self.compare_game_dates = compare_game_dates

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        classification: ClassificationTable = DEFAULT_CLASSIFICATION,
    ) -> "PlayerStore":
        return cls(
            settings.players_dir,
            classification=classification,
            compare_game_dates=settings.compare_game_dates,
        )

    # =========================================================================
    # Paths / reads
    # =========================================================================

    def path_for(self, player_id: str) -> Path:
        player_id = str(player_id).strip()
        if not player_id or player_id in (".", "..") or "/" in player_id or "\\" in player_id:
            raise ValueError(f"Invalid player id: {player_id!r}")
        return self.players_dir / f"{player_id}.json"

    def exists(self, player_id: str) -> bool:
        return self.path_for(player_id).exists()

    def get(self, player_id: str) -> Optional[Player]:
        """
        Load a player document.

        Returns None when the document does not exist. A document that exists
        but cannot be parsed is moved aside to ``<id>.json.corrupt`` and also
        reported as None, so the next merge recreates it from baseline.
        """
        path = self.path_for(player_id)
        try:
            raw = read_json(path)
        except FileNotFoundError:
            return None
        except ValueError as e:
            self._quarantine(path, f"invalid JSON: {e}")
            return None

        try:
            return Player.model_validate(raw)
        except ValidationError as e:
            self._quarantine(path, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}")
            return None

    def _quarantine(self, path: Path, reason: str) -> None:
        corrupt_path = path.with_name(path.name + CORRUPT_SUFFIX)
        logger.error("Corrupt player document %s (%s); moved to %s", path, reason, corrupt_path)
        os.replace(path, corrupt_path)

    def iter_players(self) -> Iterator[Player]:
        """Yield every readable player document, ordered by id."""
        if not self.players_dir.is_dir():
            return
        for player_id in sorted(p.stem for p in self.players_dir.glob("*.json")):
            player = self.get(player_id)
            if player is not None:
                yield player

    # =========================================================================
    # Writes
    # =========================================================================

    def new_player(self, baseline: BaselinePlayer) -> Player:
        """Build an empty player document from a roster snapshot entry."""
        college = normalize_college_name(baseline.college)
        return Player(
            id=baseline.id,
            name=baseline.name or UNKNOWN_PLAYER_NAME,
            college=college,
            college_slug=self.classification.slug_for(college),
            position=baseline.position,
            nfl_team=baseline.nfl_team,
            nfl_team_abbr=baseline.nfl_team_abbr,
        )

    def save(self, player: Player) -> None:
        write_json_atomic(self.path_for(player.id), player.to_document())

    def seed(self, baseline: BaselinePlayer) -> bool:
        """
        Create a player document if none exists. Never overwrites.

        Returns:
            True if a document was created
        """
        if self.exists(baseline.id) and self.get(baseline.id) is not None:
            return False
        self.save(self.new_player(baseline))
        return True

    def upsert_game(
        self,
        player_id: str,
        baseline_if_absent: BaselinePlayer,
        game_meta: GameMeta,
        team_abbr: str,
        stats: Optional[StatBundle],
    ) -> Optional[Player]:
        """
        Merge one game into one player's document.

        Args:
            player_id: Provider player id
            baseline_if_absent: Roster entry used when the player has no document yet
            game_meta: Canonical game record
            team_abbr: The player's team in this game
            stats: Normalized stats, or None when the player had no stat line

        Returns:
            The persisted Player, or None if ``team_abbr`` is not in the game

        Raises:
            OSError: If the document cannot be written (the old one is kept)
        """
        team_info = game_meta.teams.get(team_abbr)
        if team_info is None:
            logger.warning(
                "No team info for %s in game %s (player %s); skipping",
                team_abbr,
                game_meta.game_id,
                player_id,
            )
            return None

        player = self.get(player_id)
        if player is None:
            player = self.new_player(baseline_if_absent)

        bundle = stats.model_copy(deep=True) if stats is not None else StatBundle()
        game_log = GameLog(
            game_id=game_meta.game_id,
            game_date=game_meta.game_date,
            team_abbr=team_info.team_abbr,
            opponent_abbr=team_info.opponent_abbr,
            opponent_name=team_info.opponent_name,
            is_home=team_info.is_home,
            team_score=team_info.team_score,
            opponent_score=team_info.opponent_score,
            status=game_meta.status,
            clock_text=game_meta.clock_text,
            production_score=production_score(bundle),
            player_stats=bundle,
        )

        player.game_logs[game_meta.game_id] = game_log
        if self._advances_last_game(player, game_log):
            player.last_game_id = game_meta.game_id

        self.save(player)
        return player

    def _advances_last_game(self, player: Player, game_log: GameLog) -> bool:
        if not self.compare_game_dates:
            return True
        current = player.last_game
        if current is None or current.game_id == game_log.game_id:
            return True
        return game_log.game_date >= current.game_date
