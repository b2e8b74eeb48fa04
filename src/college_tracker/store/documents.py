"""
Derived documents: college aggregates, the home summary, the
``playersByCollege`` index, the run metadata and the scoreboard snapshot.

All of these are fully rebuilt by the pipeline; this module only knows where
they live and how to read and replace them. The read side
(``read_college``, ``read_home_summary``, ``colleges_for_position_group``) is
what a serving layer calls.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from pydantic import ValidationError

from ..core.models import (
    CollegeAggregate,
    GameMeta,
    HomeSummary,
    PositionCollege,
    PositionDrilldown,
    RunMeta,
)
from ..core.types import COLLEGE_PAGE_PREFIX
from ..tables.positions import DEFAULT_POSITIONS, PositionTable
from .files import StoreError, read_json, remove_quietly, write_json_atomic

if TYPE_CHECKING:
    from ..core.config import Settings

logger = logging.getLogger(__name__)

PLAYERS_BY_COLLEGE = "playersByCollege.json"


class DocumentNotFoundError(StoreError):
    """A requested derived document does not exist (or cannot be read)."""
    pass


class DocumentStore:
    """Location and I/O for every derived document under the data directory."""

    def __init__(
        self,
        aggregates_dir: Path,
        indices_dir: Path,
        summary_path: Path,
        meta_path: Path,
        scoreboard_path: Path,
    ):
        self.aggregates_dir = Path(aggregates_dir)
        self.indices_dir = Path(indices_dir)
        self.summary_path = Path(summary_path)
        self.meta_path = Path(meta_path)
        self.scoreboard_path = Path(scoreboard_path)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DocumentStore":
        return cls(
            aggregates_dir=settings.aggregates_dir,
            indices_dir=settings.indices_dir,
            summary_path=settings.summary_path,
            meta_path=settings.meta_path,
            scoreboard_path=settings.scoreboard_path,
        )

    # =========================================================================
    # College aggregates
    # =========================================================================

    def aggregate_path(self, slug: str) -> Path:
        return self.aggregates_dir / f"{COLLEGE_PAGE_PREFIX}{slug.upper()}.json"

    @staticmethod
    def slug_from_filename(path: Path) -> str:
        return path.stem[len(COLLEGE_PAGE_PREFIX):].lower()

    def aggregate_paths(self) -> list[Path]:
        """Every aggregate file on disk, sorted by filename."""
        if not self.aggregates_dir.is_dir():
            return []
        return sorted(self.aggregates_dir.glob(f"{COLLEGE_PAGE_PREFIX}*.json"))

    def write_aggregate(self, aggregate: CollegeAggregate) -> Path:
        path = self.aggregate_path(aggregate.slug)
        write_json_atomic(path, aggregate.to_document())
        return path

    def remove_stale_aggregates(self, keep_slugs: Iterable[str]) -> list[str]:
        """Delete aggregate files whose slug is not in ``keep_slugs``."""
        keep = set(keep_slugs)
        removed = []
        for path in self.aggregate_paths():
            slug = self.slug_from_filename(path)
            if slug not in keep and remove_quietly(path):
                removed.append(slug)
        if removed:
            logger.info("Removed %d stale aggregate(s): %s", len(removed), ", ".join(removed))
        return removed

    def _load_aggregate(self, path: Path) -> CollegeAggregate:
        raw = read_json(path)
        if isinstance(raw, dict) and not raw.get("slug"):
            raw = {**raw, "slug": self.slug_from_filename(path)}
        return CollegeAggregate.model_validate(raw)

    def read_aggregates(self) -> list[CollegeAggregate]:
        """Load every aggregate on disk; unreadable files are logged and skipped."""
        aggregates = []
        for path in self.aggregate_paths():
            try:
                aggregates.append(self._load_aggregate(path))
            except (ValueError, ValidationError) as e:
                logger.warning("Skipping unreadable aggregate %s: %s", path.name, e)
        return aggregates

    def read_college(self, slug: str) -> CollegeAggregate:
        """
        Read one college aggregate by slug (case-insensitive).

        Raises:
            DocumentNotFoundError: If no readable aggregate exists for the slug
        """
        slug = (slug or "").strip().lower()
        if not slug or "/" in slug or "\\" in slug:
            raise DocumentNotFoundError(f"Invalid college slug: {slug!r}")

        path = self.aggregate_path(slug)
        try:
            return self._load_aggregate(path)
        except FileNotFoundError as e:
            raise DocumentNotFoundError(f"College not found: {slug}", path) from e
        except (ValueError, ValidationError) as e:
            logger.error("Aggregate %s is unreadable: %s", path, e)
            raise DocumentNotFoundError(f"College document unreadable: {slug}", path) from e

    def colleges_for_position_group(
        self,
        group: str,
        positions: PositionTable = DEFAULT_POSITIONS,
    ) -> PositionDrilldown:
        """
        Every college with at least one player in ``group``, alphabetical by name.

        Args:
            group: Position group name (case-insensitive), e.g. "DB"
            positions: Alias table mapping raw positions to groups
        """
        group = (group or "").strip().upper()
        colleges = []
        for aggregate in self.read_aggregates():
            players = [
                p for p in aggregate.players
                if (positions.group_for(p.position) or "").upper() == group
            ]
            if players:
                colleges.append(
                    PositionCollege(college=aggregate.college, slug=aggregate.slug, players=players)
                )
        colleges.sort(key=lambda c: c.college)
        return PositionDrilldown(group=group, colleges=colleges)

    # =========================================================================
    # Index
    # =========================================================================

    @property
    def players_by_college_path(self) -> Path:
        return self.indices_dir / PLAYERS_BY_COLLEGE

    def write_players_by_college(self, index: dict[str, list[str]]) -> None:
        write_json_atomic(self.players_by_college_path, index)

    def read_players_by_college(self) -> dict[str, list[str]]:
        try:
            return read_json(self.players_by_college_path)
        except FileNotFoundError as e:
            raise DocumentNotFoundError("playersByCollege index not built", self.players_by_college_path) from e

    # =========================================================================
    # Home summary / run meta
    # =========================================================================

    def write_home_summary(self, summary: HomeSummary) -> None:
        write_json_atomic(self.summary_path, summary.to_document())

    def read_home_summary(self) -> HomeSummary:
        """
        Raises:
            DocumentNotFoundError: If the summary has not been built
        """
        try:
            return HomeSummary.model_validate(read_json(self.summary_path))
        except FileNotFoundError as e:
            raise DocumentNotFoundError("Home summary not built", self.summary_path) from e
        except (ValueError, ValidationError) as e:
            logger.error("Home summary %s is unreadable: %s", self.summary_path, e)
            raise DocumentNotFoundError("Home summary unreadable", self.summary_path) from e

    def write_run_meta(self, meta: RunMeta) -> None:
        write_json_atomic(self.meta_path, meta.to_document())

    def read_run_meta(self) -> Optional[RunMeta]:
        """Last run's metadata, or None if no run has completed."""
        try:
            return RunMeta.model_validate(read_json(self.meta_path))
        except FileNotFoundError:
            return None
        except (ValueError, ValidationError) as e:
            logger.warning("Ignoring unreadable run metadata %s: %s", self.meta_path, e)
            return None

    # =========================================================================
    # Scoreboard
    # =========================================================================

    def write_scoreboard(self, games: Iterable[GameMeta]) -> None:
        write_json_atomic(self.scoreboard_path, [game.to_document() for game in games])

    def read_scoreboard(self) -> list[GameMeta]:
        """Last fetched scoreboard; empty if never fetched or unreadable."""
        try:
            raw = read_json(self.scoreboard_path)
            return [GameMeta.model_validate(game) for game in raw]
        except FileNotFoundError:
            return []
        except (TypeError, ValueError, ValidationError) as e:
            logger.warning("Ignoring unreadable scoreboard %s: %s", self.scoreboard_path, e)
            return []
