"""
College aggregation builder.

Rebuilds one ``collegePage_<SLUG>.json`` document per college from the roster
snapshot, attaching each player's most recent GameLog from the player store.

Pipeline:
    1) Load the roster snapshot (required)
    2) Group players by college slug, in roster order
    3) Classify each college (conference == homepage group)
    4) Write every aggregate, drop aggregates for colleges no longer present
    5) Write indices/playersByCollege.json
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..core.models import BaselinePlayer, CollegeAggregate, PlayerSummary
from ..core.types import FREE_AGENT, UNKNOWN_PLAYER_NAME, UNKNOWN_POSITION
from ..store.documents import DocumentStore
from ..store.players import PlayerStore
from ..store.roster import RosterStore
from ..tables.conferences import (
    DEFAULT_CLASSIFICATION,
    ClassificationTable,
    college_slug,
    normalize_college_name,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AggregationResult",
    "build_college_aggregates",
    "build_players_by_college",
    "college_slug",
    "write_college_aggregates",
]


@dataclass
class AggregationResult:
    """Outcome of one aggregation pass."""

    aggregates_written: int = 0
    players: int = 0
    stale_removed: list[str] = field(default_factory=list)


def _player_summary(entry: BaselinePlayer, player_store: PlayerStore) -> PlayerSummary:
    player = player_store.get(entry.id)
    return PlayerSummary(
        id=entry.id,
        name=entry.name or UNKNOWN_PLAYER_NAME,
        position=entry.position or UNKNOWN_POSITION,
        nfl_team=entry.nfl_team or FREE_AGENT,
        last_game=player.last_game if player is not None else None,
    )


def build_college_aggregates(
    roster: Iterable[BaselinePlayer],
    player_store: PlayerStore,
    table: ClassificationTable = DEFAULT_CLASSIFICATION,
) -> dict[str, CollegeAggregate]:
    """
    Group the roster by college.

    Args:
        roster: Baseline players, in snapshot order
        player_store: Source of each player's last GameLog
        table: College classification and slug overrides

    Returns:
        Mapping of slug -> CollegeAggregate, in first-seen order
    """
    colleges: dict[str, CollegeAggregate] = {}
    seen_ids: set[str] = set()

    for entry in roster:
        if entry.id in seen_ids:
            logger.warning("Duplicate roster entry for player %s ignored", entry.id)
            continue
        seen_ids.add(entry.id)

        college = normalize_college_name(entry.college)
        slug = table.slug_for(college)

        aggregate = colleges.get(slug)
        if aggregate is None:
            conference = table.classify(college)
            aggregate = CollegeAggregate(
                college=college,
                slug=slug,
                conference=conference,
                group=conference,
            )
            colleges[slug] = aggregate

        aggregate.players.append(_player_summary(entry, player_store))

    return colleges


def build_players_by_college(aggregates: Iterable[CollegeAggregate]) -> dict[str, list[str]]:
    """slug -> player ids, for the playersByCollege index."""
    return {aggregate.slug: [p.id for p in aggregate.players] for aggregate in aggregates}


def write_college_aggregates(
    roster_store: RosterStore,
    player_store: PlayerStore,
    documents: DocumentStore,
    table: ClassificationTable = DEFAULT_CLASSIFICATION,
) -> AggregationResult:
    """
    Run the full aggregation pass.

    Raises:
        RosterNotFoundError: If the roster snapshot is missing
        RosterFormatError: If the roster snapshot is not a list
    """
    roster = roster_store.load()
    logger.info("Building college aggregates from %d roster entries", len(roster))

    aggregates = build_college_aggregates(roster, player_store, table)

    result = AggregationResult()
    for aggregate in aggregates.values():
        documents.write_aggregate(aggregate)
        result.aggregates_written += 1
        result.players += aggregate.player_count

    result.stale_removed = documents.remove_stale_aggregates(aggregates.keys())
    documents.write_players_by_college(build_players_by_college(aggregates.values()))

    logger.info(
        "Wrote %d college aggregates (%d players)",
        result.aggregates_written,
        result.players,
    )
    return result
