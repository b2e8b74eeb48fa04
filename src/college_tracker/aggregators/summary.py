"""
Home summary builder.

Reads every college aggregate and produces ``homeSummary.json``:
    - conferenceGroups: colleges grouped by conference, biggest first
    - topSchoolsThisWeek: colleges ranked by their players' last-game production
    - positionLeaders: colleges with the most players in each position group
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Sequence

from ..core.models import (
    CollegeAggregate,
    ConferenceEntry,
    HomeSummary,
    PositionLeader,
    TopSchool,
)
from ..store.documents import DocumentStore
from ..tables.conferences import DEFAULT_CLASSIFICATION, ClassificationTable
from ..tables.positions import DEFAULT_POSITIONS, PositionTable

logger = logging.getLogger(__name__)

DEFAULT_TOP_SCHOOLS = 10


def compute_week_label(when: date | datetime) -> str:
    """
    Label the week of the month a date falls in.

    Examples:
        2025-12-07 -> "2025-M12-W1", 2025-12-08 -> "2025-M12-W2"
    """
    week_of_month = (when.day - 1) // 7 + 1
    return f"{when.year}-M{when.month:02d}-W{week_of_month}"


def build_conference_groups(
    aggregates: Iterable[CollegeAggregate],
    table: ClassificationTable = DEFAULT_CLASSIFICATION,
) -> dict[str, list[ConferenceEntry]]:
    """
    Group colleges by homepage group.

    Within a group: player count descending, then college name ascending.
    Groups follow the table's display order, unknown groups alphabetically
    after it.
    """
    groups: dict[str, list[ConferenceEntry]] = defaultdict(list)
    for aggregate in aggregates:
        key = aggregate.group or aggregate.conference or table.fallback
        groups[key].append(
            ConferenceEntry(
                college=aggregate.college or aggregate.slug,
                slug=aggregate.slug,
                player_count=aggregate.player_count,
            )
        )

    for entries in groups.values():
        entries.sort(key=lambda e: (-e.player_count, e.college))

    return {key: groups[key] for key in sorted(groups, key=table.group_rank)}


def build_top_schools(
    aggregates: Iterable[CollegeAggregate],
    limit: int = DEFAULT_TOP_SCHOOLS,
) -> list[TopSchool]:
    """
    Rank colleges by total production across their players' last games.

    Ties are broken by college name so the ranking is stable between runs.
    """
    rows = []
    for aggregate in aggregates:
        total = 0.0
        latest: Optional[date] = None
        for player in aggregate.players:
            last_game = player.last_game
            if last_game is None:
                continue
            total += last_game.production_score
            if latest is None or last_game.game_date > latest:
                latest = last_game.game_date

        rows.append(
            TopSchool(
                college=aggregate.college or aggregate.slug,
                slug=aggregate.slug,
                total_production=round(total, 2),
                latest_game_date=latest,
            )
        )

    rows.sort(key=lambda r: (-r.total_production, r.college))
    return rows[:limit]


def build_position_leaders(
    aggregates: Iterable[CollegeAggregate],
    positions: PositionTable = DEFAULT_POSITIONS,
) -> dict[str, list[PositionLeader]]:
    """
    Count players per college in each position group.

    Players without a position are not counted. Groups appear in table order
    with ``Other`` last; each list is count descending, then college name.
    """
    counts: dict[str, dict[str, PositionLeader]] = defaultdict(dict)
    for aggregate in aggregates:
        for player in aggregate.players:
            group = positions.group_for(player.position)
            if group is None:
                continue
            leader = counts[group].get(aggregate.slug)
            if leader is None:
                leader = PositionLeader(college=aggregate.college or aggregate.slug, slug=aggregate.slug)
                counts[group][aggregate.slug] = leader
            leader.count += 1

    order = [*positions.group_names, positions.other]
    return {
        group: sorted(counts[group].values(), key=lambda l: (-l.count, l.college))
        for group in order
        if group in counts
    }


def build_home_summary(
    aggregates: Sequence[CollegeAggregate],
    table: ClassificationTable = DEFAULT_CLASSIFICATION,
    positions: PositionTable = DEFAULT_POSITIONS,
    top_n: int = DEFAULT_TOP_SCHOOLS,
    now: Optional[datetime] = None,
) -> HomeSummary:
    """Build the home summary from already-loaded aggregates."""
    now = now or datetime.now(timezone.utc)
    return HomeSummary(
        week=compute_week_label(now),
        last_updated=now,
        conference_groups=build_conference_groups(aggregates, table),
        top_schools_this_week=build_top_schools(aggregates, top_n),
        position_leaders=build_position_leaders(aggregates, positions),
    )


def write_home_summary(
    documents: DocumentStore,
    table: ClassificationTable = DEFAULT_CLASSIFICATION,
    positions: PositionTable = DEFAULT_POSITIONS,
    top_n: int = DEFAULT_TOP_SCHOOLS,
    now: Optional[datetime] = None,
) -> HomeSummary:
    """Read every aggregate, build the summary and write it atomically."""
    aggregates = documents.read_aggregates()
    logger.info("Building home summary from %d college aggregates", len(aggregates))

    summary = build_home_summary(aggregates, table, positions, top_n, now)
    documents.write_home_summary(summary)

    logger.info(
        "Home summary %s: %d groups, %d top schools",
        summary.week,
        len(summary.conference_groups),
        len(summary.top_schools_this_week),
    )
    return summary
