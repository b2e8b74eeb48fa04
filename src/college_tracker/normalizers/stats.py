"""
Stat normalizer: box-score ``players`` block -> per-player StatBundle.

Only players who appear in at least one category are returned. Callers must
read "absent" as "all six groups null" (see ``empty_bundle``), never as an
error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from ..core.models import StatBundle
from .categories import AthleteLine, CategoryBlock, TeamStatBlock, schema_for

logger = logging.getLogger(__name__)


@dataclass
class PlayerGameStats:
    """Normalized stats for one player in one game."""

    player_id: str
    team_abbr: str
    stats: StatBundle


def empty_bundle() -> StatBundle:
    """Bundle for a player who appeared in no stat category."""
    return StatBundle()


def _decode(model: type, raw: Any, what: str) -> Optional[Any]:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning("Skipping malformed %s: %s", what, e.errors()[0].get("msg", e))
        return None


def _iter_team_blocks(players_block: Any) -> Iterable[TeamStatBlock]:
    if not isinstance(players_block, list):
        if players_block is not None:
            logger.warning(
                "Expected a list of team blocks, got %s", type(players_block).__name__
            )
        return
    for index, raw_team in enumerate(players_block):
        team_block = _decode(TeamStatBlock, raw_team, f"team block #{index}")
        if team_block is not None:
            yield team_block


def normalize_player_stats(players_block: Any) -> dict[str, PlayerGameStats]:
    """
    Build per-player stat bundles from one game's box score.

    Args:
        players_block: ``boxscore.players`` from the provider (one entry per team)

    Returns:
        Mapping of player id -> PlayerGameStats, in first-seen order
    """
    result: dict[str, PlayerGameStats] = {}

    for team_block in _iter_team_blocks(players_block):
        team_abbr = team_block.team.abbreviation

        for raw_category in team_block.statistics:
            category = _decode(CategoryBlock, raw_category, f"{team_abbr} category block")
            if category is None:
                continue

            line_schema = schema_for(category.name)
            if line_schema is None:
                logger.debug("Ignoring unrecognized category %r", category.name)
                continue

            for raw_line in category.athletes:
                line = _decode(AthleteLine, raw_line, f"{category.name} athlete line")
                if line is None:
                    continue

                player_id = line.athlete.id
                entry = result.get(player_id)
                if entry is None:
                    entry = PlayerGameStats(
                        player_id=player_id,
                        team_abbr=team_abbr,
                        stats=empty_bundle(),
                    )
                    result[player_id] = entry

                lookup = dict(zip(category.keys, line.stats))
                line_schema.model_validate(lookup).apply(entry.stats)

    return result
