"""
Per-game production score.

A PPR-style point total over the canonical stat groups. The home summary sums
this across each college's most recent games to rank "top schools this week".
"""

from __future__ import annotations

from types import MappingProxyType

from ..core.models import StatBundle

SCORING_WEIGHTS = MappingProxyType(
    {
        "passing_yards": 0.04,
        "passing_touchdowns": 4.0,
        "passing_interceptions": -2.0,
        "rushing_yards": 0.1,
        "rushing_touchdowns": 6.0,
        "receptions": 1.0,
        "receiving_yards": 0.1,
        "receiving_touchdowns": 6.0,
        "tackles": 1.0,
        "sacks": 2.0,
        "defensive_interceptions": 3.0,
        "field_goals_made": 3.0,
        "extra_points_made": 1.0,
        "return_touchdowns": 6.0,
    }
)


def production_score(stats: StatBundle, weights=SCORING_WEIGHTS) -> float:
    """Score one game's stat bundle. An all-null bundle scores 0.0."""
    w = weights
    total = 0.0

    if stats.passing is not None:
        total += stats.passing.yards * w["passing_yards"]
        total += stats.passing.touchdowns * w["passing_touchdowns"]
        total += stats.passing.interceptions * w["passing_interceptions"]

    if stats.rushing is not None:
        total += stats.rushing.yards * w["rushing_yards"]
        total += stats.rushing.touchdowns * w["rushing_touchdowns"]

    if stats.receiving is not None:
        total += stats.receiving.receptions * w["receptions"]
        total += stats.receiving.yards * w["receiving_yards"]
        total += stats.receiving.touchdowns * w["receiving_touchdowns"]

    if stats.defense is not None:
        total += stats.defense.tackles * w["tackles"]
        total += stats.defense.sacks * w["sacks"]
        total += stats.defense.interceptions * w["defensive_interceptions"]

    if stats.kicking is not None:
        total += stats.kicking.field_goals_made * w["field_goals_made"]
        total += stats.kicking.extra_points_made * w["extra_points_made"]

    if stats.returns is not None:
        total += stats.returns.touchdowns * w["return_touchdowns"]

    return round(total, 2)
