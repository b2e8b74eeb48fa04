"""
Derived views rebuilt from the player store on every run.

Both passes are full rebuilds: college aggregates from the roster snapshot
plus player documents, then the home summary from the aggregates.
"""

from .colleges import (
    AggregationResult,
    build_college_aggregates,
    build_players_by_college,
    college_slug,
    write_college_aggregates,
)
from .summary import (
    build_conference_groups,
    build_home_summary,
    build_position_leaders,
    build_top_schools,
    compute_week_label,
    write_home_summary,
)

__all__ = [
    "AggregationResult",
    "build_college_aggregates",
    "build_conference_groups",
    "build_home_summary",
    "build_players_by_college",
    "build_position_leaders",
    "build_top_schools",
    "college_slug",
    "compute_week_label",
    "write_college_aggregates",
    "write_home_summary",
]
