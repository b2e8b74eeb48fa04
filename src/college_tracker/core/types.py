"""
Core types and constants for the college tracker.

This module provides:
- GameStatus enum and its ordering
- StatGroup enum naming the six canonical stat groups
- Default labels used when upstream data is missing
"""

from enum import Enum


class GameStatus(str, Enum):
    """Lifecycle of a game as reported by the provider."""

    scheduled = "scheduled"
    in_progress = "in_progress"
    final = "final"

    @property
    def rank(self) -> int:
        """Position in the scheduled -> in_progress -> final progression."""
        return _STATUS_ORDER[self]


_STATUS_ORDER = {
    GameStatus.scheduled: 0,
    GameStatus.in_progress: 1,
    GameStatus.final: 2,
}


class StatGroup(str, Enum):
    """The six canonical per-game stat groups."""

    passing = "passing"
    rushing = "rushing"
    receiving = "receiving"
    defense = "defense"
    kicking = "kicking"
    returns = "returns"


# =============================================================================
# Defaults for missing upstream values
# =============================================================================

UNKNOWN_COLLEGE = "Unknown"
UNKNOWN_SLUG = "unknown"
UNKNOWN_PLAYER_NAME = "Unknown Player"
UNKNOWN_POSITION = "UNK"
FREE_AGENT = "Free Agent"

# Document file naming
COLLEGE_PAGE_PREFIX = "collegePage_"
