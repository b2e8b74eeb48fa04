"""
Core module for the college tracker.

This module provides the foundational components:
- Configuration management (config.py)
- Document models (models.py)
- Enums and default labels (types.py)
- Async JSON client with per-host pacing and retries (http.py)

Usage:
    from college_tracker.core import Settings, get_settings
    from college_tracker.core import GameStatus, StatGroup
    from college_tracker.core import Player, GameLog, StatBundle
    from college_tracker.core.http import JsonApiClient, ExternalAPIError
"""

# Configuration
from .config import Settings, get_settings

# Types
from .types import GameStatus, StatGroup

# Models
from .models import (
    BaselinePlayer,
    CollegeAggregate,
    ConferenceEntry,
    DefenseStats,
    GameLog,
    GameMeta,
    HomeSummary,
    KickingStats,
    PassingStats,
    Player,
    PlayerSummary,
    PositionCollege,
    PositionDrilldown,
    PositionLeader,
    ReceivingStats,
    ReturnStats,
    RunMeta,
    RushingStats,
    StatBundle,
    TeamGameInfo,
    TopSchool,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "GameStatus",
    "StatGroup",
    # Models
    "BaselinePlayer",
    "CollegeAggregate",
    "ConferenceEntry",
    "DefenseStats",
    "GameLog",
    "GameMeta",
    "HomeSummary",
    "KickingStats",
    "PassingStats",
    "Player",
    "PlayerSummary",
    "PositionCollege",
    "PositionDrilldown",
    "PositionLeader",
    "ReceivingStats",
    "ReturnStats",
    "RunMeta",
    "RushingStats",
    "StatBundle",
    "TeamGameInfo",
    "TopSchool",
]
