"""
College Tracker Data

Tracks NFL players by the college they came from and republishes their
per-game production as precomputed JSON documents.

Key Features:
- ESPN box-score normalization into a fixed six-group stat schema
- Idempotent per-player game logs (re-running a game never duplicates it)
- Per-college aggregates, conference groups, weekly leaderboard and
  position-group leaders, rebuilt from scratch every run

Usage:
    from college_tracker import Pipeline, get_settings

    async with Pipeline(get_settings()) as pipeline:
        await pipeline.run_update(["401772510", "401772830"])

    # Read side
    from college_tracker import DocumentStore
    docs = DocumentStore.from_settings(get_settings())
    alabama = docs.read_college("ala")
"""

from .core.config import Settings, get_settings
from .pipeline import Pipeline, UpdateResult, load_game_ids
from .store.documents import DocumentNotFoundError, DocumentStore
from .store.players import PlayerStore
from .store.roster import RosterFormatError, RosterNotFoundError, RosterStore

__version__ = "1.0.0"

__all__ = [
    "DocumentNotFoundError",
    "DocumentStore",
    "Pipeline",
    "PlayerStore",
    "RosterFormatError",
    "RosterNotFoundError",
    "RosterStore",
    "Settings",
    "UpdateResult",
    "get_settings",
    "load_game_ids",
]
