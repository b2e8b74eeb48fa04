"""
File-backed persistence under ``Settings.data_dir``.

    players/<id>.json                       PlayerStore
    allPlayers.json                         RosterStore
    aggregates/, indices/, homeSummary.json,
    meta.json                               DocumentStore
"""

from .documents import DocumentNotFoundError, DocumentStore
from .files import StoreError, read_json, write_json_atomic
from .players import PlayerStore
from .roster import RosterFormatError, RosterNotFoundError, RosterStore

__all__ = [
    "DocumentNotFoundError",
    "DocumentStore",
    "PlayerStore",
    "RosterFormatError",
    "RosterNotFoundError",
    "RosterStore",
    "StoreError",
    "read_json",
    "write_json_atomic",
]
