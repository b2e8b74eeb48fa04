"""
Roster snapshot (``allPlayers.json``): the flat list of baseline players the
aggregation pass and the box-score seeder start from.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from ..core.models import BaselinePlayer
from .files import StoreError, read_json, write_json_atomic

logger = logging.getLogger(__name__)


class RosterNotFoundError(StoreError):
    """The roster snapshot does not exist."""
    pass


class RosterFormatError(StoreError):
    """The roster snapshot is not valid JSON or not a JSON list."""
    pass


class RosterStore:
    """Reads and writes the roster snapshot."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> list[BaselinePlayer]:
        """
        Load every valid roster entry, in file order.

        Entries without an id (or otherwise invalid) are skipped with a warning.

        Raises:
            RosterNotFoundError: If the snapshot file is missing
            RosterFormatError: If the snapshot is not a JSON list
        """
        try:
            raw = read_json(self.path)
        except FileNotFoundError as e:
            raise RosterNotFoundError(f"Roster snapshot not found at {self.path}", self.path) from e
        except ValueError as e:
            raise RosterFormatError(f"Roster snapshot at {self.path} is not valid JSON: {e}", self.path) from e

        if not isinstance(raw, list):
            raise RosterFormatError(
                f"Roster snapshot at {self.path} must be a list, got {type(raw).__name__}",
                self.path,
            )

        players = []
        for index, entry in enumerate(raw):
            try:
                players.append(BaselinePlayer.model_validate(entry))
            except ValidationError as e:
                logger.warning("Skipping roster entry #%d: %s", index, e.errors()[0]["msg"])
        return players

    def save(self, players: Iterable[BaselinePlayer]) -> int:
        """Replace the snapshot. Returns the number of entries written."""
        documents = [player.to_document() for player in players]
        write_json_atomic(self.path, documents)
        logger.info("Wrote %d roster entries to %s", len(documents), self.path)
        return len(documents)
