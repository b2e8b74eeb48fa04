"""
Base data provider protocol and errors.

Defines the interface the box-score and roster seeders depend on, so the
pipeline can run against ESPN or against an in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..core.models import BaselinePlayer


class ProviderError(Exception):
    """Base exception for provider errors (transport, status, or payload)."""

    def __init__(self, message: str, *, resource: str | None = None):
        super().__init__(message)
        self.resource = resource


class ProviderHTTPError(ProviderError):
    """Raised when the provider keeps failing after the client's retries."""

    def __init__(self, message: str, *, resource: str | None = None, status_code: int | None = None):
        super().__init__(message, resource=resource)
        self.status_code = status_code


class BoxscoreShapeError(ProviderError):
    """Raised when a provider payload is missing a block we depend on."""
    pass


class DataProviderProtocol(ABC):
    """
    Abstract interface for NFL data providers.

    The provider is responsible for:
    1. Making API calls to the external service
    2. Returning the raw per-game package (header + boxscore) and the raw
       scoreboard untouched
    3. Mapping roster entries to BaselinePlayer

    The provider is NOT responsible for:
    - Stat normalization (handled by normalizers)
    - Persistence (handled by the stores)
    """

    provider_name: str = ""

    @abstractmethod
    async def fetch_boxscore(self, game_id: str) -> dict[str, Any]:
        """
        Fetch one game's package.

        Returns:
            Dict with at least ``header`` and ``boxscore`` keys

        Raises:
            ProviderError: On transport failure or unexpected payload
        """
        ...

    @abstractmethod
    async def fetch_teams(self) -> list[dict[str, Any]]:
        """
        Fetch the league's teams.

        Returns:
            List of ``{"id", "name", "abbreviation"}`` dicts
        """
        ...

    @abstractmethod
    async def fetch_team_roster(self, team: dict[str, Any]) -> list[BaselinePlayer]:
        """
        Fetch one team's roster as baseline players.

        Args:
            team: A team dict as returned by fetch_teams()
        """
        ...

    @abstractmethod
    async def fetch_scoreboard(self, dates: str | None = None) -> dict[str, Any]:
        """
        Fetch the league scoreboard.

        Args:
            dates: Provider date filter (``YYYYMMDD``); None means the current week

        Returns:
            Raw payload with an ``events`` list, one entry per game
        """
        ...

    async def close(self) -> None:
        """Release any held connections."""
        return None
