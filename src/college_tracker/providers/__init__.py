"""
Data provider abstraction layer.

Usage:
    from college_tracker.providers import get_provider

    async with get_provider(settings) as provider:
        package = await provider.fetch_boxscore("401772790")
        header, boxscore = package["header"], package["boxscore"]
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import (
    BoxscoreShapeError,
    DataProviderProtocol,
    ProviderError,
    ProviderHTTPError,
)

if TYPE_CHECKING:
    from ..core.config import Settings
    from .espn import EspnClient

__all__ = [
    "BoxscoreShapeError",
    "DataProviderProtocol",
    "ProviderError",
    "ProviderHTTPError",
    "get_provider",
]


def get_provider(settings: "Settings", provider_name: str = "espn") -> "EspnClient":
    """
    Get a data provider instance.

    Args:
        settings: Pipeline settings (URLs, rate limit, retries)
        provider_name: Provider to use (only "espn" today)

    Raises:
        ValueError: If provider not found
    """
    if provider_name == "espn":
        from .espn import EspnClient
        return EspnClient.from_settings(settings)
    else:
        raise ValueError(f"Unknown provider: {provider_name}")
