"""
Configuration management for the college tracker pipeline.

Uses Pydantic settings for type-safe configuration with environment variable support.
Every setting can be overridden with a COLLEGE_TRACKER_-prefixed environment
variable or an entry in the project's .env file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Pipeline settings with environment variable support.

    Example:
        COLLEGE_TRACKER_DATA_DIR=/var/data COLLEGE_TRACKER_BATCH_SIZE=3 college-tracker update-all
    """

    model_config = SettingsConfigDict(
        env_prefix="COLLEGE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Application Metadata
    # ==========================================================================
    app_name: str = "College Tracker Data"
    app_version: str = "1.0.0"
    log_level: str = Field(default="INFO", description="Root log level for the CLI")

    # ==========================================================================
    # Storage
    # ==========================================================================
    data_dir: Path = Field(
        default=Path("data"),
        description="Root directory holding the roster snapshot and every derived document",
    )
    game_ids_file: Optional[Path] = Field(
        default=None,
        description="Optional text file with one ESPN game id per line ('#' starts a comment)",
    )

    @computed_field
    @property
    def roster_path(self) -> Path:
        """Flat roster snapshot (list of baseline players)."""
        return self.data_dir / "allPlayers.json"

    @computed_field
    @property
    def players_dir(self) -> Path:
        return self.data_dir / "players"

    @computed_field
    @property
    def aggregates_dir(self) -> Path:
        return self.data_dir / "aggregates"

    @computed_field
    @property
    def indices_dir(self) -> Path:
        return self.data_dir / "indices"

    @computed_field
    @property
    def summary_path(self) -> Path:
        return self.data_dir / "homeSummary.json"

    @computed_field
    @property
    def meta_path(self) -> Path:
        return self.data_dir / "meta.json"

    @computed_field
    @property
    def scoreboard_path(self) -> Path:
        return self.data_dir / "scoreboard.json"

    # ==========================================================================
    # ESPN Provider
    # ==========================================================================
    espn_boxscore_url: str = "https://cdn.espn.com/core/nfl"
    espn_site_url: str = "https://site.api.espn.com/apis/site/v2/sports/football/nfl"
    requests_per_minute: int = Field(default=120, ge=1)
    http_timeout: float = Field(default=30.0, gt=0)
    http_max_retries: int = Field(default=3, ge=1, le=10)

    # ==========================================================================
    # Batch Processing
    # ==========================================================================
    batch_size: int = Field(default=5, ge=1, le=50, description="Concurrent provider fetches per batch")
    batch_delay: float = Field(default=0.5, ge=0, description="Pause between fetch batches (seconds)")

    # ==========================================================================
    # Derived Views
    # ==========================================================================
    top_schools_limit: int = Field(default=10, ge=1)
    compare_game_dates: bool = Field(
        default=False,
        description="Only advance a player's lastGameId when the new game is not older",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
