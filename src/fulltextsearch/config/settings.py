"""Application configuration settings."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Full-text search settings with environment variable support.

    All settings can be overridden via environment variables prefixed with
    FULLTEXTSEARCH_. For example, FULLTEXTSEARCH_REWRITE_ENABLED=false.
    """

    model_config = SettingsConfigDict(
        env_prefix="FULLTEXTSEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".fulltextsearch",
        description="Directory for the default SQLite database",
    )

    # Database
    database_url: str | None = Field(
        default=None,
        description="Database URL (default: sqlite:///{data_dir}/fulltextsearch.db)",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo SQL statements for debugging",
    )

    # Full-text rewrite
    rewrite_enabled: bool = Field(
        default=True,
        description="Install the CONTAINS/FREETEXT rewrite on new engines",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def resolved_database_url(self) -> str:
        """Get the database URL, with default if not explicitly set."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir}/fulltextsearch.db"

    def ensure_data_dir(self) -> None:
        """Create the data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the package logger.

    A basic root handler is added only if the application has not set one up.
    """
    settings = settings or get_settings()
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("fulltextsearch").setLevel(settings.log_level)
