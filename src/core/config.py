"""
Application configuration.

All settings are read from environment variables prefixed with CHESS_ (or a .env file), e.g.
CHESS_DATABASE_URL=sqlite:///./games.db
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHESS_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Persistence
    database_url: str = "sqlite:///./chess.db"
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Set up the root logger once, at the level from the settings."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
