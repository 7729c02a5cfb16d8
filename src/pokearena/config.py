"""Configuration settings for PokeArena."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///pokearena.db",
        description="SQLAlchemy async connection URL",
    )

    # External Pokemon data source
    pokeapi_base_url: str = Field(default="https://pokeapi.co/api/v2")
    pokeapi_timeout_seconds: float = Field(default=10.0, gt=0)

    # Quotas
    daily_battle_limit: int = Field(default=5, ge=1)
    max_favorites: int = Field(default=10, ge=1)

    # Arena timing
    presence_timeout_seconds: int = Field(default=300, ge=1)
    challenge_ttl_seconds: int = Field(default=30, ge=1)
    declined_notice_ttl_seconds: int = Field(default=10, ge=1)
    accepted_challenge_ttl_seconds: int = Field(default=600, ge=1)
    bot_battle_ttl_seconds: int = Field(default=600, ge=1)

    # Battle Configuration
    type_effectiveness_in_bot_battles: bool = Field(default=True)

    # Leaderboard Configuration
    leaderboard_min_battles: int = Field(default=5, ge=1)
    leaderboard_recent_battles: int = Field(default=10, ge=1)
    leaderboard_tiebreak: Literal["win_rate", "total_score"] = Field(default="win_rate")

    # Web Configuration
    web_host: str = Field(default="0.0.0.0")
    web_port: int = Field(default=8080, ge=1, le=65535)

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["console", "json"] = Field(default="console")

    # Development
    debug: bool = Field(default=False)

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
