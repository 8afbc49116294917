"""Application configuration using Pydantic Settings"""

import logging
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(..., description="PostgreSQL database URL")
    database_ssl: bool = Field(default=True, description="Require SSL for database connections")
    database_command_timeout: float = Field(
        default=15.0, gt=0, description="Per-query timeout in seconds"
    )

    # Game server telemetry
    game_server_url: str = Field(
        default="https://impostor.me", description="Game server base URL for live stats"
    )
    telemetry_timeout: float = Field(
        default=5.0, gt=0, description="Timeout in seconds for the live stats request"
    )

    # Analytics
    timezone: str = Field(default="UTC", description="Reference time zone for DAU/WAU windows")
    history_days: int = Field(default=7, gt=0, description="Peak stat snapshots to return")
    match_sample_size: int = Field(
        default=1000, gt=0, description="Recent matches sampled for balance analytics"
    )
    leaderboard_size: int = Field(default=10, gt=0, description="Entries per leaderboard")
    feedback_limit: int | None = Field(
        default=None, gt=0, description="Cap on feedback entries (None = all)"
    )

    # Server URLs
    frontend_url: str = Field(default="http://localhost:3000", description="Frontend URL for CORS")

    # Environment
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, description="Server port")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown time zone '{v}'") from None
        return v

    @field_validator("game_server_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def tzinfo(self) -> ZoneInfo:
        """Reference time zone as a tzinfo object"""
        return ZoneInfo(self.timezone)

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS allowed origins"""
        return [self.frontend_url]

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()  # type: ignore[call-arg]
