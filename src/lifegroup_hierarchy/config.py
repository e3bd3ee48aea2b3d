"""Configuration management for the hierarchy engine."""

from datetime import tzinfo
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings

from lifegroup_hierarchy.utils.reporting_window import resolve_timezone


class EngineSettings(BaseSettings):
    """Engine configuration, read from LIFEGROUP_* environment variables."""

    log_level: str = Field("INFO")
    report_deadline_hour: int = Field(12, ge=0, le=23)
    timezone: Optional[str] = Field(None)
    birthday_window_days: int = Field(7, ge=1, le=60)
    include_inactive_in_checkins: bool = Field(True)

    class Config:
        env_prefix = "LIFEGROUP_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @validator("log_level")
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v!r}")
        return level

    @validator("timezone")
    def validate_timezone(cls, v):
        """Reject timezone names the system database does not know."""
        return v if resolve_timezone(v) is not None else None

    def get_tzinfo(self) -> Optional[tzinfo]:
        return resolve_timezone(self.timezone)

    @classmethod
    def load(cls) -> "EngineSettings":
        """Load settings from environment."""
        return cls()


# Global settings instance
settings = EngineSettings.load()
