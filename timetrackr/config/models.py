"""Configuration models using Pydantic."""

from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


class TimeTrackrConfig(BaseModel):
    """Date/time behaviour configuration."""

    timezone: str = Field(default="UTC", description="Default IANA timezone")
    just_now_seconds: int = Field(
        default=5, ge=0, description="Largest seconds-only gap rendered as just now"
    )
    just_now_text: str = Field(default="just now", description="Text for just now")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA identifier."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    debug: bool = Field(default=False, description="Enable debug logging")
    log_dir: Optional[str] = Field(default=None, description="Directory for log files")


class Settings(BaseModel):
    """Root settings model."""

    timetrackr: TimeTrackrConfig = Field(default_factory=TimeTrackrConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        """Pydantic configuration."""

        validate_assignment = True
        extra = "ignore"
