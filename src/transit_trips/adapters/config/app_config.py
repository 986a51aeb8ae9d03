"""12-factor configuration adapter using environment variables and an optional .env file."""

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transit_trips.adapters.motis_api.constants import TRANSITOUS_API_URL


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles.

    Every field can be set from the environment with the ``TT_`` prefix,
    e.g. ``TT_MOTIS_API_URL`` or ``TT_LOG_LEVEL``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend configuration
    motis_api_url: str = Field(
        default=TRANSITOUS_API_URL,
        description="Base URL of the MOTIS API, including the /api path segment",
    )
    http_timeout_seconds: float = Field(
        default=15.0, gt=0, description="Total timeout for one backend request in seconds"
    )
    user_agent: str = Field(
        default="transit-trips (+https://github.com/transit-trips/transit-trips)",
        description="User-Agent header sent to backends",
    )
    num_trips_requested: int = Field(
        default=6, ge=1, le=50, description="Number of itineraries to ask the backend for"
    )

    # Presentation
    timezone: str = Field(
        default="Europe/Berlin",
        description="IANA timezone applied to times whose offset is location specific",
    )

    # Diagnostics
    log_level: str = Field(default="INFO", description="Root log level")
    log_requests: bool = Field(
        default=False,
        description="Log every backend request and response (same as TT_LOG_REQUESTS=true)",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be an IANA timezone name, got '{v}'") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the logging module's level names."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"log_level must be a logging level name, got '{v}'")
        return level

    @field_validator("motis_api_url")
    @classmethod
    def validate_motis_api_url(cls, v: str) -> str:
        """Validate the URL is http(s) and strip a trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("motis_api_url must start with http:// or https://")
        return v.rstrip("/")
