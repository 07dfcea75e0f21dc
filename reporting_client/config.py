"""
Configuration for the reporting client.

Values are read from REPORTING_* environment variables, or from a .env file
in the working directory. Per-call RunOptions always take precedence.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Defaults used when a run does not override them."""

    # Portal used when the caller does not name one
    DEFAULT_PORTAL_URL: str = "https://www.arcgis.com"

    # Transport
    REQUEST_TIMEOUT: float = 30.0

    # Job watching
    POLL_INTERVAL: float = 1.0
    MAX_POLL_ATTEMPTS: int | None = None  # None polls until the job ends
    USE_POLLING: bool = False

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="REPORTING_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore
