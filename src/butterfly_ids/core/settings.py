"""Application settings and configuration.

Settings are loaded from environment variables (or a `.env` file) with
defaults suitable for a single local issuer.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from butterfly_ids.core.layout import MACHINE_MAX, TIMESTAMP_MAX


class Settings(BaseSettings):
    """Issuer settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Butterfly IDs", alias="APP_NAME")

    # Issuer seed values
    machine_id: int = Field(default=0, ge=0, le=MACHINE_MAX, alias="BUTTERFLY_MACHINE_ID")
    seed_timestamp: int | None = Field(
        default=None,
        ge=0,
        le=TIMESTAMP_MAX,
        alias="BUTTERFLY_SEED_TIMESTAMP",
    )

    # Command line defaults
    batch_size: int = Field(default=1, ge=0, alias="BUTTERFLY_BATCH_SIZE")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        alias="LOG_LEVEL",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept level names in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def seeds_from_clock(self) -> bool:
        """Return True when the issuer seed comes from the wall clock."""
        return self.seed_timestamp is None


settings = Settings()
