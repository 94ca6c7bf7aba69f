"""Configuration management for the foodshare core."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``FOODSHARE_*`` environment variables or ``.env``.

    The 24 hour reservation TTL is a fixed business rule and is
    intentionally not configurable here.
    """

    model_config = SettingsConfigDict(
        env_prefix="FOODSHARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(default=Path("data"), description="Directory of the JSON store")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="text", description="Log format")

    # Expiry sweep
    sweep_interval_seconds: int = Field(
        default=300, ge=1, description="Pause between runs of `reservation sweep --watch`"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper

    @property
    def data_file(self) -> Path:
        return self.data_dir / "foodshare.json"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
