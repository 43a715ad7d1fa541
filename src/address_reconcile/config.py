"""Runtime configuration loaded from environment variables and ``.env``."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ADDRESS_RECONCILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Minimum log level to emit")
    log_dir: str | None = Field(default=None, description="Directory for rotating log files")

    # Batch processing
    max_workers: int | None = Field(
        default=None,
        description="Worker threads for compare operations (None uses the executor default)",
        gt=0,
    )
    show_progress: bool = Field(default=True, description="Show progress bars on the terminal")

    # Drift
    drift_minimum: float = Field(
        default=0.0,
        description="Coordinate distance a shared label must exceed to be reported as drift",
        ge=0.0,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Invalid log_level: {v}"
            raise ValueError(msg)
        return level


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
