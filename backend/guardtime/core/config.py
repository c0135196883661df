import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "Guardtime Timekeeping API"
    database_url: str = Field(
        default="postgresql://postgres:postgres@db:5432/guardtime",
        description="Database connection string",
    )
    cors_origins: str = ""
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    otlp_endpoint: str | None = Field(default=None, description="OTLP endpoint for traces/metrics")

    # Hour computation
    timezone: str = Field(default="Asia/Manila", description="Local timezone for the night window")
    regular_hours_cap: float = 8.0
    night_start_hour: int = Field(default=22, ge=0, le=23)
    night_end_hour: int = Field(default=6, ge=0, le=23)
    night_diff_rate: float = 0.10
    night_diff_mode: Literal["flat", "overlap"] = "flat"
    max_shift_hours: float = 24.0

    # Payroll rollup
    overtime_premium: float = 1.25
    gov_table_version: str = "2025_v1"
    gov_tables_path: Path | None = None

    session_ttl_hours: int = 24 * 7

    model_config = SettingsConfigDict(env_prefix="GUARDTIME_", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.upper()

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def env_file_path(self) -> Path:
        env_specific = BASE_DIR / f".env.{self.env}"
        return env_specific if env_specific.exists() else BASE_DIR / ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("GUARDTIME_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


settings = get_settings()
