import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import AnyHttpUrl, Field, PostgresDsn, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    env: str = Field(default="dev", description="Deployment environment")
    app_name: str = "REDE JB Overtime API"
    database_url: PostgresDsn | str = Field(
        default="sqlite:///./overtime.db",
        description="Database connection string",
    )
    cors_origins: Annotated[list[AnyHttpUrl], NoDecode] = []
    log_level: str = "INFO"
    sentry_dsn: str | None = Field(default=None, description="Sentry DSN for error monitoring")
    otlp_endpoint: str | None = Field(default=None, description="OTLP endpoint for traces/metrics")

    hourly_rate: float = Field(default=15.57, gt=0, description="Rate snapshotted onto new records")
    auto_lunch_threshold_hours: float = Field(
        default=6.0, description="Shift length that implies a lunch break when the client does not say"
    )
    allow_overnight_shifts: bool = True

    login_max_attempts: int = 5
    login_window_minutes: int = 15
    signup_max_attempts: int = 5
    signup_window_minutes: int = 15
    session_timeout_minutes: int = 480
    csrf_token_minutes: int = 30
    require_csrf: bool = False

    model_config = SettingsConfigDict(env_prefix="OVERTIME_", extra="ignore")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: str | list[AnyHttpUrl]) -> list[AnyHttpUrl]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=get_settings_env_file())


def get_settings_env_file() -> str | None:
    """Resolve environment-specific env file if it exists."""
    env = os.getenv("OVERTIME_ENV", "dev")
    env_file = BASE_DIR / f".env.{env}"
    default_file = BASE_DIR / ".env"
    if env_file.exists():
        return str(env_file)
    if default_file.exists():
        return str(default_file)
    return None


settings = get_settings()
