"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (api_secret, admin_password) come from the environment or .env
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - Defaults work out-of-the-box for a local event; production overrides via env
    - Round capacity enforcement and the countdown precondition are switchable
      so an organiser can fall back to the permissive event-day behaviour
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./spinround.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 5

    # Access
    api_secret: str = "spinround-dev-secret"
    admin_name: str = "uxcellence"
    admin_password: str = ""

    # Rounds
    enforce_round_capacity: bool = True

    # Reveal gate
    countdown_seconds: int = 3
    countdown_requires_all_assigned: bool = True
    countdown_auto_start: bool = False

    # Clients
    poll_interval_seconds: int = 3
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
