"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every value can be overridden by an environment variable of the same name
    - get_settings() is cached: one Settings instance per process
    - DATABASE_URL in postgresql:// form is rewritten to the asyncpg driver
    - notifier_webhook_url unset -> assignment notices are only logged
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    database_url: str = (
        "postgresql+asyncpg://tasktrack:tasktrack@db:5432/tasktrack"
    )
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)

    # Upper bounds on collaborator calls
    repository_timeout_seconds: float = Field(10.0, gt=0)
    notifier_timeout_seconds: float = Field(5.0, gt=0)

    notifier_webhook_url: str | None = None

    # Set by the upstream authentication layer
    actor_header: str = "X-User-Id"

    cors_origins: list[str] = ["http://localhost:5173"]

    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_asyncpg_driver(cls, v):
        if isinstance(v, str) and v.startswith("postgresql://"):
            return "postgresql+asyncpg://" + v.removeprefix("postgresql://")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
