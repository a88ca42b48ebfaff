"""Application configuration settings."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

UNSUPPORTED_DB_TYPE_MESSAGE = (
    "Unsupported database type. Set DB_TYPE to 'postgres' or 'sqlite'"
)

_POSTGRES_SCHEMES = ("postgres://", "postgresql://")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(case_sensitive=False)

    # Application
    app_name: str = "Users API"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    # Database
    db_type: Literal["postgres", "sqlite"]
    database_url: str | None = None
    sqlite_path: str = "users.db"
    database_echo: bool = False

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: object) -> object:
        """Accept LOG_FORMAT in any case."""
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_database_url(self) -> "Settings":
        """Postgres needs an explicit connection string."""
        if self.db_type == "postgres" and not self.database_url:
            raise ValueError("DATABASE_URL is required when DB_TYPE is 'postgres'")
        return self

    @property
    def sqlalchemy_url(self) -> str:
        """Async SQLAlchemy URL for the selected database."""
        if self.db_type == "sqlite":
            return f"sqlite+aiosqlite:///{self.sqlite_path}"

        url = self.database_url or ""
        for scheme in _POSTGRES_SCHEMES:
            if url.startswith(scheme):
                return "postgresql+asyncpg://" + url[len(scheme):]
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
