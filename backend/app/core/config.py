"""Application settings and environment configuration loading."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.storage_backend import StorageBackend

BACKEND_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ENV_FILE = BACKEND_ROOT / ".env"
LOG_FORMATS = frozenset({"text", "json"})


class Settings(BaseSettings):
    """Typed runtime configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        # Load `backend/.env` regardless of current working directory.
        env_file=[DEFAULT_ENV_FILE, ".env"],
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "dev"
    database_url: str = "sqlite+aiosqlite:///./data/kanban.db"

    # Entity store: "sql" uses `database_url`, "json" keeps one JSON document on disk.
    storage_backend: StorageBackend = StorageBackend.SQL
    json_store_path: str = "./data/kanban.json"

    cors_origins: str = ""

    # Database lifecycle
    db_auto_migrate: bool = False
    seed_default_board: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    log_use_utc: bool = False
    request_log_slow_ms: int = Field(default=1000, ge=0)
    request_log_include_health: bool = False

    @model_validator(mode="after")
    def _defaults(self) -> Self:
        self.log_format = self.log_format.strip().lower()
        if self.log_format not in LOG_FORMATS:
            raise ValueError("LOG_FORMAT must be one of: json, text.")
        if self.storage_backend == StorageBackend.JSON and not self.json_store_path.strip():
            raise ValueError(
                "JSON_STORE_PATH must be set and non-empty when STORAGE_BACKEND=json.",
            )
        # In dev, default to applying Alembic migrations at startup to avoid
        # schema drift.
        if "db_auto_migrate" not in self.model_fields_set and self.environment == "dev":
            self.db_auto_migrate = True
        return self


settings = Settings()
