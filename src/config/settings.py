from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_BACKENDS = ("auto", "sqlite", "blob")


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///pvf.db"
    # Runtime target: web | ios | android | native | desktop ...
    platform: str = "native"
    storage_backend: str = "auto"  # auto | sqlite | blob
    blob_storage_dir: str = ".herdbook"
    blob_storage_key: str = "pvf.animals"
    sqlite_journal_mode: str = "WAL"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("database_url")
    @classmethod
    def ensure_aiosqlite_scheme(cls, value: str) -> str:
        if value.startswith("sqlite://") and "+" not in value.split("://", 1)[0]:
            return value.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return value

    @field_validator("platform")
    @classmethod
    def normalize_platform(cls, value: str) -> str:
        return value.strip().lower() or "native"

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, value: str) -> str:
        value = value.strip().lower() or "auto"
        if value not in STORAGE_BACKENDS:
            raise ValueError(f"storage_backend must be one of {', '.join(STORAGE_BACKENDS)}")
        return value

    @field_validator("sqlite_journal_mode")
    @classmethod
    def normalize_journal_mode(cls, value: str) -> str:
        value = value.strip().upper()
        if not value.isalpha():
            raise ValueError("sqlite_journal_mode must be a plain journal mode name")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
