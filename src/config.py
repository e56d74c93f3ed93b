from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    database_file: Path = Path("exchange_ledger.db")
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="EXCHANGE_LEDGER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@cache
def config() -> AppSettings:
    return AppSettings()
