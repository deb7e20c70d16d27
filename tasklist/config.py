"""Service settings, read from TASKLIST_* environment variables and an optional .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASKLIST_"

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def _raw(key: str) -> Optional[str]:
    """Stripped value of TASKLIST_<key>; blank counts as unset."""
    value = os.getenv(ENV_PREFIX + key)
    if value is None or not value.strip():
        return None
    return value.strip()


def _as_int(key: str, default: int) -> int:
    value = _raw(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_flag(key: str, default: bool) -> bool:
    value = _raw(key)
    return default if value is None else value.lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class Settings:
    log_level: str
    data_dir: Path

    database_url: str
    sql_echo: bool

    host: str
    port: int

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv(override=False)

        data_dir_raw = _raw("DATA_DIR")
        data_dir = Path(data_dir_raw).expanduser() if data_dir_raw else Path(".local/tasklist")

        return Settings(
            log_level=_raw("LOG_LEVEL") or "INFO",
            data_dir=data_dir,
            database_url=_raw("DATABASE_URL") or f"sqlite:///{data_dir / 'tasks.sqlite3'}",
            sql_echo=_as_flag("SQL_ECHO", False),
            host=_raw("HOST") or "127.0.0.1",
            port=_as_int("PORT", 8000),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
