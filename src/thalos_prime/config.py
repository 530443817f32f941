# src/thalos_prime/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
- Bad numeric values fall back to defaults instead of crashing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "THALOS"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- HTTP front door ----
    http_host: str
    http_port: int

    # ---- Execution ----
    work_delay_seconds: float
    wait_timeout_seconds: float

    # ---- Presentation ----
    recent_tasks_limit: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Thalos Prime")
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/thalos"))

        http_host = _env(_k("HTTP_HOST"), "0.0.0.0")
        raw_port = _first_env(_k("HTTP_PORT"), "PORT", default="8000") or "8000"
        try:
            http_port = int(raw_port)
        except ValueError:
            http_port = 8000

        work_delay_seconds = max(0.0, _env_float(_k("WORK_DELAY_SECONDS"), 0.0))
        wait_timeout_seconds = max(0.1, _env_float(_k("WAIT_TIMEOUT_SECONDS"), 30.0))
        recent_tasks_limit = max(1, _env_int(_k("RECENT_TASKS_LIMIT"), 10))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            http_host=http_host,
            http_port=http_port,
            work_delay_seconds=work_delay_seconds,
            wait_timeout_seconds=wait_timeout_seconds,
            recent_tasks_limit=recent_tasks_limit,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(override=False)
    return Settings.from_env()
