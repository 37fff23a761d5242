# src/tickbar/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app, passed explicitly into constructors.
- Nothing read at import time except the optional .env file.
- Two bars can run side by side (tests, nested X sessions) by changing the port.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_PREFIX = "TICKBAR"

DEFAULT_PORT = 2227
DEFAULT_NUM_WORKERS = 2
DEFAULT_CHANNEL_CAPACITY = 100


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
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

    # ---- Control protocol ----
    host: str
    port: int
    channel_capacity: int

    # ---- Evaluation ----
    num_workers: int

    # ---- Bar definition / output ----
    bar_module: str
    draw_target: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tickbar").strip() or "tickbar"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tickbar"))

        host = _env(_k("HOST"), "127.0.0.1").strip() or "127.0.0.1"
        port = _env_int(_k("PORT"), DEFAULT_PORT)
        # A zero-capacity queue.Queue is unbounded; keep the inbox bounded.
        channel_capacity = max(1, _env_int(_k("CHANNEL_CAPACITY"), DEFAULT_CHANNEL_CAPACITY))

        # 0 disables the worker pool: every block evaluates inline.
        num_workers = max(0, _env_int(_k("NUM_WORKERS"), DEFAULT_NUM_WORKERS))

        bar_module = _env(_k("BAR_MODULE"), "tickbar.cli.default_bar").strip() or "tickbar.cli.default_bar"
        draw_target = _env(_k("DRAW_TARGET"), "xsetroot").strip().lower() or "xsetroot"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            host=host,
            port=port,
            channel_capacity=channel_capacity,
            num_workers=num_workers,
            bar_module=bar_module,
            draw_target=draw_target,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
