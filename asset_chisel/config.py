from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    log_level: str = "INFO"
    db_path: str = "asset_chisel.db"
    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    port: int = 5000


def _env(key: str, default: str) -> str:
    # empty values count as unset
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def load_settings() -> Settings:
    """
    Loads settings from environment variables, after pulling in a local .env.
    """
    load_dotenv()

    origins_raw = _env("CORS_ORIGINS", ",".join(DEFAULT_CORS_ORIGINS))
    origins = tuple(origin.strip() for origin in origins_raw.split(",") if origin.strip())

    return Settings(
        env=_env("ASSET_CHISEL_ENV", "dev"),
        log_level=_env("LOG_LEVEL", "INFO"),
        db_path=_env("ASSET_CHISEL_DB_PATH", "asset_chisel.db"),
        cors_origins=origins,
        port=int(_env("PORT", "5000")),
    )
