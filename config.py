from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from appdirs import user_log_dir
from dotenv import load_dotenv


@dataclass
class Settings:
    database_url: str = ""
    log_dir: str = field(default_factory=lambda: user_log_dir("timely_crm"))
    log_level: str = "INFO"
    detailed_logging: bool = False
    api_base_url: str = "http://localhost:4000/api"
    api_timeout: float = 10.0
    performed_by: str = "admin"


def _parse_timeout(raw: str | None, default: float) -> float:
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@lru_cache()
def get_settings() -> Settings:
    dotenv_path = Path(__file__).resolve().parent / ".env"
    load_dotenv(dotenv_path)

    return Settings(
        database_url=os.getenv("DATABASE_URL", ""),
        log_dir=os.getenv("LOG_DIR") or user_log_dir("timely_crm"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        detailed_logging=os.getenv("DETAILED_LOGGING", "0").lower() in {"1", "true", "yes", "on"},
        api_base_url=os.getenv("TIMELY_API_URL", "http://localhost:4000/api").rstrip("/"),
        api_timeout=_parse_timeout(os.getenv("TIMELY_API_TIMEOUT"), 10.0),
        performed_by=os.getenv("TIMELY_PERFORMED_BY", "admin"),
    )
