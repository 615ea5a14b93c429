"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger("uvicorn.error")

DB_PATH_ENV = "PITCHSIDE_DB_PATH"
REMINDER_LEAD_ENV = "PITCHSIDE_REMINDER_LEAD_MINUTES"
SUGGESTION_LIMIT_ENV = "PITCHSIDE_SUGGESTION_LIMIT"

_REMINDER_LEAD_DEFAULT = 5
_SUGGESTION_LIMIT_DEFAULT = 5
_DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "pitchside.sqlite"


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    db_path: Path | str
    reminder_lead_minutes: int
    suggestion_limit: int


def load_settings() -> Settings:
    """Read settings from the environment, falling back to defaults."""

    env_db = os.getenv(DB_PATH_ENV)
    db_path: Path | str
    if env_db:
        db_path = env_db if env_db.startswith("file:") else Path(env_db)
    else:
        db_path = _DEFAULT_DB_PATH
    return Settings(
        db_path=db_path,
        reminder_lead_minutes=_env_int(REMINDER_LEAD_ENV, _REMINDER_LEAD_DEFAULT, min_value=0),
        suggestion_limit=_env_int(SUGGESTION_LIMIT_ENV, _SUGGESTION_LIMIT_DEFAULT, min_value=1),
    )
