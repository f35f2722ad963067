# src/urgency_ranker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Urgency coefficients are carried as an UrgencyConfig value; the engine gets
  it explicitly instead of reading this module.
- Malformed values fall back to defaults.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .urgency.urgency_models import UrgencyConfig

ENV_PREFIX = "URGENCY"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


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


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_score_map(name: str, default: dict[str, float]) -> dict[str, float]:
    """
    Parse "A=6.0,B=3.9" (commas or whitespace between pairs).

    Any malformed or non-finite pair discards the whole value and returns the default.
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return dict(default)
    out: dict[str, float] = {}
    for pair in raw.replace(",", " ").split():
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            return dict(default)
        try:
            score = float(value)
        except ValueError:
            return dict(default)
        if not math.isfinite(score):
            return dict(default)
        out[key.strip()] = score
    return out


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    # ---- Task states ----
    todo_keywords: list[str]
    done_keywords: list[str]

    # ---- Urgency coefficients ----
    urgency: UrgencyConfig

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "urgency-ranker")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/urgency"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        todo_keywords = [k.upper() for k in _env_list(_k("TODO_KEYWORDS"), ["TODO", "NEXT", "WAITING"])]
        done_keywords = [k.upper() for k in _env_list(_k("DONE_KEYWORDS"), ["DONE", "CANCELLED"])]

        defaults = UrgencyConfig()
        urgency = UrgencyConfig(
            priority_scores=_env_score_map(_k("PRIORITY_SCORES"), dict(defaults.priority_scores)),
            deadline_coefficient=_env_float(_k("DEADLINE_COEFFICIENT"), defaults.deadline_coefficient),
            activity_coefficient=_env_float(_k("ACTIVITY_COEFFICIENT"), defaults.activity_coefficient),
            age_coefficient=_env_float(_k("AGE_COEFFICIENT"), defaults.age_coefficient),
            max_age_days=max(1, _env_int(_k("MAX_AGE_DAYS"), defaults.max_age_days)),
            blocking_coefficient=_env_float(_k("BLOCKING_COEFFICIENT"), defaults.blocking_coefficient),
            default_tag_score=_env_float(_k("DEFAULT_TAG_SCORE"), defaults.default_tag_score),
            tag_scores=_env_score_map(_k("TAG_SCORES"), dict(defaults.tag_scores)),
            inactive_state=_env(_k("INACTIVE_STATE"), defaults.inactive_state).strip().upper()
            or defaults.inactive_state,
        )

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            todo_keywords=todo_keywords,
            done_keywords=done_keywords,
            urgency=urgency,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
