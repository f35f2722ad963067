# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from urgency_ranker.core.state import AppState
from urgency_ranker.tasks.task_store import TaskStore
from urgency_ranker.urgency.engine import UrgencyEngine
from urgency_ranker.urgency.urgency_models import UrgencyConfig

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture()
def now() -> datetime:
    """A fixed "current moment" so time-based traits are deterministic."""
    return NOW


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="urgency-test",
        log_level="INFO",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        todo_keywords=["TODO", "NEXT", "WAITING"],
        done_keywords=["DONE", "CANCELLED"],
        urgency=UrgencyConfig(),
    )


@pytest.fixture()
def store(settings: SimpleNamespace, now: datetime) -> TaskStore:
    return TaskStore(
        settings.tasks_db_path,
        todo_keywords=settings.todo_keywords,
        done_keywords=settings.done_keywords,
        clock=lambda: now,
    )


@pytest.fixture()
def engine(store: TaskStore, settings: SimpleNamespace) -> UrgencyEngine:
    return UrgencyEngine(store, settings.urgency)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, engine: UrgencyEngine) -> AppState:
    """
    AppState wired with a real SQLite store (its behaviour is part of what we test)
    and a frozen clock.
    """
    return AppState(settings=settings, task_store=store, engine=engine)
