# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from urgency_ranker.config import Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    import os

    for name in list(os.environ):
        if name.startswith("URGENCY_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()
    assert s.data_dir == Path(".local/urgency")
    assert s.tasks_db_path == Path(".local/urgency/tasks.sqlite3")
    assert s.todo_keywords == ["TODO", "NEXT", "WAITING"]
    assert dict(s.urgency.priority_scores) == {"A": 6.0, "B": 3.9, "C": 1.8}
    assert dict(s.urgency.tag_scores) == {"next": 15.0}
    assert s.urgency.deadline_coefficient == 12.0
    assert s.urgency.max_age_days == 365
    assert s.urgency.inactive_state == "TODO"


def test_overrides_from_env(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("URGENCY_DATA_DIR", str(tmp_path))
    clean_env.setenv("URGENCY_PRIORITY_SCORES", "A=10, B=5 C=1")
    clean_env.setenv("URGENCY_TAG_SCORES", "next=20,someday=0")
    clean_env.setenv("URGENCY_BLOCKING_COEFFICIENT", "3.5")
    clean_env.setenv("URGENCY_INACTIVE_STATE", "open")
    clean_env.setenv("URGENCY_DONE_KEYWORDS", "done,dropped")

    s = Settings.from_env()
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert dict(s.urgency.priority_scores) == {"A": 10.0, "B": 5.0, "C": 1.0}
    assert dict(s.urgency.tag_scores) == {"next": 20.0, "someday": 0.0}
    assert s.urgency.blocking_coefficient == 3.5
    assert s.urgency.inactive_state == "OPEN"
    assert s.done_keywords == ["DONE", "DROPPED"]


def test_malformed_values_fall_back(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("URGENCY_PRIORITY_SCORES", "A=high")
    clean_env.setenv("URGENCY_TAG_SCORES", "next")
    clean_env.setenv("URGENCY_AGE_COEFFICIENT", "lots")
    clean_env.setenv("URGENCY_MAX_AGE_DAYS", "a year")

    s = Settings.from_env()
    assert dict(s.urgency.priority_scores) == {"A": 6.0, "B": 3.9, "C": 1.8}
    assert dict(s.urgency.tag_scores) == {"next": 15.0}
    assert s.urgency.age_coefficient == 2.0
    assert s.urgency.max_age_days == 365


def test_non_finite_values_fall_back(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("URGENCY_AGE_COEFFICIENT", "nan")
    clean_env.setenv("URGENCY_ACTIVITY_COEFFICIENT", "inf")
    clean_env.setenv("URGENCY_TAG_SCORES", "next=nan")
    clean_env.setenv("URGENCY_PRIORITY_SCORES", "A=6 B=-inf")

    s = Settings.from_env()
    assert s.urgency.age_coefficient == 2.0
    assert s.urgency.activity_coefficient == 4.0
    assert dict(s.urgency.tag_scores) == {"next": 15.0}
    assert dict(s.urgency.priority_scores) == {"A": 6.0, "B": 3.9, "C": 1.8}


def test_lower_case_priority_keys_match_stored_priorities(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("URGENCY_PRIORITY_SCORES", "a=6,b=2")

    s = Settings.from_env()
    assert dict(s.urgency.priority_scores) == {"A": 6.0, "B": 2.0}
