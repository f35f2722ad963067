# src/urgency_ranker/tasks/task_fields.py

from __future__ import annotations

"""
Parsing and formatting of stored task fields.

Storage format:
- tags: outline style ":work:next:" (duplicates collapse, order is irrelevant)
- id lists (parents/children): whitespace or comma separated ids
- timestamps: REAL unix seconds in SQLite, aware datetimes in Python
"""

import re
from collections.abc import Iterable
from datetime import UTC, datetime

_TAG_RE = re.compile(r"^[\w@#%]+$")


def parse_tags(raw: str | None) -> frozenset[str]:
    """":a:b:" -> {"a", "b"}. Blank segments are ignored."""
    if not raw:
        return frozenset()
    return frozenset(p.strip() for p in raw.split(":") if p.strip())


def format_tags(tags: Iterable[str]) -> str:
    clean = sorted({t.strip().strip(":") for t in tags if t and t.strip().strip(":")})
    if not clean:
        return ""
    return ":" + ":".join(clean) + ":"


def is_valid_tag(tag: str) -> bool:
    return bool(_TAG_RE.match(tag))


def parse_id_list(raw: str | None) -> tuple[str, ...]:
    """Split an id list keeping the first occurrence of each id, in order."""
    if not raw:
        return ()
    out: list[str] = []
    for part in raw.replace(",", " ").split():
        if part not in out:
            out.append(part)
    return tuple(out)


def format_id_list(ids: Iterable[str]) -> str:
    return " ".join(parse_id_list(" ".join(ids)))


def ts_to_datetime(ts: float | None) -> datetime | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(float(ts), tz=UTC)


def datetime_to_ts(dt: datetime | None) -> float | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.timestamp()


def parse_date(raw: str) -> datetime:
    """
    Parse "YYYY-MM-DD" or "YYYY-MM-DD HH:MM" (also ISO with offset).

    Naive values are taken as UTC. Raises ValueError on garbage.
    """
    text = raw.strip()
    if not text:
        raise ValueError("empty date")
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def format_date(dt: datetime) -> str:
    """Outline-style active timestamp, e.g. "<2026-10-01 Thu>"."""
    if dt.hour or dt.minute:
        return dt.strftime("<%Y-%m-%d %a %H:%M>")
    return dt.strftime("<%Y-%m-%d %a>")


def days_between(now: datetime, ts: datetime) -> float:
    """Fractional days from ts to now: positive when ts lies in the past."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return (now - ts).total_seconds() / 86400.0
