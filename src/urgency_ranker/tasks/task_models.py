# src/urgency_ranker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

URGENCY_PROPERTY = "URGENCY"


@dataclass(frozen=True, slots=True)
class Task:
    """
    A stored task.

    Notes:
    - tags are the task's own tags; inherited tags come from the outline
      ancestry (outline_parent_id) and are resolved by the store.
    - parents are the tasks this one is blocked by; children is the inverse
      and is informational only.
    """

    id: str
    title: str
    state: str | None = None
    priority: str | None = None
    deadline: datetime | None = None
    created_at: datetime | None = None

    tags: frozenset[str] = frozenset()
    parents: tuple[str, ...] = ()
    children: tuple[str, ...] = ()
    outline_parent_id: str | None = None

    properties: dict[str, str] = field(default_factory=dict, compare=False)
