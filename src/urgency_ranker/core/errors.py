# src/urgency_ranker/core/errors.py

from __future__ import annotations


class UrgencyError(Exception):
    """Base class for errors surfaced by the urgency engine and its task store."""


class TaskNotFound(UrgencyError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class InvalidCachedScore(UrgencyError, ValueError):
    """
    The persisted urgency property exists but is not a number.

    Raised instead of recomputing so a corrupted cache is noticed.
    """

    def __init__(self, task_id: str, raw: str) -> None:
        super().__init__(f"Invalid cached urgency for task {task_id}: {raw!r}")
        self.task_id = task_id
        self.raw = raw
