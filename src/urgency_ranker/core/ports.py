# src/urgency_ranker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the urgency engine.

The engine depends on this Protocol instead of a concrete store.
This keeps the storage swappable (SQLite, in-memory fakes in tests).
"""

from datetime import datetime
from typing import Any, Protocol


class TaskAccessor(Protocol):
    """
    Host-side task access.

    resolve_task raises TaskNotFound for unknown ids.
    Properties are plain strings; None means "not set".
    delete_property is a no-op for a property that is not set.
    """

    def get_property(self, task_id: str, name: str) -> str | None: ...
    def set_property(self, task_id: str, name: str, value: str) -> None: ...
    def delete_property(self, task_id: str, name: str) -> None: ...
    def resolve_task(self, task_id: str) -> Any: ...
    def is_actionable_not_done(self, task_id: str) -> bool: ...
    def get_tags(self, task_id: str, include_inherited: bool = True) -> frozenset[str]: ...
    def now(self) -> datetime: ...
