# tests/fakes.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from urgency_ranker.core.errors import TaskNotFound
from urgency_ranker.tasks.task_models import Task


class FakeTaskAccessor:
    """
    In-memory TaskAccessor for unit tests.

    - No inheritance: tags are the task's own tags
    - Captures property writes for assertions
    """

    def __init__(
        self,
        tasks: list[Task] | None = None,
        *,
        now: datetime,
        todo_keywords: tuple[str, ...] = ("TODO", "NEXT"),
    ) -> None:
        self.tasks: dict[str, Task] = {t.id: t for t in tasks or []}
        self.properties: dict[tuple[str, str], str] = {}
        self.writes: list[tuple[str, str, str]] = []
        self.todo_keywords = todo_keywords
        self._now = now

    def add(self, task: Task) -> Task:
        self.tasks[task.id] = task
        return task

    def change(self, task_id: str, **fields) -> None:
        self.tasks[task_id] = replace(self.resolve_task(task_id), **fields)

    def resolve_task(self, task_id: str) -> Task:
        try:
            return self.tasks[task_id]
        except KeyError:
            raise TaskNotFound(task_id) from None

    def get_property(self, task_id: str, name: str) -> str | None:
        self.resolve_task(task_id)
        return self.properties.get((task_id, name))

    def set_property(self, task_id: str, name: str, value: str) -> None:
        self.resolve_task(task_id)
        self.properties[(task_id, name)] = value
        self.writes.append((task_id, name, value))

    def delete_property(self, task_id: str, name: str) -> None:
        self.properties.pop((task_id, name), None)

    def is_actionable_not_done(self, task_id: str) -> bool:
        return self.resolve_task(task_id).state in self.todo_keywords

    def get_tags(self, task_id: str, include_inherited: bool = True) -> frozenset[str]:
        return self.resolve_task(task_id).tags

    def now(self) -> datetime:
        return self._now
