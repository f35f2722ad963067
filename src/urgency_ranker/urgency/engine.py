# src/urgency_ranker/urgency/engine.py

from __future__ import annotations

import functools
import logging
import math
from collections.abc import Iterable
from datetime import datetime

from ..core.errors import InvalidCachedScore
from ..core.ports import TaskAccessor
from ..tasks.task_models import URGENCY_PROPERTY, Task
from .traits import evaluate_traits
from .urgency_models import TraitScore, UrgencyConfig

logger = logging.getLogger(__name__)


def total_score(traits: Iterable[TraitScore]) -> float:
    """Plain sum of all trait rows."""
    return float(sum(t.score for t in traits))


class UrgencyEngine:
    """
    Scores tasks and memoizes the result in the URGENCY property.

    The cache is never invalidated automatically: get_urgency_score returns
    whatever is stored, update_urgency_score recomputes. Replacing `config`
    affects the next computation only.
    """

    def __init__(
        self,
        accessor: TaskAccessor,
        config: UrgencyConfig | None = None,
        *,
        property_name: str = URGENCY_PROPERTY,
    ) -> None:
        self.accessor = accessor
        self.config = config or UrgencyConfig()
        self.property_name = property_name

    def _now(self, now: datetime | None) -> datetime:
        return now if now is not None else self.accessor.now()

    # ---- scoring ----

    def evaluate(self, task_id: str, *, now: datetime | None = None) -> list[TraitScore]:
        """Fresh trait rows for a task (bypasses the cache)."""
        task: Task = self.accessor.resolve_task(task_id)
        return evaluate_traits(task, self.accessor, self.config, self._now(now))

    def compute_score(self, task_id: str, *, now: datetime | None = None) -> float:
        return total_score(self.evaluate(task_id, now=now))

    # ---- cache ----

    def get_urgency_score(self, task_id: str, *, now: datetime | None = None) -> float:
        raw = self.accessor.get_property(task_id, self.property_name)
        if raw is None:
            return self.update_urgency_score(task_id, now=now)
        try:
            score = float(raw)
        except ValueError:
            raise InvalidCachedScore(task_id, raw) from None
        if not math.isfinite(score):
            raise InvalidCachedScore(task_id, raw)
        logger.debug("Urgency cache hit task=%s score=%s", task_id, score)
        return score

    def update_urgency_score(self, task_id: str, *, now: datetime | None = None) -> float:
        score = self.compute_score(task_id, now=now)
        self.accessor.set_property(task_id, self.property_name, repr(score))
        logger.debug("Urgency recomputed task=%s score=%.2f", task_id, score)
        return score

    def refresh_all(self, task_ids: Iterable[str], *, now: datetime | None = None) -> dict[str, float]:
        """Recompute a batch against a single "now"."""
        moment = self._now(now)
        out = {tid: self.update_urgency_score(tid, now=moment) for tid in task_ids}
        logger.info("Urgency refreshed for %d task(s)", len(out))
        return out

    def clear_urgency_score(self, task_id: str) -> None:
        """Drop the cached value so the next read recomputes."""
        self.accessor.delete_property(task_id, self.property_name)

    # ---- ordering ----

    def compare(self, task_a: str, task_b: str, *, now: datetime | None = None) -> int:
        """
        cmp-style comparator: negative when task_a sorts first.

        Higher urgency sorts first; equal scores compare as 0 so a stable
        sort keeps their input order.
        """
        score_a = self.get_urgency_score(task_a, now=now)
        score_b = self.get_urgency_score(task_b, now=now)
        if score_a > score_b:
            return -1
        if score_a < score_b:
            return 1
        return 0

    def sort_by_urgency(self, task_ids: Iterable[str], *, now: datetime | None = None) -> list[str]:
        moment = self._now(now)
        key = functools.cmp_to_key(lambda a, b: self.compare(a, b, now=moment))
        return sorted(task_ids, key=key)
