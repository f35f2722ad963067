# src/urgency_ranker/urgency/traits.py

from __future__ import annotations

"""
Trait evaluators.

Each evaluator is a pure function of the task data it needs (plus "now" for
the time-based traits) and returns TraitScore rows:

- priority: configured score of the priority letter
- deadline: coefficient * piecewise-linear proximity (0.2 .. 1.0)
- activity: coefficient when the state is not the inactive label
- age: coefficient * days since creation / max_age_days (capped at 1.0)
- tags: one row per effective tag (per-tag score or the default)
- blocking: one row per blocking parent that is still actionable

Time-based traits drift: the same stored timestamps score differently when
evaluated at a different "now".
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from ..core.errors import TaskNotFound
from ..core.ports import TaskAccessor
from ..tasks.task_fields import days_between, format_date
from ..tasks.task_models import Task
from .urgency_models import Trait, TraitScore, UrgencyConfig

logger = logging.getLogger(__name__)

DEADLINE_MAX_DAYS = 7.0  # overdue by a week or more -> 1.0
DEADLINE_MIN_DAYS = -14.0  # due in more than two weeks -> 0.2
DEADLINE_FLOOR = 0.2
DEADLINE_SPAN = DEADLINE_MAX_DAYS - DEADLINE_MIN_DAYS


def scaled_deadline(distance_days: float) -> float:
    """
    Map days past the deadline to [0.2, 1.0].

    Positive distance means overdue, negative means still ahead.
    """
    if distance_days >= DEADLINE_MAX_DAYS:
        return 1.0
    if distance_days >= DEADLINE_MIN_DAYS:
        return ((distance_days - DEADLINE_MIN_DAYS) * (1.0 - DEADLINE_FLOOR) / DEADLINE_SPAN) + DEADLINE_FLOOR
    return DEADLINE_FLOOR


def scaled_age(age_days: float, max_age_days: float) -> float:
    if age_days <= 0:
        return 0.0
    return min(age_days / max_age_days, 1.0)


def priority_trait(priority: str | None, config: UrgencyConfig) -> TraitScore:
    if not priority:
        return TraitScore(Trait.PRIORITY, 1.0, 0.0, 0.0, present=False)
    score = float(config.priority_scores.get(priority, 0.0))
    return TraitScore(Trait.PRIORITY, 1.0, score, score, detail=priority)


def deadline_trait(deadline: datetime | None, now: datetime, config: UrgencyConfig) -> TraitScore:
    if deadline is None:
        return TraitScore(Trait.DEADLINE, config.deadline_coefficient, 0.0, 0.0, present=False)
    value = scaled_deadline(days_between(now, deadline))
    return TraitScore(
        Trait.DEADLINE,
        config.deadline_coefficient,
        value,
        config.deadline_coefficient * value,
        detail=format_date(deadline),
    )


def activity_trait(state: str | None, config: UrgencyConfig) -> TraitScore:
    coefficient = config.activity_coefficient
    if not state:
        return TraitScore(Trait.ACTIVITY, coefficient, 0.0, 0.0, present=False)
    # Any label other than the inactive one counts, done labels included.
    if state != config.inactive_state:
        return TraitScore(Trait.ACTIVITY, coefficient, 1.0, coefficient, detail="active")
    return TraitScore(Trait.ACTIVITY, coefficient, 0.0, 0.0, detail="inactive")


def age_trait(created_at: datetime | None, now: datetime, config: UrgencyConfig) -> TraitScore:
    if created_at is None:
        return TraitScore(Trait.AGE, config.age_coefficient, 0.0, 0.0, present=False)
    age_days = days_between(now, created_at)
    value = scaled_age(age_days, config.max_age_days)
    return TraitScore(
        Trait.AGE,
        config.age_coefficient,
        value,
        config.age_coefficient * value,
        detail=f"{max(0, int(age_days))}d",
    )


def tag_traits(tags: Iterable[str], config: UrgencyConfig) -> list[TraitScore]:
    rows: list[TraitScore] = []
    for tag in sorted(set(tags)):
        score = float(config.tag_scores.get(tag, config.default_tag_score))
        rows.append(TraitScore(Trait.TAGS, score, 1.0, score, detail=tag, label=f"Tag :{tag}:"))
    return rows


def blocking_traits(
    parents: Iterable[str],
    accessor: TaskAccessor,
    config: UrgencyConfig,
) -> list[TraitScore]:
    """One row per parent that still blocks; done and dangling parents score 0."""
    rows: list[TraitScore] = []
    coefficient = config.blocking_coefficient
    for parent_id in parents:
        try:
            accessor.resolve_task(parent_id)
            blocking = accessor.is_actionable_not_done(parent_id)
        except TaskNotFound:
            logger.debug("Ignoring dangling blocking parent id=%s", parent_id)
            continue
        if blocking:
            rows.append(
                TraitScore(
                    Trait.BLOCKING,
                    coefficient,
                    1.0,
                    coefficient,
                    detail=parent_id,
                    label=f"Blocking {parent_id}",
                )
            )
    return rows


def evaluate_traits(
    task: Task,
    accessor: TaskAccessor,
    config: UrgencyConfig,
    now: datetime,
) -> list[TraitScore]:
    """All trait rows for a task, in breakdown order."""
    rows = [
        priority_trait(task.priority, config),
        deadline_trait(task.deadline, now, config),
        activity_trait(task.state, config),
        age_trait(task.created_at, now, config),
    ]
    rows.extend(tag_traits(accessor.get_tags(task.id, include_inherited=True), config))
    rows.extend(blocking_traits(task.parents, accessor, config))
    return rows
