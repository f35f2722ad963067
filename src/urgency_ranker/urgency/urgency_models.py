# src/urgency_ranker/urgency/urgency_models.py

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class Trait(StrEnum):
    PRIORITY = "priority"
    DEADLINE = "deadline"
    ACTIVITY = "activity"
    AGE = "age"
    TAGS = "tags"
    BLOCKING = "blocking"


def _frozen(mapping: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType({str(k): float(v) for k, v in mapping.items()})


@dataclass(frozen=True, slots=True)
class UrgencyConfig:
    """
    Coefficients and score tables used by the trait evaluators.

    Replace the whole value (dataclasses.replace) to change
    configuration; cached scores keep the values they were computed with.
    """

    priority_scores: Mapping[str, float] = field(
        default_factory=lambda: _frozen({"A": 6.0, "B": 3.9, "C": 1.8})
    )
    deadline_coefficient: float = 12.0
    activity_coefficient: float = 4.0
    age_coefficient: float = 2.0
    max_age_days: int = 365
    blocking_coefficient: float = 2.0
    default_tag_score: float = 1.0
    tag_scores: Mapping[str, float] = field(default_factory=lambda: _frozen({"next": 15.0}))
    inactive_state: str = "TODO"

    def __post_init__(self) -> None:
        # Stored priorities and states are upper case; match them here.
        priorities = {str(k).strip().upper(): v for k, v in self.priority_scores.items()}
        object.__setattr__(self, "priority_scores", _frozen(priorities))
        object.__setattr__(self, "tag_scores", _frozen(self.tag_scores))
        object.__setattr__(self, "inactive_state", self.inactive_state.strip().upper())

        if not math.isfinite(self.max_age_days) or self.max_age_days <= 0:
            raise ValueError("max_age_days must be a positive number")
        for name in (
            "deadline_coefficient",
            "activity_coefficient",
            "age_coefficient",
            "blocking_coefficient",
            "default_tag_score",
        ):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite, non-negative number")
        for table in ("priority_scores", "tag_scores"):
            bad = [k for k, v in getattr(self, table).items() if not math.isfinite(v) or v < 0]
            if bad:
                raise ValueError(f"{table} must be finite and non-negative: {', '.join(sorted(bad))}")


@dataclass(frozen=True, slots=True)
class TraitScore:
    """
    One evaluated trait.

    coefficient * value == score for the scaled traits (deadline, activity,
    age); priority/tags/blocking carry a unit coefficient or value instead.
    detail is the raw description shown in the breakdown, e.g. "A" or "12d".
    present is False when the underlying attribute is absent.
    """

    trait: Trait
    coefficient: float
    value: float
    score: float
    detail: str = ""
    present: bool = True
    label: str = ""
