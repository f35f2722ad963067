# tests/test_traits.py

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from urgency_ranker.tasks.task_models import Task
from urgency_ranker.urgency.traits import (
    activity_trait,
    age_trait,
    blocking_traits,
    deadline_trait,
    priority_trait,
    scaled_age,
    scaled_deadline,
    tag_traits,
)
from urgency_ranker.urgency.urgency_models import UrgencyConfig

from .fakes import FakeTaskAccessor


def test_priority_unset_and_unknown_score_zero() -> None:
    cfg = UrgencyConfig()
    assert priority_trait(None, cfg).score == 0.0
    assert priority_trait(None, cfg).present is False
    assert priority_trait("D", cfg).score == 0.0
    assert priority_trait("D", cfg).present is True


def test_priority_uses_configured_table() -> None:
    cfg = UrgencyConfig()
    assert priority_trait("A", cfg).score == 6.0
    assert priority_trait("B", cfg).score == 3.9
    assert priority_trait("C", cfg).score == 1.8

    changed = replace(cfg, priority_scores={"A": 9.0, "B": 3.9, "C": 1.8})
    assert priority_trait("A", changed).score == 9.0
    assert priority_trait("B", changed).score == priority_trait("B", cfg).score
    assert priority_trait("C", changed).score == priority_trait("C", cfg).score


@pytest.mark.parametrize(
    ("distance", "expected"),
    [
        (30.0, 1.0),
        (7.0, 1.0),
        (0.0, (14 * 0.8 / 21) + 0.2),
        (-14.0, 0.2),
        (-15.0, 0.2),
        (-400.0, 0.2),
    ],
)
def test_scaled_deadline_curve(distance: float, expected: float) -> None:
    assert scaled_deadline(distance) == pytest.approx(expected)


def test_scaled_deadline_non_increasing_as_deadline_recedes() -> None:
    values = [scaled_deadline(d / 2) for d in range(14, -29, -1)]  # 7.0 down to -14.0
    assert all(a >= b for a, b in zip(values, values[1:]))
    assert scaled_deadline(0.0) == pytest.approx(0.7333, abs=1e-4)


def test_deadline_trait_absent_and_overdue(now) -> None:
    cfg = UrgencyConfig()
    absent = deadline_trait(None, now, cfg)
    assert absent.score == 0.0
    assert absent.present is False

    overdue = deadline_trait(now - timedelta(days=8), now, cfg)
    assert overdue.value == 1.0
    assert overdue.score == 12.0

    far = deadline_trait(now + timedelta(days=30), now, cfg)
    assert far.score == pytest.approx(12.0 * 0.2)


def test_scaled_age_is_clamped() -> None:
    assert scaled_age(0, 365) == 0.0
    assert scaled_age(-3, 365) == 0.0
    assert scaled_age(365, 365) == 1.0
    assert scaled_age(10_000, 365) == 1.0
    for days in (1, 50, 200, 364):
        assert 0.0 <= scaled_age(days, 365) <= 1.0


def test_age_trait_saturates_at_coefficient(now) -> None:
    cfg = UrgencyConfig()
    row = age_trait(now - timedelta(days=cfg.max_age_days), now, cfg)
    assert row.score == pytest.approx(cfg.age_coefficient)
    assert row.detail == "365d"
    assert age_trait(None, now, cfg).score == 0.0


def test_age_trait_drifts_with_now(now) -> None:
    cfg = UrgencyConfig()
    created = now - timedelta(days=73)
    earlier = age_trait(created, now, cfg).score
    later = age_trait(created, now + timedelta(days=73), cfg).score
    assert later == pytest.approx(earlier * 2)


def test_activity_trait_states() -> None:
    cfg = UrgencyConfig()
    assert activity_trait("TODO", cfg).score == 0.0
    assert activity_trait("TODO", cfg).detail == "inactive"
    assert activity_trait("NEXT", cfg).score == 4.0
    assert activity_trait("NEXT", cfg).detail == "active"
    assert activity_trait(None, cfg).score == 0.0
    assert activity_trait(None, cfg).present is False


def test_activity_inactive_label_is_configurable() -> None:
    cfg = UrgencyConfig(inactive_state="OPEN")
    assert activity_trait("OPEN", cfg).score == 0.0
    assert activity_trait("TODO", cfg).score == cfg.activity_coefficient


def test_tags_sum_with_default_and_overrides() -> None:
    cfg = UrgencyConfig()
    rows = tag_traits({"next", "other"}, cfg)
    assert sum(r.score for r in rows) == 16.0
    assert [r.label for r in rows] == ["Tag :next:", "Tag :other:"]
    assert tag_traits(frozenset(), cfg) == []


def test_tags_order_does_not_matter() -> None:
    cfg = UrgencyConfig(tag_scores={"urgent": 5.0})
    a = sum(r.score for r in tag_traits(["x", "urgent", "y"], cfg))
    b = sum(r.score for r in tag_traits(["y", "x", "urgent", "x"], cfg))
    assert a == b == 7.0


def test_blocking_counts_only_not_done_parents(now) -> None:
    acc = FakeTaskAccessor(
        [
            Task(id="p1", title="open parent", state="TODO"),
            Task(id="p2", title="closed parent", state="DONE"),
        ],
        now=now,
    )
    cfg = UrgencyConfig()
    rows = blocking_traits(["p1", "p2"], acc, cfg)
    assert sum(r.score for r in rows) == cfg.blocking_coefficient
    assert [r.label for r in rows] == ["Blocking p1"]


def test_blocking_ignores_dangling_parent(now) -> None:
    acc = FakeTaskAccessor([Task(id="p1", title="open parent", state="NEXT")], now=now)
    rows = blocking_traits(["missing", "p1"], acc, UrgencyConfig())
    assert sum(r.score for r in rows) == 2.0


def test_config_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        UrgencyConfig(deadline_coefficient=-1.0)
    with pytest.raises(ValueError):
        UrgencyConfig(tag_scores={"next": -2.0})
    with pytest.raises(ValueError):
        UrgencyConfig(max_age_days=0)


@pytest.mark.parametrize(
    "overrides",
    [
        {"activity_coefficient": float("nan")},
        {"deadline_coefficient": float("inf")},
        {"default_tag_score": float("-inf")},
        {"max_age_days": float("inf")},
        {"priority_scores": {"A": float("nan")}},
        {"tag_scores": {"next": float("nan")}},
    ],
)
def test_config_rejects_non_finite_values(overrides: dict) -> None:
    with pytest.raises(ValueError):
        UrgencyConfig(**overrides)


def test_config_normalizes_priority_keys_and_inactive_state() -> None:
    cfg = UrgencyConfig(priority_scores={" a ": 6.0, "b": 3.9}, tag_scores={"Perl": 2.0}, inactive_state=" open ")
    assert dict(cfg.priority_scores) == {"A": 6.0, "B": 3.9}
    assert dict(cfg.tag_scores) == {"Perl": 2.0}
    assert cfg.inactive_state == "OPEN"
    assert priority_trait("A", cfg).score == 6.0
    assert activity_trait("OPEN", cfg).value == 0.0
