# src/urgency_ranker/urgency/breakdown.py

from __future__ import annotations

"""
Per-trait breakdown table.

Rendered from freshly evaluated traits (never from the cache), so it always
reflects the current task data and configuration:

    | Property | Coefficient | Value | Score |
    |-
    | Priority | 1.0 | 6.00 (A) | 6.00 |
    | Deadline | 12.00 | 1.00 <2026-10-01 Thu> | 12.00 |
    | Activity | 4.00 | 0.00 (inactive) | 0.00 |
    | Age | 2.00 | 0.00 (0d) | 0.00 |
    | Tag :Perl: | 1.00 | 1.0 | 1.00 |
    | Blocking 7 | 2.00 | 1.0 | 2.00 |
    |-
    | Total | | | 21.00 |
"""

from collections.abc import Iterable
from datetime import datetime

from .engine import UrgencyEngine, total_score
from .urgency_models import Trait, TraitScore

HEADER = "| Property | Coefficient | Value | Score |"
SEPARATOR = "|-"
UNIT = "1.0"


def format_row(row: TraitScore) -> str:
    if row.trait is Trait.PRIORITY:
        return f"| Priority | {UNIT} | {row.value:.2f} ({row.detail}) | {row.score:.2f} |"
    if row.trait is Trait.DEADLINE:
        return f"| Deadline | {row.coefficient:.2f} | {row.value:.2f} {row.detail} | {row.score:.2f} |"
    if row.trait is Trait.ACTIVITY:
        return f"| Activity | {row.coefficient:.2f} | {row.value:.2f} ({row.detail}) | {row.score:.2f} |"
    if row.trait is Trait.AGE:
        return f"| Age | {row.coefficient:.2f} | {row.value:.2f} ({row.detail}) | {row.score:.2f} |"
    # tags / blocking: one row per item, unit value
    return f"| {row.label} | {row.coefficient:.2f} | {UNIT} | {row.score:.2f} |"


def format_total(total: float) -> str:
    return f"| Total | | | {total:.2f} |"


def render_breakdown(traits: Iterable[TraitScore]) -> str:
    rows = list(traits)
    lines = [HEADER, SEPARATOR]
    lines.extend(format_row(r) for r in rows if r.present)
    lines.append(SEPARATOR)
    lines.append(format_total(total_score(rows)))
    return "\n".join(lines)


def describe_task(engine: UrgencyEngine, task_id: str, *, now: datetime | None = None) -> str:
    """Breakdown table for one task. Raises TaskNotFound for unknown ids."""
    return render_breakdown(engine.evaluate(task_id, now=now))
