"""Bypass rate, average lead time, and the composite health score.

The health score is a heuristic, not a statistically validated measure. It
starts at 100 and subtracts three penalties:

- aged: one point per aged item, capped at ``AGED_PENALTY_CAP``;
- bypass: ``BYPASS_PENALTY_FACTOR`` points per percent of bypassed finished items;
- lead: half the average lead time in days, capped at ``LEAD_PENALTY_CAP``.

The result is floored at 0. Changing any constant changes the score contract.
"""

from __future__ import annotations

from collections.abc import Iterable

from farol_app.core.models import WorkItem

from .aging import round_half_up

AGED_PENALTY_CAP = 70
BYPASS_PENALTY_FACTOR = 0.5
LEAD_PENALTY_CAP = 30
LEAD_PENALTY_DIVISOR = 2


def bypass_rate(items: Iterable[WorkItem]) -> int:
    """Percentage of finished items flagged as bypass; 0 with nothing finished."""
    finished = [it for it in items if it.finished]
    if not finished:
        return 0
    bypassed = sum(1 for it in finished if it.bypass)
    return round_half_up(100 * bypassed / len(finished))


def lead_average(items: Iterable[WorkItem]) -> int | None:
    values = [it.lead_days for it in items if it.lead_days is not None]
    if not values:
        return None
    return round_half_up(sum(values) / len(values))


def health_score(aged_count: int, bypass_pct: int, lead_avg: int | None) -> int:
    aged_penalty = min(AGED_PENALTY_CAP, aged_count)
    bypass_penalty = round_half_up(bypass_pct * BYPASS_PENALTY_FACTOR)
    lead_penalty = 0
    if lead_avg:
        lead_penalty = min(LEAD_PENALTY_CAP, round_half_up(lead_avg / LEAD_PENALTY_DIVISOR))
    return max(0, 100 - (aged_penalty + bypass_penalty + lead_penalty))
