"""Dashboard-level aggregation over a snapshot of work items."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, time, timedelta
from types import MappingProxyType

from farol_app.analytics.aggregations.assignee import lead_by_assignee
from farol_app.analytics.aggregations.daily import done_by_weekday
from farol_app.core.config import DEFAULT_TOP_AGED, DEFAULT_TOP_ASSIGNEES
from farol_app.core.models import DashboardMetrics, WorkItem
from farol_app.core.stages import OTHER_CATEGORY, StageCategory, StageClassification

from .aging import localize
from .scoring import bypass_rate, health_score, lead_average


def start_of_day(now: datetime, tz) -> datetime:
    local = localize(now, tz)
    return tz.localize(datetime.combine(local.date(), time.min))


def week_range(now: datetime, tz) -> tuple[datetime, datetime]:
    """Monday 00:00 to Sunday 23:59:59.999999 of the week containing ``now``."""
    local = localize(now, tz)
    monday = local.date() - timedelta(days=local.weekday())
    sunday = monday + timedelta(days=6)
    return (
        tz.localize(datetime.combine(monday, time.min)),
        tz.localize(datetime.combine(sunday, time.max)),
    )


def rank_by_aging(items: Sequence[WorkItem], limit: int = DEFAULT_TOP_AGED) -> list[WorkItem]:
    return sorted(items, key=lambda it: it.aging_days or 0, reverse=True)[:limit]


def count_by_category(items: Sequence[WorkItem], classification: StageClassification) -> dict[str, int]:
    counts = {c.value: 0 for c in StageCategory}
    counts[OTHER_CATEGORY] = 0
    for it in items:
        counts[classification.category_label(it.stage)] += 1
    return counts


def aggregate(
    items: Sequence[WorkItem],
    now: datetime,
    aging_threshold_days: int,
    week: tuple[datetime, datetime] | None = None,
    *,
    classification: StageClassification,
    top_aged: int = DEFAULT_TOP_AGED,
    top_assignees: int = DEFAULT_TOP_ASSIGNEES,
    tz,
) -> DashboardMetrics:
    """Compute every dashboard metric from one snapshot of items.

    Parameters
    ----------
    items : sequence of WorkItem
        A fully assembled snapshot; it is only read.
    now : datetime
        Reference instant for "today" and the current week.
    aging_threshold_days : int
        Items with ``aging_days`` at or above this are aged.
    week : (datetime, datetime), optional
        Inclusive week bounds; defaults to ``week_range(now, tz)``.
    classification : StageClassification
        Resolves current stage names to categories.
    tz : pytz timezone
        Calendar-day zone. Naive datetimes, in ``now``, ``week`` or the
        items, are read as local to it.

    Returns
    -------
    DashboardMetrics
        Missing optional fields degrade to 0, empty, or ``None``.
    """
    items = list(items)
    now = localize(now, tz)
    if week:
        week_start, week_end = localize(week[0], tz), localize(week[1], tz)
    else:
        week_start, week_end = week_range(now, tz)
    today = start_of_day(now, tz)

    finished = [(it, localize(it.first_entered_done, tz)) for it in items if it.first_entered_done is not None]
    done_today = [it for it, done_at in finished if done_at >= today]
    done_week = [it for it, done_at in finished if week_start <= done_at <= week_end]
    doing_now = [it for it in items if classification.matches(it.stage, StageCategory.DOING)]
    waiting_now = [it for it in items if classification.matches(it.stage, StageCategory.WAITING)]
    aged_now = [it for it in items if (it.aging_days or 0) >= aging_threshold_days]

    rate = bypass_rate(items)
    lead_avg = lead_average(items)

    return DashboardMetrics(
        now=now,
        week_start=week_start,
        week_end=week_end,
        aging_threshold_days=aging_threshold_days,
        done_today=tuple(done_today),
        done_this_week=tuple(done_week),
        doing_now=tuple(doing_now),
        waiting_now=tuple(waiting_now),
        aged_now=tuple(aged_now),
        bypass_rate=rate,
        lead_average=lead_avg,
        health_score=health_score(len(aged_now), rate, lead_avg),
        lead_by_assignee=tuple(lead_by_assignee(items, limit=top_assignees)),
        top_aged=tuple(rank_by_aging(items, limit=top_aged)),
        stage_counts=MappingProxyType(count_by_category(items, classification)),
        done_by_weekday=done_by_weekday(done_week, tz),
    )
