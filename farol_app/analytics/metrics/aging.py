"""Lead time and aging computation (pure functions)."""

from __future__ import annotations

import math
from datetime import datetime

import pytz

from farol_app.core.models import CardModel, MovementSummary, WorkItem

SECONDS_PER_DAY = 86400.0


def as_utc(value: datetime) -> datetime:
    """Return ``value`` in UTC; naive datetimes are taken to be UTC already."""
    return value.astimezone(pytz.utc) if value.tzinfo else pytz.utc.localize(value)


def localize(value: datetime, tz) -> datetime:
    """Return ``value`` in ``tz``, treating naive datetimes as local to ``tz``."""
    return value.astimezone(tz) if value.tzinfo else tz.localize(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    Matches the rounding the dashboard has always displayed (``2.5 -> 3``,
    ``-2.5 -> -2``) rather than Python's banker's rounding.
    """
    return int(math.floor(value + 0.5))


def day_diff(start: datetime | None, end: datetime | None) -> int | None:
    """Whole days from ``start`` to ``end``; ``None`` if either is missing."""
    if start is None or end is None:
        return None
    return round_half_up((as_utc(end) - as_utc(start)).total_seconds() / SECONDS_PER_DAY)


def compute_lead_days(movement: MovementSummary) -> int | None:
    return day_diff(movement.first_entered_doing, movement.first_entered_done)


def compute_aging_days(
    movement: MovementSummary,
    last_activity: datetime | None,
    now: datetime,
) -> int | None:
    reference = movement.last_move_at or last_activity
    return day_diff(reference, now)


def build_work_item(card: CardModel, movement: MovementSummary, now: datetime) -> WorkItem:
    """Combine a card's static fields with its movement summary."""
    assignees = tuple(dict.fromkeys(a.strip() for a in card.assignees if a and a.strip()))
    return WorkItem(
        id=card.id,
        name=card.name,
        stage=card.stage,
        due=card.due,
        last_activity=card.last_activity,
        short_url=card.short_url,
        assignees=assignees,
        labels=tuple(card.labels),
        movement=movement,
        lead_days=compute_lead_days(movement),
        aging_days=compute_aging_days(movement, card.last_activity, now),
    )
