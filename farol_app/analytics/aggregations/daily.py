"""Per-day throughput aggregations."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from farol_app.analytics.metrics.aging import localize
from farol_app.core.models import WorkItem


def done_by_weekday(items: Iterable[WorkItem], tz) -> tuple[int, ...]:
    """Count first Done entries per weekday in ``tz``, Monday first.

    Naive timestamps are read as local to ``tz``.
    """
    stamps = [localize(it.first_entered_done, tz) for it in items if it.first_entered_done is not None]
    if not stamps:
        return (0,) * 7
    local = pd.to_datetime(pd.Series(stamps), utc=True, errors="coerce").dropna().dt.tz_convert(tz)
    counts = local.dt.weekday.value_counts().reindex(range(7), fill_value=0)
    return tuple(int(v) for v in counts.tolist())
