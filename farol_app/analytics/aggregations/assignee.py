"""Assignee-based aggregations."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from farol_app.analytics.metrics.aging import round_half_up
from farol_app.core.config import DEFAULT_TOP_ASSIGNEES
from farol_app.core.models import WorkItem


def lead_by_assignee(items: Iterable[WorkItem], limit: int = DEFAULT_TOP_ASSIGNEES) -> list[tuple[str, int]]:
    """Mean lead time per assignee, highest first.

    An item with several assignees counts once for each of them. Items without
    a lead time or without assignees are left out.
    """
    rows = [
        {"assignee": name.strip(), "lead_days": it.lead_days}
        for it in items
        if it.lead_days is not None
        for name in it.assignees
        if name and name.strip()
    ]
    if not rows:
        return []
    df = pd.DataFrame(rows)
    agg = df.groupby("assignee", sort=False)["lead_days"].mean().reset_index()
    agg["lead_mean"] = agg["lead_days"].apply(round_half_up)
    agg = agg.sort_values(by="lead_mean", ascending=False, kind="stable").head(limit)
    return [(str(r.assignee), int(r.lead_mean)) for r in agg.itertuples(index=False)]
