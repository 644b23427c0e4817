"""Chart builders (Altair) for throughput and lead time."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import altair as alt
import pandas as pd

from farol_app.core.config import WEEKDAY_LABELS


def daily_done_chart(done_by_weekday: Sequence[int]):
    """Bar chart of items finished per weekday of the current week."""
    counts = list(done_by_weekday) + [0] * (len(WEEKDAY_LABELS) - len(done_by_weekday))
    chart_df = pd.DataFrame({"day": list(WEEKDAY_LABELS), "done": counts[: len(WEEKDAY_LABELS)]})
    bars = (
        alt.Chart(chart_df)
        .mark_bar(color="#00d47a", cornerRadiusTopLeft=6, cornerRadiusTopRight=6)
        .encode(
            x=alt.X("day:N", sort=list(WEEKDAY_LABELS), title=None),
            y=alt.Y("done:Q", title="Items done"),
            tooltip=[alt.Tooltip("day:N", title="Day"), alt.Tooltip("done:Q", title="Done")],
        )
    )
    labels = bars.mark_text(dy=-8, color="#333333").encode(text="done:Q")
    return (bars + labels).properties(height=220)


def lead_by_assignee_chart(rows: Sequence[tuple[str, int]]):
    if not rows:
        return None
    chart_df = pd.DataFrame(list(rows), columns=["assignee", "lead_days"])
    order = chart_df["assignee"].tolist()
    bars = (
        alt.Chart(chart_df)
        .mark_bar(color="#66cc88", cornerRadiusEnd=6)
        .encode(
            x=alt.X("lead_days:Q", title="Mean lead time (days)"),
            y=alt.Y("assignee:N", sort=order, title=None),
            tooltip=[
                alt.Tooltip("assignee:N", title="Assignee"),
                alt.Tooltip("lead_days:Q", title="Lead (days)"),
            ],
        )
    )
    labels = bars.mark_text(align="left", dx=4, color="#333333").encode(text="lead_days:Q")
    return (bars + labels).properties(height=max(120, 30 * len(chart_df)))


def stage_counts_chart(stage_counts: Mapping[str, int]):
    if not stage_counts:
        return None
    chart_df = pd.DataFrame({"category": list(stage_counts.keys()), "items": list(stage_counts.values())})
    return (
        alt.Chart(chart_df)
        .mark_bar(color="#1f77b4")
        .encode(
            x=alt.X("category:N", sort=list(stage_counts.keys()), title=None),
            y=alt.Y("items:Q", title="Items"),
            tooltip=[alt.Tooltip("category:N", title="Stage"), alt.Tooltip("items:Q", title="Items")],
        )
        .properties(height=220)
    )
