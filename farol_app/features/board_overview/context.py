"""Pure helpers to build the board overview context for testing (no Streamlit)."""

from __future__ import annotations

from collections.abc import MutableMapping, Sequence
from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from farol_app.analytics.metrics.dashboard import aggregate
from farol_app.analytics.segments.filters import filter_items
from farol_app.core.config import DEFAULT_TOP_AGED, DEFAULT_TOP_ASSIGNEES
from farol_app.core.mappers import items_to_dataframe
from farol_app.core.models import BoardSnapshot, DashboardMetrics, WorkItem
from farol_app.core.stages import StageClassification

SNAPSHOT_STATE_KEY = "board_snapshot"


@dataclass(slots=True)
class OverviewContext:
    metrics: DashboardMetrics
    items: pd.DataFrame
    table: pd.DataFrame


def build_context(
    items: Sequence[WorkItem],
    now: datetime,
    classification: StageClassification,
    aging_threshold_days: int,
    *,
    query: str | None = None,
    assignee: str | None = None,
    stage: str | None = None,
    category: str | None = None,
    top_aged: int = DEFAULT_TOP_AGED,
    top_assignees: int = DEFAULT_TOP_ASSIGNEES,
    tz,
) -> OverviewContext:
    """Metrics over all items plus the filtered table.

    Table filters narrow only the table; KPIs always cover the full snapshot.
    """
    metrics = aggregate(
        items,
        now,
        aging_threshold_days,
        classification=classification,
        top_aged=top_aged,
        top_assignees=top_assignees,
        tz=tz,
    )
    df = items_to_dataframe(items, classification)
    table = filter_items(df, query=query, assignee=assignee, stage=stage, category=category)
    return OverviewContext(metrics=metrics, items=df, table=table)


def publish_snapshot(state: MutableMapping, snapshot: BoardSnapshot, key: str = SNAPSHOT_STATE_KEY) -> bool:
    """Store ``snapshot`` unless a newer generation is already published.

    Returns True when the snapshot became current. A result that arrives after
    a newer fetch completed is discarded.
    """
    current = state.get(key)
    if isinstance(current, BoardSnapshot) and current.generation > snapshot.generation:
        return False
    state[key] = snapshot
    return True
