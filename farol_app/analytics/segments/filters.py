"""Table filters over the work item DataFrame."""

from __future__ import annotations

import pandas as pd

from farol_app.core.stages import normalize_stage_name


def _contains(series: pd.Series, needle: str) -> pd.Series:
    return series.fillna("").astype(str).str.strip().str.lower().str.contains(needle, regex=False)


def by_name(df: pd.DataFrame, query: str | None) -> pd.DataFrame:
    needle = normalize_stage_name(query)
    if df.empty or not needle or "name" not in df.columns:
        return df
    return df[_contains(df["name"], needle)]


def by_assignee(df: pd.DataFrame, assignee: str | None) -> pd.DataFrame:
    """Keep rows where any assignee name contains ``assignee``."""
    needle = normalize_stage_name(assignee)
    if df.empty or not needle or "assignee_list" not in df.columns:
        return df

    def _match(names) -> bool:
        if not isinstance(names, list):
            return False
        return any(needle in normalize_stage_name(n) for n in names)

    return df[df["assignee_list"].apply(_match)]


def by_stage(df: pd.DataFrame, stage: str | None) -> pd.DataFrame:
    needle = normalize_stage_name(stage)
    if df.empty or not needle or "stage" not in df.columns:
        return df
    return df[_contains(df["stage"], needle)]


def by_category(df: pd.DataFrame, category: str | None) -> pd.DataFrame:
    wanted = normalize_stage_name(category)
    if df.empty or not wanted or wanted == "all" or "category" not in df.columns:
        return df
    return df[df["category"].fillna("").astype(str).str.lower() == wanted]


def filter_items(
    df: pd.DataFrame,
    *,
    query: str | None = None,
    assignee: str | None = None,
    stage: str | None = None,
    category: str | None = None,
) -> pd.DataFrame:
    """Apply every table filter; blank filters match all rows."""
    out = by_name(df, query)
    out = by_assignee(out, assignee)
    out = by_stage(out, stage)
    return by_category(out, category)
