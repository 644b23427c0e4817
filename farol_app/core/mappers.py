"""Mapping raw board JSON into CardModel / StageEvent instances and DataFrames."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from .config import MOVE_ACTION_TYPE
from .models import CardModel, StageEvent, WorkItem
from .stages import StageClassification


def parse_dt(val):
    if not val:
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _name_of(node: Any) -> str | None:
    if isinstance(node, dict):
        name = node.get("name")
        return str(name) if name is not None else None
    return None


def map_action(raw: dict[str, Any]) -> StageEvent | None:
    """Map one ``updateCard`` action to a StageEvent; other actions give ``None``.

    Missing list names are kept as ``None`` so the reducer can skip them.
    """
    if not isinstance(raw, dict) or raw.get("type") != MOVE_ACTION_TYPE:
        return None
    data = raw.get("data") or {}
    return StageEvent(
        occurred_at=parse_dt(raw.get("date")),
        stage_before=_name_of(data.get("listBefore")),
        stage_after=_name_of(data.get("listAfter")),
    )


def map_actions(actions: Iterable[dict[str, Any]] | None) -> list[StageEvent]:
    events = []
    for raw in actions or []:
        ev = map_action(raw)
        if ev is not None:
            events.append(ev)
    return events


def index_by_id(records: Iterable[dict[str, Any]] | None, value_key: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for rec in records or []:
        if not isinstance(rec, dict):
            continue
        rid = rec.get("id")
        value = rec.get(value_key)
        if rid and value:
            out[rid] = value
    return out


def map_card(
    raw: dict[str, Any],
    list_by_id: Mapping[str, str],
    member_by_id: Mapping[str, str],
    actions: Iterable[dict[str, Any]] | None = None,
) -> CardModel:
    members = [member_by_id[m] for m in raw.get("idMembers") or [] if m in member_by_id]
    labels = [lbl.get("name") for lbl in raw.get("labels") or [] if isinstance(lbl, dict) and lbl.get("name")]
    return CardModel(
        id=str(raw.get("id") or ""),
        name=raw.get("name"),
        stage=list_by_id.get(raw.get("idList"), ""),
        due=parse_dt(raw.get("due")),
        last_activity=parse_dt(raw.get("dateLastActivity")),
        short_url=raw.get("shortUrl"),
        assignees=members,
        labels=labels,
        events=map_actions(actions),
    )


def items_to_dataframe(items: Iterable[WorkItem], classification: StageClassification | None = None) -> pd.DataFrame:
    rows = []
    for it in items:
        rows.append(
            {
                "id": it.id,
                "name": it.name or "",
                "assignees": ", ".join(it.assignees),
                "assignee_list": list(it.assignees),
                "stage": it.stage or "",
                "category": classification.category_label(it.stage) if classification else None,
                "first_doing": it.first_entered_doing,
                "first_done": it.first_entered_done,
                "lead_days": it.lead_days,
                "bypass": it.bypass,
                "flow": "bypass" if it.bypass else "flow",
                "aging_days": it.aging_days,
                "due": it.due,
                "last_activity": it.last_activity,
                "labels": ", ".join(sorted(set(it.labels), key=str.lower)),
                "link": it.short_url or "",
            }
        )
    df = pd.DataFrame(rows)
    for col in ("lead_days", "aging_days"):
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    return df
