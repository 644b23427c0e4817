"""Column metadata and table helpers for Streamlit rendering."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd
import streamlit as st

from farol_app.core.config import ITEM_TABLE_COLUMNS

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "date" -> dd/mm/yyyy, "link" -> URL, None -> text
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "name": ("Card", "Card title on the board.", None),
    "assignees": ("Assignees", "Board members assigned to the card.", None),
    "stage": ("List", "Board list the card currently sits in.", None),
    "category": ("Stage", "Workflow category of the current list.", None),
    "first_doing": ("First Doing", "First time the card entered a Doing list.", "date"),
    "first_done": ("First Done", "First time the card entered a Done list.", "date"),
    "lead_days": ("Lead (days)", "Days between first Doing and first Done.", "int"),
    "flow": ("Flow", "'bypass' when the card reached Done without passing through Doing.", None),
    "aging_days": ("Aging (days)", "Days since the last list move (or last activity).", "int"),
    "due": ("Due", "Card due date.", "date"),
    "labels": ("Labels", "Card labels.", None),
    "link": ("Link", "Open the card on the board.", "link"),
}


def build_column_config(columns: Iterable[str]) -> dict[str, object]:
    config: dict[str, object] = {}
    for col in columns:
        meta = COLUMN_METADATA.get(col)
        if meta is None:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "date":
            config[col] = st.column_config.DatetimeColumn(label, help=help_text, format="DD/MM/YYYY")
        elif fmt == "link":
            config[col] = st.column_config.LinkColumn(label, help=help_text, display_text="open")
        else:
            config[col] = st.column_config.TextColumn(label, help=help_text)
    return config


def prepare_item_table(df: pd.DataFrame) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}
    display_cols = [col for col in ITEM_TABLE_COLUMNS if col in df.columns]
    return df, display_cols, build_column_config(display_cols)


def render_item_table(df: pd.DataFrame, empty_message: str = "No items for the selected filters.") -> None:
    table, cols, cfg = prepare_item_table(df)
    if not cols:
        st.info(empty_message)
        return
    st.dataframe(table[cols], hide_index=True, column_config=cfg, use_container_width=True)
