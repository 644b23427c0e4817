"""Aged cards page.

Lists every card that has not moved between lists for at least N days,
reusing the snapshot loaded by the overview page.
"""

from __future__ import annotations

from datetime import datetime

import pytz
import streamlit as st

from farol_app.analytics.metrics.dashboard import aggregate
from farol_app.app import register_page
from farol_app.core.mappers import items_to_dataframe
from farol_app.core.service import BoardService
from farol_app.features.board_overview import SNAPSHOT_STATE_KEY
from farol_app.visual.tables import render_item_table


@register_page("Aged Cards")
def aged_page():
    st.title("Aged Cards")
    st.caption("Cards that have not moved between lists recently.")
    service: BoardService | None = st.session_state.get("board_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    snapshot = st.session_state.get(SNAPSHOT_STATE_KEY)
    if snapshot is None:
        st.info("Load the board on the Board Overview page first.")
        return

    threshold = st.number_input(
        "Mark aged if not moved in N days",
        min_value=1,
        value=service.settings.aging_days,
        step=1,
    )
    tz = pytz.timezone(service.settings.timezone)
    metrics = aggregate(
        snapshot.items,
        datetime.now(tz=tz),
        int(threshold),
        classification=service.classification,
        tz=tz,
    )
    aged = sorted(metrics.aged_now, key=lambda it: it.aging_days or 0, reverse=True)
    st.metric("Aged cards", len(aged))
    df = items_to_dataframe(aged, service.classification)
    render_item_table(df, empty_message="No aged cards.")
    if not df.empty:
        csv = df.drop(columns=["assignee_list"], errors="ignore").to_csv(index=False).encode("utf-8")
        st.download_button("Download Aged CSV", data=csv, file_name="farol_aged.csv", mime="text/csv")
