"""Board overview page: KPIs, weekly throughput, lead time per person, top aged cards, and the item table."""

from __future__ import annotations

import logging
from datetime import datetime

import pytz
import streamlit as st

from farol_app.app import register_page
from farol_app.core.service import BoardService
from farol_app.core.settings import ConfigError
from farol_app.core.stages import StageCategory
from farol_app.core.trello_client import TrelloAPIError
from farol_app.features.board_overview import SNAPSHOT_STATE_KEY, build_context, publish_snapshot
from farol_app.visual.charts import daily_done_chart, lead_by_assignee_chart, stage_counts_chart
from farol_app.visual.progress import ProgressReporter
from farol_app.visual.tables import render_item_table

logger = logging.getLogger(__name__)


def refresh_snapshot(service: BoardService) -> None:
    reporter = ProgressReporter("Fetching board data")
    try:
        snapshot = service.fetch_snapshot(progress=reporter.callback)
    except (TrelloAPIError, ConfigError) as exc:
        logger.error("Board fetch failed: %s", exc)
        reporter.error(f"Load failed: {exc}")
        return
    if publish_snapshot(st.session_state, snapshot):
        msg = f"Loaded {len(snapshot.items)} card(s)."
        if snapshot.failed_cards:
            msg += f" Movement history unavailable for {len(snapshot.failed_cards)} card(s)."
        reporter.complete(msg)


def _render_kpis(metrics) -> None:
    row1 = st.columns(4)
    row1[0].metric("Done today", len(metrics.done_today))
    row1[1].metric("Done this week", len(metrics.done_this_week))
    row1[2].metric("Doing", len(metrics.doing_now))
    row1[3].metric("Waiting", len(metrics.waiting_now))
    row2 = st.columns(4)
    row2[0].metric(f"Aged (>= {metrics.aging_threshold_days}d)", len(metrics.aged_now))
    row2[1].metric("Bypass", f"{metrics.bypass_rate}%")
    row2[2].metric("Avg lead", f"{metrics.lead_average}d" if metrics.lead_average is not None else "n/a")
    row2[3].metric(
        "Health score",
        str(metrics.health_score),
        help="Heuristic: 100 minus penalties for aged cards, bypass rate and average lead time.",
    )


def _render_top_aged(metrics) -> None:
    st.markdown("##### Most aged cards")
    if not metrics.top_aged:
        st.info("No items.")
        return
    lines = [f"- **{it.aging_days or 0}d**: {it.name or '(untitled)'}" for it in metrics.top_aged]
    st.markdown("\n".join(lines))


@register_page("Board Overview")
def overview_page():
    st.title("Board Overview")
    service: BoardService | None = st.session_state.get("board_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    if st.button("Reload", type="primary") or SNAPSHOT_STATE_KEY not in st.session_state:
        refresh_snapshot(service)

    snapshot = st.session_state.get(SNAPSHOT_STATE_KEY)
    if snapshot is None:
        st.info("No board data loaded yet.")
        return

    with st.sidebar:
        st.markdown("### Filters")
        query = st.text_input("Search card")
        assignee = st.text_input("Assignee")
        stage = st.text_input("List")
        category = st.selectbox("Stage", ["All"] + [c.value for c in StageCategory])
        threshold = st.number_input(
            "Aged after N days",
            min_value=1,
            value=service.settings.aging_days,
            step=1,
        )

    tz = pytz.timezone(service.settings.timezone)
    ctx = build_context(
        snapshot.items,
        datetime.now(tz=tz),
        service.classification,
        int(threshold),
        query=query,
        assignee=assignee,
        stage=stage,
        category=category,
        tz=tz,
    )
    metrics = ctx.metrics

    _render_kpis(metrics)
    st.markdown("---")

    left, right = st.columns(2)
    with left:
        st.markdown("##### Done this week")
        st.altair_chart(daily_done_chart(metrics.done_by_weekday), use_container_width=True)
    with right:
        st.markdown("##### Mean lead time per person")
        chart = lead_by_assignee_chart(metrics.lead_by_assignee)
        if chart is None:
            st.info("No finished cards with lead time yet.")
        else:
            st.altair_chart(chart, use_container_width=True)

    left, right = st.columns(2)
    with left:
        _render_top_aged(metrics)
    with right:
        st.markdown("##### Cards per stage")
        st.altair_chart(stage_counts_chart(metrics.stage_counts), use_container_width=True)

    st.markdown("---")
    st.markdown(f"##### Cards ({len(ctx.table)} of {len(ctx.items)})")
    render_item_table(ctx.table)
    if not ctx.table.empty:
        csv = ctx.table.drop(columns=["assignee_list"], errors="ignore").to_csv(index=False).encode("utf-8")
        st.download_button("Download CSV", data=csv, file_name="farol_cards.csv", mime="text/csv")
    st.caption(f"Last update: {snapshot.fetched_at.astimezone(tz).strftime('%d/%m/%Y %H:%M:%S')}")
