"""Connection setup page: collect board credentials and initialize BoardService."""

from __future__ import annotations

import streamlit as st

from farol_app.app import register_page
from farol_app.core.config import DEFAULT_AGING_DAYS
from farol_app.core.service import BoardService
from farol_app.core.settings import ConfigError, FarolSettings
from farol_app.core.trello_client import TrelloAPI
from farol_app.features.board_overview import SNAPSHOT_STATE_KEY


def _split_lines(text: str) -> list[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


@register_page("Setup / Connection")
def setup_page():
    st.title("Board Connection Setup")
    st.caption("Enter Trello credentials (use secrets.toml in production).")

    current: FarolSettings = st.session_state.get("farol_settings") or FarolSettings()

    api_key = st.text_input("API Key", value=current.api_key)
    token = st.text_input("API Token", type="password", value=current.token)
    boards = st.text_input("Board IDs (comma separated)", value=", ".join(current.board_ids))

    st.markdown("##### List mapping (one list name per line)")
    cols = st.columns(4)
    lists = {}
    for col, key, label in zip(
        cols,
        ("backlog", "doing", "waiting", "done"),
        ("Backlog", "Doing", "Waiting", "Done"),
        strict=True,
    ):
        with col:
            text = st.text_area(label, value="\n".join(current.stage_aliases.get(key, ())), height=140)
            lists[key] = _split_lines(text)

    aging = st.number_input("Aged after N days without moving", min_value=1, value=current.aging_days or DEFAULT_AGING_DAYS)
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        settings = FarolSettings.from_mapping(
            {
                "KEY": api_key.strip(),
                "TOKEN": token.strip(),
                "BOARDS": boards,
                "LISTS": lists,
                "AGING_DAYS": aging,
                "MAX_ACTION_CARDS": current.max_action_cards,
                "THROTTLE_MS": current.throttle_ms,
                "TIMEZONE": current.timezone,
            }
        )
        try:
            settings.validate()
        except ConfigError as exc:
            st.error(str(exc))
            return
        st.session_state["farol_settings"] = settings
        st.session_state["board_service"] = BoardService(TrelloAPI(settings.api_key, settings.token), settings)
        st.session_state.pop(SNAPSHOT_STATE_KEY, None)
        st.success("Connection initialized.")

    if "board_service" in st.session_state:
        st.info("BoardService ready.")
