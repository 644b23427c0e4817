"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``farol_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from farol_app.app import main
from farol_app.core.settings import ConfigError, FarolSettings, load_settings

st.set_page_config(layout="wide", page_title="Farol")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("farol")


def _load_settings() -> FarolSettings:
    """Prefer a ``[trello]`` section in Streamlit secrets, then ``farol.yaml``."""
    try:
        section = st.secrets.get("trello") or {}
    except FileNotFoundError:
        section = {}
    if section:
        return FarolSettings.from_mapping(dict(section))
    return load_settings()


def _auto_init_board_service():
    """Initialize the board service from secrets or settings file if available."""
    if "board_service" in st.session_state:
        return
    try:
        settings = _load_settings()
        settings.validate()
    except ConfigError as exc:
        st.sidebar.warning(f"{exc} Please use the Setup page.")
        return

    from farol_app.core.service import BoardService
    from farol_app.core.trello_client import TrelloAPI

    st.session_state["farol_settings"] = settings
    st.session_state["board_service"] = BoardService(TrelloAPI(settings.api_key, settings.token), settings)
    st.sidebar.success("Board connection configured.")


_auto_init_board_service()

PAGES_DIR = Path(__file__).parent / "farol_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"farol_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
