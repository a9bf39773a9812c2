"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_board.py

Automatically imports every module in ``bzkanban/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from bzkanban.app import main

st.set_page_config(layout="wide")
logger = logging.getLogger(__name__)


def _auto_init_bug_service():
    """Initialize the Bugzilla service from Streamlit secrets if available."""
    if "bug_service" in st.session_state:
        return

    bz_secrets = st.secrets.get("bugzilla", {})
    server = bz_secrets.get("BUGZILLA_URL") or st.secrets.get("BUGZILLA_URL")
    api_key = bz_secrets.get("BUGZILLA_API_KEY") or st.secrets.get("BUGZILLA_API_KEY")

    if not api_key:
        st.sidebar.warning("Bugzilla secrets not found. Please use the Setup page.")
        return
    from bzkanban.core.board_config import load_board_settings
    from bzkanban.core.errors import ValidationError
    from bzkanban.core.service import connect

    try:
        service = connect(api_key, server, load_board_settings())
    except ValidationError as e:
        st.sidebar.error(f"Bugzilla secrets rejected: {e}")
        return
    st.session_state["bugzilla_server"] = service.api.server
    st.session_state["bugzilla_api_key"] = service.api.api_key
    st.session_state["bug_service"] = service
    st.sidebar.success("Bugzilla connection configured.")


_auto_init_bug_service()

PAGES_DIR = Path(__file__).parent / "bzkanban" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"bzkanban.pages.{py.stem}"
    try:
        import_module(mod_name)
    except ImportError as e:  # pragma: no cover
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
