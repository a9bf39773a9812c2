"""Connection setup page: collect the Bugzilla API key and initialize BugService."""

from __future__ import annotations

import streamlit as st

from bzkanban.app import PAGE_SETUP, register_page
from bzkanban.core.board_config import load_board_settings
from bzkanban.core.config import BUGZILLA_DEFAULT_URL
from bzkanban.core.errors import ValidationError
from bzkanban.core.service import connect


@register_page(PAGE_SETUP)
def setup_page():
    st.title("Bugzilla Connection Setup")
    st.caption("Enter your API key (use secrets manager in production).")

    bz_secrets = st.secrets.get("bugzilla", {})
    secret_server = bz_secrets.get("BUGZILLA_URL") or st.secrets.get("BUGZILLA_URL")
    secret_key = bz_secrets.get("BUGZILLA_API_KEY") or st.secrets.get("BUGZILLA_API_KEY")

    server = st.text_input(
        "Bugzilla REST URL",
        value=st.session_state.get("bugzilla_server") or secret_server or BUGZILLA_DEFAULT_URL,
    )
    api_key = st.text_input("API Key", type="password", value=secret_key or "")
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        try:
            service = connect(api_key, server, load_board_settings())
        except ValidationError as exc:
            st.error(str(exc))
            return
        st.session_state["bugzilla_server"] = service.api.server
        st.session_state["bugzilla_api_key"] = service.api.api_key
        st.session_state["bug_service"] = service
        st.success("Connection initialized.")

    if "bug_service" in st.session_state:
        st.info("BugService ready.")
