"""Sidebar router; pages register themselves with ``@register_page``."""

from __future__ import annotations

import streamlit as st

PAGE_BOARD = "Board"
PAGE_SETUP = "Setup / Connection"

PAGES = {}


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def page_order(labels):
    """Board first, then setup, then anything else alphabetically."""
    fixed = [name for name in (PAGE_BOARD, PAGE_SETUP) if name in labels]
    return fixed + sorted(name for name in labels if name not in fixed)


def _sidebar_status():
    board = st.session_state.get("board_session")
    if board is not None and board.ledger.has_changes():
        st.sidebar.caption(f"{board.ledger.get_change_count()} bug(s) with unapplied changes")


def main():
    st.sidebar.title("Bugzilla Kanban")
    labels = page_order(PAGES)
    if not labels:
        st.write("No pages registered yet.")
        return
    connected = "bug_service" in st.session_state
    default = labels.index(PAGE_SETUP) if PAGE_SETUP in labels and not connected else 0
    page = st.sidebar.selectbox("Page", labels, index=default)
    _sidebar_status()
    PAGES[page]()


if __name__ == "__main__":
    main()
