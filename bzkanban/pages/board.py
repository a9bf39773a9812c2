"""Kanban board page: browse columns, stage edits, apply them to Bugzilla."""

from __future__ import annotations

import streamlit as st

from bzkanban.app import PAGE_BOARD, register_page
from bzkanban.core.board import BoardSession
from bzkanban.core.config import COLUMN_NAMES, COLUMNS, PRIORITY_ORDER
from bzkanban.core.errors import BzKanbanError
from bzkanban.core.models import BugFilters, QeVerifyStatus
from bzkanban.core.service import BugService
from bzkanban.visual.progress import ProgressReporter
from bzkanban.visual.tables import prepare_board_table, staged_changes_frame


def _session() -> BoardSession:
    if "board_session" not in st.session_state:
        st.session_state["board_session"] = BoardSession()
    return st.session_state["board_session"]


def _parse_points(text: str) -> int | str | None:
    text = text.strip()
    if not text:
        return None
    return int(text) if text.isdigit() else text


def _render_columns(service: BugService, board: BoardSession, server: str) -> None:
    grouped = board.group_by_column()
    cols = st.columns(len(COLUMNS))
    for container, column in zip(cols, COLUMNS, strict=True):
        bugs = grouped.get(column, [])
        container.subheader(f"{COLUMN_NAMES[column]} ({len(bugs)})")
        if not bugs:
            container.caption("No bugs")
            continue
        df = service.to_dataframe(bugs, column_for=board.column_for)
        table, display_cols, cfg = prepare_board_table(df, server)
        shown = [c for c in display_cols if c in ("Bug", "summary", "priority", "assigned_to")]
        container.dataframe(
            table[shown].head(service.settings.max_table_rows),
            hide_index=True,
            column_config=cfg,
        )


def _render_editor(board: BoardSession) -> None:
    st.subheader("Edit a bug")
    if not board.bugs:
        return
    bug_id = st.selectbox("Bug", [b.id for b in board.bugs])
    bug = board.get_bug(bug_id)
    if bug is None:
        return
    shown = board.field_values(bug)
    with st.form("edit_bug"):
        column = st.selectbox("Column", list(COLUMNS), index=list(COLUMNS).index(shown["column"]))
        priorities = list(PRIORITY_ORDER) + ["--"]
        current = shown["priority"] if shown["priority"] in priorities else "--"
        priority = st.selectbox("Priority", priorities, index=priorities.index(current))
        severity = st.text_input("Severity", value=shown["severity"])
        assignee = st.text_input("Assignee", value=shown["assignee"])
        points = st.text_input("Points", value="" if shown["points"] is None else str(shown["points"]))
        qe_options = [s.value for s in QeVerifyStatus]
        qe_current = QeVerifyStatus(shown["qe_verify"]).value
        qe_status = st.selectbox("qe-verify", qe_options, index=qe_options.index(qe_current))
        submitted = st.form_submit_button("Stage")
    if submitted:
        try:
            board.submit_edits(
                bug,
                {
                    "column": column,
                    "priority": priority,
                    "severity": severity,
                    "assignee": assignee,
                    "points": _parse_points(points),
                    "qe_verify": qe_status,
                },
            )
        except BzKanbanError as exc:
            st.error(str(exc))


def _render_staged(board: BoardSession, service: BugService) -> None:
    ledger = board.ledger
    st.subheader(f"Staged changes ({ledger.get_change_count()})")
    if ledger.apply_error:
        st.error(ledger.apply_error)
    if not ledger.has_changes():
        st.caption("Nothing staged.")
        return
    st.dataframe(staged_changes_frame(ledger.snapshot()), hide_index=True)
    apply_col, clear_col = st.columns(2)
    if clear_col.button("Clear all"):
        ledger.clear_all_changes()
        st.rerun()
    if apply_col.button("Apply changes", type="primary", disabled=ledger.is_applying):
        reporter = ProgressReporter("Applying staged changes")
        try:
            result = board.apply(st.session_state.get("bugzilla_api_key", ""), progress=reporter.callback)
        except BzKanbanError as exc:
            reporter.error(str(exc))
            return
        reporter.finish_apply(result, ledger.apply_error)
        if result.success_count:
            board.set_bugs(service.refresh())


@register_page(PAGE_BOARD)
def board_page():
    st.title("Bugzilla Kanban Board")
    service: BugService | None = st.session_state.get("bug_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return
    board = _session()
    server = st.session_state.get("bugzilla_server", "")

    whiteboard = st.text_input("Whiteboard tag", value=service.settings.default_whiteboard_tag)
    component = st.text_input("Component", value=service.settings.default_component)
    if st.button("Load bugs", type="primary"):
        reporter = ProgressReporter("Fetching bugs")
        try:
            bugs = service.fetch_board_bugs(
                BugFilters(whiteboard_tag=whiteboard, component=component),
                progress=reporter.callback,
            )
        except BzKanbanError as exc:
            reporter.error(f"Failed to fetch bugs: {exc}")
            return
        board.set_bugs(bugs)
        reporter.complete(f"Loaded {len(bugs)} bug(s).")

    _render_columns(service, board, server)
    _render_editor(board)
    _render_staged(board, service)
