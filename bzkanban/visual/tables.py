"""Table helpers for rendering board columns and the staged preview."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

import pandas as pd
import streamlit as st

from bzkanban.analytics.assignees import format_assignee
from bzkanban.core.config import BOARD_TABLE_COLUMNS
from bzkanban.core.models import StagedChange


def bug_browse_base(server: str) -> str:
    """Web UI root for a REST base URL (``.../rest`` -> ``...``)."""
    base = server.rstrip("/")
    if base.endswith("/rest"):
        base = base[: -len("/rest")]
    return base


def add_bug_link(df: pd.DataFrame, server: str, id_col: str = "id", label: str = "Bug"):
    if df.empty or id_col not in df.columns:
        return df, {}
    out = df.copy()
    base = bug_browse_base(server)
    out[label] = out[id_col].apply(lambda bug_id: f"{base}/show_bug.cgi?id={bug_id}")
    cfg = {
        label: st.column_config.LinkColumn(
            label,
            display_text=r"id=(\d+)$",
            help="Open in Bugzilla",
            width="small",
        )
    }
    return out, cfg


def prepare_board_table(df: pd.DataFrame, server: str) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}
    table, cfg = add_bug_link(df, server)
    if "assigned_to" in table.columns:
        table["assigned_to"] = table["assigned_to"].apply(format_assignee)
    display_cols = ["Bug"] + [c for c in BOARD_TABLE_COLUMNS if c in table.columns and c != "id"]
    return table, display_cols, cfg


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def staged_changes_frame(changes: Mapping[int, StagedChange]) -> pd.DataFrame:
    """Flatten the ledger into one row per staged field for preview."""
    rows = []
    for bug_id, change in changes.items():
        for field_name, diff in change.staged_fields().items():
            rows.append(
                {
                    "bug": bug_id,
                    "field": field_name,
                    "from": _display(diff.from_value),
                    "to": _display(diff.to_value),
                }
            )
    return pd.DataFrame(rows, columns=["bug", "field", "from", "to"])
