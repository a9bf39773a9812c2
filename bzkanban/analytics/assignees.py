"""Assignee aggregations for the board's assignee filter."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from bzkanban.core.config import NOBODY_EMAIL
from bzkanban.core.models import BugModel


def format_assignee(email: str | None) -> str:
    if not email or email.lower() == NOBODY_EMAIL.lower():
        return "unassigned"
    return email


def board_assignees(bugs: Iterable[BugModel]) -> pd.DataFrame:
    """One row per assignee email with a display name and bug count.

    The display name is the first real name seen for that email, falling
    back to the email itself. Sorted by count, busiest first.
    """
    rows = [{"email": b.assigned_to, "real_name": b.assigned_to_name or None} for b in bugs]
    if not rows:
        return pd.DataFrame(columns=["email", "display_name", "count"])
    df = pd.DataFrame(rows)
    agg = (
        df.groupby("email", sort=False)
        .agg(real_name=("real_name", "first"), count=("email", "size"))
        .reset_index()
    )
    agg["display_name"] = agg["real_name"].where(agg["real_name"].notna(), agg["email"])
    agg = agg.sort_values(by="count", ascending=False, kind="stable")
    return agg[["email", "display_name", "count"]].reset_index(drop=True)
