"""Bug ordering within a column (pure functions, never mutate input)."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from bzkanban.core.config import PRIORITY_ORDER, SORT_LAST_CHANGED, SORT_PRIORITY, UNKNOWN_PRIORITY_ORDER
from bzkanban.core.models import BugModel


def priority_rank(priority: str | None) -> int:
    """P1 ranks first; unknown priorities (``--``, ``None``) sort last."""
    return PRIORITY_ORDER.get(priority or "", UNKNOWN_PRIORITY_ORDER)


def compare_priority(a: str | None, b: str | None) -> int:
    return priority_rank(a) - priority_rank(b)


def sort_by_priority(bugs: Iterable[BugModel]) -> list[BugModel]:
    return sorted(bugs, key=lambda b: priority_rank(b.priority))


def _last_changed_key(bug: BugModel) -> float:
    ts = pd.to_datetime(bug.last_change_time, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return float("-inf")
    return ts.timestamp()


def sort_bugs(bugs: Iterable[BugModel], order: str = SORT_PRIORITY) -> list[BugModel]:
    if order == SORT_LAST_CHANGED:
        # Most recent first; bugs without a timestamp go to the end
        return sorted(bugs, key=_last_changed_key, reverse=True)
    return sort_by_priority(bugs)
