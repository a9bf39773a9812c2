"""Read-only bug filters applied before the board is rendered."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

import pandas as pd
import pytz

from bzkanban.core.config import META_KEYWORD, META_TAG, RECENT_DAYS, TIMEZONE
from bzkanban.core.models import BugModel


def is_meta_bug(bug: BugModel) -> bool:
    """Meta bugs carry a ``meta`` keyword or ``[meta]`` on the whiteboard."""
    if any(kw.lower() == META_KEYWORD for kw in bug.keywords or ()):
        return True
    return META_TAG in (bug.whiteboard or "").lower()


def filter_meta_bugs(bugs: Iterable[BugModel], exclude_meta: bool) -> list[BugModel]:
    if not exclude_meta:
        return list(bugs)
    return [b for b in bugs if not is_meta_bug(b)]


def is_public_bug(bug: BugModel) -> bool:
    """Bugs in any security/confidential group are hidden from the board."""
    return not bug.groups


def filter_public_bugs(bugs: Iterable[BugModel]) -> list[BugModel]:
    return [b for b in bugs if is_public_bug(b)]


def is_within_recent_window(
    timestamp: str | datetime | None,
    *,
    days: int = RECENT_DAYS,
    now: datetime | None = None,
) -> bool:
    ts = pd.to_datetime(timestamp, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return False
    tz = pytz.timezone(TIMEZONE)
    current = now or datetime.now(tz=tz)
    if current.tzinfo is None:
        current = tz.localize(current)
    return ts.to_pydatetime() >= current - timedelta(days=days)


def filter_recent_bugs(
    bugs: Iterable[BugModel],
    *,
    days: int = RECENT_DAYS,
    now: datetime | None = None,
) -> list[BugModel]:
    return [b for b in bugs if is_within_recent_window(b.last_change_time, days=days, now=now)]
