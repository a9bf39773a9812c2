"""Board column placement rules.

Rules are evaluated in priority order and the first match wins, because a
single bug can satisfy several of them (e.g. ASSIGNED with no sprint tag).

1. ASSIGNED                                   -> in-progress
2. RESOLVED + FIXED + qe-verify+              -> in-testing
3. RESOLVED / VERIFIED / CLOSED               -> done
4. IN_PROGRESS                                -> in-progress
5. NEW / UNCONFIRMED with the sprint tag      -> todo
6. anything else                              -> backlog
"""

from __future__ import annotations

from .config import (
    COLUMN_BACKLOG,
    COLUMN_DONE,
    COLUMN_IN_PROGRESS,
    COLUMN_IN_TESTING,
    COLUMN_TODO,
    QE_VERIFY_FLAG,
    RESOLUTION_FIXED,
    STATUS_ASSIGNED,
    STATUS_IN_PROGRESS,
    STATUS_RESOLVED,
    TERMINAL_STATUSES,
    UNTRIAGED_STATUSES,
)
from .models import BugModel
from .sprint_tag import has_sprint_tag


def has_qe_verify_flag(bug: BugModel) -> bool:
    """True only for an exact ``qe-verify+``; ``?`` and ``-`` do not count."""
    return any(flag.name == QE_VERIFY_FLAG and flag.status == "+" for flag in bug.flags or ())


def assign_column(bug: BugModel) -> str:
    status = (bug.status or "").strip().upper()
    if status == STATUS_ASSIGNED:
        return COLUMN_IN_PROGRESS
    if status == STATUS_RESOLVED and bug.resolution == RESOLUTION_FIXED and has_qe_verify_flag(bug):
        return COLUMN_IN_TESTING
    if status in TERMINAL_STATUSES:
        return COLUMN_DONE
    if status == STATUS_IN_PROGRESS:
        return COLUMN_IN_PROGRESS
    if status in UNTRIAGED_STATUSES and has_sprint_tag(bug.whiteboard):
        return COLUMN_TODO
    return COLUMN_BACKLOG
