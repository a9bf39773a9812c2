"""Central configuration, constants, and shared board definitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# Bugzilla Connection Settings
# =============================================================================
BUGZILLA_DEFAULT_URL = "https://bugzilla.mozilla.org/rest"
TIMEZONE = "UTC"

# Every remote call is aborted after this many seconds and reported as a
# failure for that bug only.
REQUEST_TIMEOUT_SECONDS = 30

API_KEY_HEADER = "X-BUGZILLA-API-KEY"
API_KEY_MIN_LENGTH = 10

# Default assignee Bugzilla uses for unowned bugs
NOBODY_EMAIL = "nobody@mozilla.org"

# =============================================================================
# Board Columns
# =============================================================================
COLUMN_BACKLOG = "backlog"
COLUMN_TODO = "todo"
COLUMN_IN_PROGRESS = "in-progress"
COLUMN_IN_TESTING = "in-testing"
COLUMN_DONE = "done"

# Canonical left-to-right board order
COLUMNS: Sequence[str] = (
    COLUMN_BACKLOG,
    COLUMN_TODO,
    COLUMN_IN_PROGRESS,
    COLUMN_IN_TESTING,
    COLUMN_DONE,
)

COLUMN_NAMES: dict[str, str] = {
    COLUMN_BACKLOG: "Backlog",
    COLUMN_TODO: "Todo",
    COLUMN_IN_PROGRESS: "In Progress",
    COLUMN_IN_TESTING: "In Testing",
    COLUMN_DONE: "Done",
}

# =============================================================================
# Workflow Status Configuration
# =============================================================================
STATUS_UNCONFIRMED = "UNCONFIRMED"
STATUS_NEW = "NEW"
STATUS_ASSIGNED = "ASSIGNED"
STATUS_IN_PROGRESS = "IN_PROGRESS"
STATUS_RESOLVED = "RESOLVED"
STATUS_VERIFIED = "VERIFIED"
STATUS_CLOSED = "CLOSED"

RESOLUTION_FIXED = "FIXED"

# Bugzilla statuses grouped per column. in-testing has no entry: bugs only
# land there through the column assignment rules.
STATUS_MAPPING: dict[str, tuple[str, ...]] = {
    COLUMN_BACKLOG: (STATUS_UNCONFIRMED, STATUS_NEW),
    COLUMN_TODO: (STATUS_ASSIGNED,),
    COLUMN_IN_PROGRESS: (STATUS_IN_PROGRESS,),
    COLUMN_DONE: (STATUS_RESOLVED, STATUS_VERIFIED, STATUS_CLOSED),
}

# Status written back to Bugzilla when a bug is dropped into a column
COLUMN_TO_STATUS: dict[str, str] = {
    COLUMN_BACKLOG: STATUS_NEW,
    COLUMN_TODO: STATUS_ASSIGNED,
    COLUMN_IN_PROGRESS: STATUS_IN_PROGRESS,
    COLUMN_IN_TESTING: STATUS_RESOLVED,
    COLUMN_DONE: STATUS_RESOLVED,
}

TERMINAL_STATUSES: frozenset[str] = frozenset({STATUS_RESOLVED, STATUS_VERIFIED, STATUS_CLOSED})
UNTRIAGED_STATUSES: frozenset[str] = frozenset({STATUS_NEW, STATUS_UNCONFIRMED})

# =============================================================================
# Whiteboard / Flags
# =============================================================================
SPRINT_TAG = "[bzkanban-sprint]"
META_TAG = "[meta]"
META_KEYWORD = "meta"

QE_VERIFY_FLAG = "qe-verify"
# Flag status Bugzilla interprets as "remove this flag"
FLAG_CLEAR_STATUS = "X"

# =============================================================================
# Priority / Recency
# =============================================================================
PRIORITY_ORDER: dict[str, int] = {
    "P1": 1,
    "P2": 2,
    "P3": 3,
    "P4": 4,
    "P5": 5,
}
UNKNOWN_PRIORITY_ORDER = 999

SORT_PRIORITY = "priority"
SORT_LAST_CHANGED = "last_changed"
SORT_ORDERS: Sequence[str] = (SORT_PRIORITY, SORT_LAST_CHANGED)

RECENT_DAYS: int = 14  # Window for the "recently changed" board filter

# =============================================================================
# Bugzilla Fetch Fields
# =============================================================================
FIELD_IDS = {
    "points": "cf_fx_points",
}

BUGZILLA_FETCH_FIELDS = [
    "id",
    "summary",
    "status",
    "resolution",
    "assigned_to",
    "assigned_to_detail",
    "priority",
    "severity",
    "component",
    "whiteboard",
    "keywords",
    "groups",
    "flags",
    "last_change_time",
    "creation_time",
    FIELD_IDS["points"],
]

BOARD_TABLE_COLUMNS: Sequence[str] = (
    "id",
    "summary",
    "column",
    "status",
    "priority",
    "severity",
    "assigned_to",
    "points",
    "whiteboard",
    "last_change_time",
)


@dataclass(slots=True)
class AppSettings:
    default_whiteboard_tag: str = ""
    default_component: str = ""
    sort_order: str = SORT_PRIORITY
    exclude_meta: bool = True
    recent_only: bool = False
    max_table_rows: int = 1000
