"""Bugzilla status <-> board column lookups.

Plain lookup functions over the tables in ``config.py``. This is the
fallback used by generic column listings; actual board placement goes
through ``column_assignment.assign_column``.
"""

from __future__ import annotations

from .config import COLUMN_BACKLOG, COLUMN_TO_STATUS, COLUMNS, STATUS_MAPPING
from .errors import UnknownColumnError

# Reverse mapping: status -> column (upper-cased keys)
_STATUS_TO_COLUMN: dict[str, str] = {
    status.upper(): column for column, statuses in STATUS_MAPPING.items() for status in statuses
}


def status_to_column(status: str | None) -> str:
    """Map a Bugzilla status to a board column.

    Matching is case-insensitive. Statuses outside the known table (including
    empty values) land in ``backlog``: remote status strings are not under our
    control, so the column domain is widened instead of raising.

    Examples
    --------
    >>> status_to_column("assigned")
    'todo'
    >>> status_to_column("REOPENED")
    'backlog'
    """
    if not status:
        return COLUMN_BACKLOG
    return _STATUS_TO_COLUMN.get(str(status).strip().upper(), COLUMN_BACKLOG)


def column_to_status(column: str) -> str:
    """Return the Bugzilla status written when a bug is dropped into ``column``.

    Raises
    ------
    UnknownColumnError
        If ``column`` is not one of the board columns. This is a caller bug,
        not bad remote data.
    """
    if not is_valid_column(column):
        raise UnknownColumnError(column)
    return COLUMN_TO_STATUS[column]


def get_available_columns() -> list[str]:
    return list(COLUMNS)


def get_statuses_for_column(column: str) -> list[str]:
    if not is_valid_column(column):
        return []
    return list(STATUS_MAPPING.get(column, ()))


def is_valid_column(column: object) -> bool:
    """Case-sensitive membership check against the board columns."""
    return isinstance(column, str) and column in COLUMNS
