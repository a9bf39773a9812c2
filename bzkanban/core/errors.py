"""Exception types raised by the board core."""

from __future__ import annotations


class BzKanbanError(Exception):
    """Base class for every error raised by bzkanban."""


class ValidationError(BzKanbanError, ValueError):
    """Input rejected at the boundary before any state was touched."""


class InvalidApiKeyError(ValidationError):
    pass


class InvalidBugIdError(ValidationError):
    pass


class InvalidBaseUrlError(ValidationError):
    pass


class UnknownColumnError(BzKanbanError, ValueError):
    """A column name outside the fixed board column set."""

    def __init__(self, column: object):
        super().__init__(f"Unknown column: {column}")
        self.column = column


class ApplyInProgressError(BzKanbanError, RuntimeError):
    """apply_changes was called while a previous pass is still running."""


class BugzillaError(BzKanbanError, RuntimeError):
    """Remote Bugzilla request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BugzillaTimeoutError(BugzillaError):
    pass
