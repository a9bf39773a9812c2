"""Domain data models for Bugzilla bugs, staged edits, and update results."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class QeVerifyStatus(str, Enum):
    UNKNOWN = "unknown"
    MINUS = "minus"
    PLUS = "plus"


@dataclass(slots=True)
class FlagModel:
    name: str
    status: str


@dataclass(slots=True)
class BugModel:
    id: int
    summary: str = ""
    status: str = ""
    resolution: str | None = None
    assigned_to: str = ""
    assigned_to_name: str | None = None
    priority: str = "--"
    severity: str = "--"
    component: str = ""
    whiteboard: str = ""
    points: int | str | None = None
    keywords: list[str] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    flags: list[FlagModel] = field(default_factory=list)
    last_change_time: str | None = None
    creation_time: str | None = None


# =============================================================================
# Staged edits
# =============================================================================
# Field families tracked independently per bug, in payload order
FIELD_FAMILIES: tuple[str, ...] = (
    "status",
    "assignee",
    "whiteboard",
    "points",
    "priority",
    "severity",
    "qe_verify",
)


@dataclass(frozen=True, slots=True)
class FieldChange:
    """One pending ``from -> to`` edit of a single field."""

    from_value: Any
    to_value: Any


@dataclass(frozen=True, slots=True)
class StagedChange:
    """Pending edits for one bug.

    A slot left as ``None`` means the field is not staged. A staged field
    always carries a ``FieldChange``, even when its target value is falsy
    (e.g. clearing points to ``None``).
    """

    status: FieldChange | None = None
    assignee: FieldChange | None = None
    whiteboard: FieldChange | None = None
    points: FieldChange | None = None
    priority: FieldChange | None = None
    severity: FieldChange | None = None
    qe_verify: FieldChange | None = None

    def staged_fields(self) -> dict[str, FieldChange]:
        return {name: getattr(self, name) for name in FIELD_FAMILIES if getattr(self, name) is not None}

    def is_empty(self) -> bool:
        return not self.staged_fields()


# =============================================================================
# Remote updates
# =============================================================================
class _Unset:
    """Marker for update fields that must not appear in the request body."""

    _instance: _Unset | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(slots=True)
class BugUpdate:
    id: int
    status: Any = UNSET
    resolution: Any = UNSET
    assigned_to: Any = UNSET
    whiteboard: Any = UNSET
    cf_fx_points: Any = UNSET
    priority: Any = UNSET
    severity: Any = UNSET
    flags: Any = UNSET

    def changed_fields(self) -> dict[str, Any]:
        """Return every set field except ``id``; ``None`` values are kept."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "id" and getattr(self, f.name) is not UNSET
        }


@dataclass(slots=True)
class FailedUpdate:
    id: int
    error: str


@dataclass(slots=True)
class BatchUpdateResult:
    successful: list[int] = field(default_factory=list)
    failed: list[FailedUpdate] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ApplyResult:
    success_count: int = 0
    fail_count: int = 0


@dataclass(slots=True)
class BugFilters:
    whiteboard_tag: str = ""
    component: str = ""
    statuses: list[str] = field(default_factory=list)
    limit: int | None = None
