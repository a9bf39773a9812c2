"""StagedChanges: in-memory ledger of unapplied per-bug field edits."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import Any

from .bugzilla_client import BugzillaAPI, ProgressCallback
from .models import ApplyResult, FieldChange, QeVerifyStatus, StagedChange
from .reconciler import apply_staged_changes
from .validation import validate_bug_id

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], Any]


class StagedChanges:
    """Buffer of pending edits keyed by bug id.

    Each field family is tracked independently: staging a priority never
    touches a pending status move for the same bug. A field whose target
    equals its original value is dropped, and a bug with no remaining fields
    leaves the ledger.

    Not re-entrant while ``apply_changes`` runs; callers must not stage edits
    for bugs that are mid-flight if they need deterministic results.
    """

    def __init__(self, client_factory: ClientFactory | None = None):
        self._changes: dict[int, StagedChange] = {}
        self._client_factory: ClientFactory = client_factory or BugzillaAPI
        self.is_applying: bool = False
        self.apply_error: str | None = None

    # ------------------ Staging ------------------
    def stage_change(self, bug_id: int, from_column: str, to_column: str) -> None:
        """Stage a column move; ``from``/``to`` are board column names."""
        self._stage(bug_id, "status", from_column, to_column)

    def stage_assignee_change(self, bug_id: int, from_assignee: str, to_assignee: str) -> None:
        self._stage(bug_id, "assignee", from_assignee, to_assignee)

    def stage_whiteboard_change(self, bug_id: int, from_whiteboard: str, to_whiteboard: str) -> None:
        self._stage(bug_id, "whiteboard", from_whiteboard, to_whiteboard)

    def stage_points_change(
        self,
        bug_id: int,
        from_points: int | str | None,
        to_points: int | str | None,
    ) -> None:
        self._stage(bug_id, "points", from_points, to_points)

    def stage_priority_change(self, bug_id: int, from_priority: str, to_priority: str) -> None:
        self._stage(bug_id, "priority", from_priority, to_priority)

    def stage_severity_change(self, bug_id: int, from_severity: str, to_severity: str) -> None:
        self._stage(bug_id, "severity", from_severity, to_severity)

    def stage_qe_verify_change(
        self,
        bug_id: int,
        from_status: QeVerifyStatus | str,
        to_status: QeVerifyStatus | str,
    ) -> None:
        # Convert first so a bad value is rejected before the ledger changes
        self._stage(bug_id, "qe_verify", QeVerifyStatus(from_status), QeVerifyStatus(to_status))

    def _stage(self, bug_id: int, family: str, from_value: Any, to_value: Any) -> None:
        bug_id = validate_bug_id(bug_id)
        existing = self._changes.get(bug_id)
        current: FieldChange | None = getattr(existing, family) if existing is not None else None
        # The first staged "from" anchors the revert-to-original check
        original = current.from_value if current is not None else from_value

        if original == to_value:
            if existing is None:
                return
            updated = replace(existing, **{family: None})
        else:
            updated = replace(existing or StagedChange(), **{family: FieldChange(original, to_value)})

        if updated.is_empty():
            self._changes.pop(bug_id, None)
        else:
            self._changes[bug_id] = updated

    # ------------------ Removal ------------------
    def unstage_change(self, bug_id: int) -> None:
        self._changes.pop(bug_id, None)

    def clear_all_changes(self) -> None:
        self._changes = {}
        self.apply_error = None

    def remove_applied(self, bug_ids: Iterable[int]) -> None:
        """Drop entries Bugzilla confirmed; used by the reconciler only."""
        for bug_id in bug_ids:
            self._changes.pop(bug_id, None)

    # ------------------ Queries ------------------
    def get(self, bug_id: int) -> StagedChange | None:
        return self._changes.get(bug_id)

    def snapshot(self) -> Mapping[int, StagedChange]:
        """Read-only copy for preview rendering."""
        return MappingProxyType(dict(self._changes))

    def staged_ids(self) -> list[int]:
        return list(self._changes)

    def get_change_count(self) -> int:
        return len(self._changes)

    def has_changes(self) -> bool:
        return self.get_change_count() > 0

    def __len__(self) -> int:
        return len(self._changes)

    def __contains__(self, bug_id: object) -> bool:
        return bug_id in self._changes

    # ------------------ Apply ------------------
    def apply_changes(self, api_key: str, *, progress: ProgressCallback | None = None) -> ApplyResult:
        return apply_staged_changes(self, api_key, self._client_factory, progress=progress)
