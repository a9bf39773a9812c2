"""BoardSession: turns board interactions into ledger edits.

Every ``from`` value handed to the ledger comes from the fetched bug
snapshot, never from what the board currently displays, so a field edited
several times still collapses when it returns to the value Bugzilla holds.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .bugzilla_client import ProgressCallback
from .column_assignment import assign_column
from .config import COLUMN_BACKLOG, COLUMN_IN_TESTING, COLUMN_TODO, COLUMNS
from .models import ApplyResult, BugModel, QeVerifyStatus
from .qe_verify import get_qe_verify_status
from .sprint_tag import add_sprint_tag, remove_sprint_tag
from .staged import StagedChanges
from .status import column_to_status


class BoardSession:
    def __init__(self, bugs: Iterable[BugModel] = (), ledger: StagedChanges | None = None):
        self.ledger = ledger if ledger is not None else StagedChanges()
        self._bugs: dict[int, BugModel] = {}
        self.set_bugs(bugs)

    def set_bugs(self, bugs: Iterable[BugModel]) -> None:
        self._bugs = {bug.id: bug for bug in bugs}

    @property
    def bugs(self) -> list[BugModel]:
        return list(self._bugs.values())

    def get_bug(self, bug_id: int) -> BugModel | None:
        return self._bugs.get(bug_id)

    # ------------------ Rendering ------------------
    def column_for(self, bug: BugModel) -> str:
        """Column the bug is shown in: staged target if any, else the rules."""
        change = self.ledger.get(bug.id)
        if change is not None and change.status is not None:
            return change.status.to_value
        return assign_column(bug)

    def group_by_column(self, bugs: Iterable[BugModel] | None = None) -> dict[str, list[BugModel]]:
        grouped: dict[str, list[BugModel]] = {column: [] for column in COLUMNS}
        for bug in self.bugs if bugs is None else bugs:
            grouped.setdefault(self.column_for(bug), []).append(bug)
        return grouped

    def is_staged(self, bug: BugModel) -> bool:
        return bug.id in self.ledger

    def _shown(self, bug: BugModel, family: str, original: Any) -> Any:
        change = self.ledger.get(bug.id)
        diff = getattr(change, family) if change is not None else None
        return diff.to_value if diff is not None else original

    def staged_whiteboard(self, bug: BugModel) -> str:
        return self._shown(bug, "whiteboard", bug.whiteboard)

    def field_values(self, bug: BugModel) -> dict[str, Any]:
        """Values the board shows for ``bug``: staged targets over the snapshot."""
        return {
            "column": self.column_for(bug),
            "assignee": self._shown(bug, "assignee", bug.assigned_to),
            "whiteboard": self.staged_whiteboard(bug),
            "points": self._shown(bug, "points", bug.points),
            "priority": self._shown(bug, "priority", bug.priority),
            "severity": self._shown(bug, "severity", bug.severity),
            "qe_verify": self._shown(bug, "qe_verify", get_qe_verify_status(bug.flags)),
        }

    # ------------------ Interactions ------------------
    def move_bug(self, bug: BugModel, to_column: str) -> None:
        """Stage a drag of ``bug`` into ``to_column`` plus its side edits.

        backlog -> todo adds the sprint tag, todo -> backlog removes it. A drop
        into in-testing stages qe-verify+, and leaving in-testing reverts that
        once the status move itself has collapsed.
        """
        column_to_status(to_column)  # raises UnknownColumnError
        from_column = self.column_for(bug)
        if from_column == to_column:
            return
        previous = self.ledger.get(bug.id)

        self.ledger.stage_change(bug.id, assign_column(bug), to_column)

        if from_column == COLUMN_BACKLOG and to_column == COLUMN_TODO:
            self.ledger.stage_whiteboard_change(
                bug.id, bug.whiteboard, add_sprint_tag(self.staged_whiteboard(bug))
            )
        elif from_column == COLUMN_TODO and to_column == COLUMN_BACKLOG:
            self.ledger.stage_whiteboard_change(
                bug.id, bug.whiteboard, remove_sprint_tag(self.staged_whiteboard(bug))
            )

        current_qe = get_qe_verify_status(bug.flags)
        if to_column == COLUMN_IN_TESTING:
            if current_qe != QeVerifyStatus.PLUS:
                self.ledger.stage_qe_verify_change(bug.id, current_qe, QeVerifyStatus.PLUS)
        elif previous is not None and previous.qe_verify is not None:
            updated = self.ledger.get(bug.id)
            if updated is None or updated.status is None:
                self.ledger.stage_qe_verify_change(bug.id, current_qe, current_qe)

    def submit_edits(self, bug: BugModel, edits: Mapping[str, Any]) -> None:
        """Stage an editor submission, touching only fields the user changed.

        ``edits`` uses the keys of ``field_values``; a value equal to what is
        currently shown leaves the ledger alone, so earlier staged edits and
        the qe-verify+ staged by a move into in-testing survive. The move is
        staged first so an explicit qe-verify choice overrides it.
        """
        shown = self.field_values(bug)
        column = edits.get("column", shown["column"])
        if column != shown["column"]:
            self.move_bug(bug, column)
        setters = {
            "assignee": self.change_assignee,
            "points": self.change_points,
            "priority": self.change_priority,
            "severity": self.change_severity,
            "qe_verify": self.change_qe_verify,
        }
        for family, setter in setters.items():
            if family in edits and edits[family] != shown[family]:
                setter(bug, edits[family])

    def change_assignee(self, bug: BugModel, assignee: str) -> None:
        self.ledger.stage_assignee_change(bug.id, bug.assigned_to, assignee)

    def change_points(self, bug: BugModel, points: int | str | None) -> None:
        self.ledger.stage_points_change(bug.id, bug.points, points)

    def change_priority(self, bug: BugModel, priority: str) -> None:
        self.ledger.stage_priority_change(bug.id, bug.priority, priority)

    def change_severity(self, bug: BugModel, severity: str) -> None:
        self.ledger.stage_severity_change(bug.id, bug.severity, severity)

    def change_qe_verify(self, bug: BugModel, status: QeVerifyStatus | str) -> None:
        self.ledger.stage_qe_verify_change(bug.id, get_qe_verify_status(bug.flags), status)

    def apply(self, api_key: str, *, progress: ProgressCallback | None = None) -> ApplyResult:
        return self.ledger.apply_changes(api_key, progress=progress)
