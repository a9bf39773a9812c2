"""Commit staged edits to Bugzilla and reconcile the outcome into the ledger."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from .config import RESOLUTION_FIXED, STATUS_RESOLVED
from .errors import ApplyInProgressError
from .models import ApplyResult, BatchUpdateResult, BugUpdate, StagedChange
from .qe_verify import qe_verify_flag_update
from .status import column_to_status
from .validation import validate_api_key

if TYPE_CHECKING:
    from .bugzilla_client import ProgressCallback
    from .staged import StagedChanges

logger = logging.getLogger(__name__)


def build_update(bug_id: int, change: StagedChange) -> BugUpdate:
    """Translate one ledger entry into a Bugzilla update request.

    Only staged fields are set. A move whose target status is RESOLVED also
    carries ``resolution=FIXED``, since Bugzilla rejects RESOLVED without a
    resolution.
    """
    update = BugUpdate(id=bug_id)
    if change.status is not None:
        update.status = column_to_status(change.status.to_value)
        if update.status == STATUS_RESOLVED:
            update.resolution = RESOLUTION_FIXED
    if change.assignee is not None:
        update.assigned_to = change.assignee.to_value
    if change.whiteboard is not None:
        update.whiteboard = change.whiteboard.to_value
    if change.points is not None:
        update.cf_fx_points = change.points.to_value
    if change.priority is not None:
        update.priority = change.priority.to_value
    if change.severity is not None:
        update.severity = change.severity.to_value
    if change.qe_verify is not None:
        update.flags = qe_verify_flag_update(change.qe_verify.to_value)
    return update


def build_updates(changes: Mapping[int, StagedChange]) -> list[BugUpdate]:
    return [build_update(bug_id, change) for bug_id, change in changes.items()]


def summarize_failures(result: BatchUpdateResult) -> str | None:
    failed = len(result.failed)
    if not failed:
        return None
    if not result.successful:
        return f"All {failed} change(s) failed to apply; nothing was updated"
    return f"{failed} bug(s) failed to update"


def apply_staged_changes(
    ledger: StagedChanges,
    api_key: str,
    client_factory: Callable[[str], Any],
    *,
    progress: ProgressCallback | None = None,
) -> ApplyResult:
    """Run one apply pass over ``ledger``.

    Succeeded bugs leave the ledger; failed bugs stay staged so the user can
    retry. Remote and client errors never escape: they end up in
    ``ledger.apply_error``. If the pass fails before any per-bug result is
    known, the ledger is left exactly as it was.
    """
    if ledger.is_applying:
        raise ApplyInProgressError("Changes are already being applied")
    changes = ledger.snapshot()
    if not changes:
        return ApplyResult(0, 0)
    api_key = validate_api_key(api_key)

    ledger.is_applying = True
    ledger.apply_error = None
    try:
        updates = build_updates(changes)
        client = client_factory(api_key)
        result: BatchUpdateResult = client.batch_update_bugs(updates, progress=progress)
    except Exception as exc:
        logger.exception("Applying %s staged change(s) failed", len(changes))
        ledger.apply_error = str(exc) or "Unknown error"
        ledger.is_applying = False
        return ApplyResult(0, len(changes))

    try:
        ledger.remove_applied(result.successful)
        ledger.apply_error = summarize_failures(result)
    finally:
        ledger.is_applying = False

    logger.info(
        "Applied staged changes: %s succeeded, %s failed",
        len(result.successful),
        len(result.failed),
    )
    return ApplyResult(success_count=len(result.successful), fail_count=len(result.failed))
