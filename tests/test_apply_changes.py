import pytest

from bzkanban.core.bugzilla_client import BugzillaAPI
from bzkanban.core.errors import ApplyInProgressError, BugzillaError, InvalidApiKeyError
from bzkanban.core.models import ApplyResult, FieldChange, StagedChange
from bzkanban.core.reconciler import build_update
from bzkanban.core.staged import StagedChanges

API_KEY = "test_api_key_123"


class DummyAPI(BugzillaAPI):
    """Records every PUT and fails the configured bug ids."""

    def __init__(self, fail_ids=(), ledger=None):
        self.server = "https://bugzilla.example.com/rest"
        self.fail_ids = set(fail_ids)
        self.ledger = ledger
        self.updates = []
        self.applying_seen = []

    def update_bug(self, bug_id, changes):
        if self.ledger is not None:
            self.applying_seen.append(self.ledger.is_applying)
        self.updates.append({"id": bug_id, **changes})
        if bug_id in self.fail_ids:
            raise BugzillaError("Not Found", 404)
        return {}


def _ledger(api=None):
    created = []

    def factory(api_key):
        created.append(api_key)
        return api

    ledger = StagedChanges(client_factory=factory)
    return ledger, created


def test_empty_ledger_makes_no_calls():
    ledger, created = _ledger()
    assert ledger.apply_changes(API_KEY) == ApplyResult(0, 0)
    assert created == []
    assert ledger.is_applying is False


def test_status_and_priority_scenario():
    api = DummyAPI()
    ledger, created = _ledger(api)
    ledger.stage_change(1, "backlog", "todo")
    ledger.stage_priority_change(1, "P3", "P1")
    assert ledger.get_change_count() == 1

    result = ledger.apply_changes(API_KEY)

    assert result == ApplyResult(success_count=1, fail_count=0)
    assert api.updates == [{"id": 1, "status": "ASSIGNED", "priority": "P1"}]
    assert created == [API_KEY]
    assert not ledger.has_changes()
    assert ledger.apply_error is None


def test_is_applying_while_updates_run():
    api = DummyAPI()
    ledger = StagedChanges(client_factory=lambda key: api)
    api.ledger = ledger
    ledger.stage_change(1, "backlog", "todo")
    ledger.stage_change(2, "backlog", "done")
    ledger.apply_changes(API_KEY)
    assert api.applying_seen == [True, True]
    assert ledger.is_applying is False


def test_updates_are_sent_one_by_one_in_ledger_order():
    api = DummyAPI()
    ledger, _ = _ledger(api)
    for bug_id in (5, 3, 9):
        ledger.stage_severity_change(bug_id, "S3", "S2")
    ledger.apply_changes(API_KEY)
    assert [u["id"] for u in api.updates] == [5, 3, 9]


def test_partial_failure_keeps_failed_entries():
    api = DummyAPI(fail_ids={2})
    ledger, _ = _ledger(api)
    ledger.stage_change(1, "backlog", "todo")
    ledger.stage_change(2, "backlog", "in-progress")
    ledger.stage_assignee_change(2, "a@example.com", "b@example.com")
    ledger.stage_change(3, "todo", "done")

    result = ledger.apply_changes(API_KEY)

    assert result == ApplyResult(success_count=2, fail_count=1)
    assert ledger.staged_ids() == [2]
    assert ledger.get(2) == StagedChange(
        status=FieldChange("backlog", "in-progress"),
        assignee=FieldChange("a@example.com", "b@example.com"),
    )
    assert ledger.apply_error == "1 bug(s) failed to update"


def test_all_failed_reports_nothing_updated():
    api = DummyAPI(fail_ids={1, 2})
    ledger, _ = _ledger(api)
    ledger.stage_change(1, "backlog", "todo")
    ledger.stage_change(2, "backlog", "todo")

    result = ledger.apply_changes(API_KEY)

    assert result == ApplyResult(success_count=0, fail_count=2)
    assert ledger.get_change_count() == 2
    assert "failed" in ledger.apply_error
    assert "nothing was updated" in ledger.apply_error


def test_whole_pass_failure_leaves_ledger_intact():
    def factory(api_key):
        raise BugzillaError("Network error")

    ledger = StagedChanges(client_factory=factory)
    ledger.stage_change(1, "backlog", "todo")
    ledger.stage_priority_change(2, "P3", "P1")
    before = dict(ledger.snapshot())

    result = ledger.apply_changes(API_KEY)

    assert result == ApplyResult(success_count=0, fail_count=2)
    assert dict(ledger.snapshot()) == before
    assert ledger.apply_error == "Network error"
    assert ledger.is_applying is False


def test_previous_error_cleared_on_new_apply():
    api = DummyAPI(fail_ids={1})
    ledger, _ = _ledger(api)
    ledger.stage_change(1, "backlog", "todo")
    ledger.apply_changes(API_KEY)
    assert ledger.apply_error

    api.fail_ids.clear()
    ledger.apply_changes(API_KEY)
    assert ledger.apply_error is None
    assert not ledger.has_changes()


def test_invalid_api_key_is_rejected_before_any_mutation():
    api = DummyAPI()
    ledger, created = _ledger(api)
    ledger.stage_change(1, "backlog", "todo")
    with pytest.raises(InvalidApiKeyError):
        ledger.apply_changes("   ")
    assert created == []
    assert ledger.get_change_count() == 1
    assert ledger.is_applying is False


def test_overlapping_apply_is_refused():
    ledger = StagedChanges()
    ledger.stage_change(1, "backlog", "todo")
    ledger.is_applying = True
    with pytest.raises(ApplyInProgressError):
        ledger.apply_changes(API_KEY)
    assert ledger.get_change_count() == 1


def test_build_update_adds_fixed_resolution_for_resolved():
    update = build_update(1, StagedChange(status=FieldChange("in-progress", "done")))
    assert update.changed_fields() == {"status": "RESOLVED", "resolution": "FIXED"}
    update = build_update(1, StagedChange(status=FieldChange("done", "in-testing")))
    assert update.changed_fields() == {"status": "RESOLVED", "resolution": "FIXED"}


def test_build_update_without_resolution_for_open_columns():
    update = build_update(1, StagedChange(status=FieldChange("done", "in-progress")))
    assert update.changed_fields() == {"status": "IN_PROGRESS"}


def test_build_update_all_fields():
    change = StagedChange(
        status=FieldChange("backlog", "todo"),
        assignee=FieldChange("nobody@mozilla.org", "dev@example.com"),
        whiteboard=FieldChange("", "[bzkanban-sprint]"),
        points=FieldChange(None, 5),
        priority=FieldChange("--", "P2"),
        severity=FieldChange("S3", "S2"),
        qe_verify=FieldChange("unknown", "minus"),
    )
    assert build_update(42, change).changed_fields() == {
        "status": "ASSIGNED",
        "assigned_to": "dev@example.com",
        "whiteboard": "[bzkanban-sprint]",
        "cf_fx_points": 5,
        "priority": "P2",
        "severity": "S2",
        "flags": [{"name": "qe-verify", "status": "-"}],
    }


def test_cleared_points_are_sent_as_null():
    update = build_update(1, StagedChange(points=FieldChange(3, None)))
    assert update.changed_fields() == {"cf_fx_points": None}


def test_qe_verify_flag_encoding_through_apply():
    api = DummyAPI()
    ledger, _ = _ledger(api)
    ledger.stage_qe_verify_change(1, "plus", "unknown")
    ledger.stage_qe_verify_change(2, "unknown", "plus")
    ledger.apply_changes(API_KEY)
    assert api.updates == [
        {"id": 1, "flags": [{"name": "qe-verify", "status": "X"}]},
        {"id": 2, "flags": [{"name": "qe-verify", "status": "+"}]},
    ]


def test_unknown_staged_column_fails_whole_pass():
    api = DummyAPI()
    ledger, _ = _ledger(api)
    ledger.stage_change(1, "backlog", "archive")
    result = ledger.apply_changes(API_KEY)
    assert result == ApplyResult(0, 1)
    assert api.updates == []
    assert ledger.apply_error == "Unknown column: archive"
    assert ledger.get_change_count() == 1
