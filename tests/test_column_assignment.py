from bzkanban.core.column_assignment import assign_column, has_qe_verify_flag
from bzkanban.core.models import BugModel, FlagModel


def _bug(status="NEW", resolution=None, whiteboard="", flags=None):
    return BugModel(id=1, status=status, resolution=resolution, whiteboard=whiteboard, flags=flags or [])


def test_new_bug_with_sprint_tag_goes_to_todo():
    assert assign_column(_bug(status="NEW", whiteboard="[bzkanban-sprint]")) == "todo"
    assert assign_column(_bug(status="UNCONFIRMED", whiteboard="[ux] [bzkanban-sprint]")) == "todo"


def test_new_bug_without_sprint_tag_stays_in_backlog():
    assert assign_column(_bug(status="NEW")) == "backlog"
    assert assign_column(_bug(status="NEW", whiteboard="[bzkanban-sprint-old]")) == "backlog"


def test_assigned_overrides_missing_sprint_tag():
    assert assign_column(_bug(status="ASSIGNED", whiteboard="")) == "in-progress"
    assert assign_column(_bug(status="ASSIGNED", whiteboard="[bzkanban-sprint]")) == "in-progress"


def test_resolved_fixed_with_qe_verify_plus_goes_to_testing():
    bug = _bug(status="RESOLVED", resolution="FIXED", flags=[FlagModel("qe-verify", "+")])
    assert assign_column(bug) == "in-testing"


def test_qe_verify_requested_or_denied_is_done():
    for flag_status in ("?", "-"):
        bug = _bug(status="RESOLVED", resolution="FIXED", flags=[FlagModel("qe-verify", flag_status)])
        assert assign_column(bug) == "done"


def test_resolved_without_fixed_is_done():
    bug = _bug(status="RESOLVED", resolution="WONTFIX", flags=[FlagModel("qe-verify", "+")])
    assert assign_column(bug) == "done"


def test_terminal_statuses_are_done():
    assert assign_column(_bug(status="VERIFIED", resolution="FIXED")) == "done"
    assert assign_column(_bug(status="CLOSED", whiteboard="[bzkanban-sprint]")) == "done"


def test_in_progress_and_unknown_statuses():
    assert assign_column(_bug(status="IN_PROGRESS")) == "in-progress"
    assert assign_column(_bug(status="REOPENED", whiteboard="[bzkanban-sprint]")) == "backlog"


def test_has_qe_verify_flag_ignores_other_flags():
    assert not has_qe_verify_flag(_bug(flags=[FlagModel("needinfo", "+")]))
    assert has_qe_verify_flag(_bug(flags=[FlagModel("needinfo", "?"), FlagModel("qe-verify", "+")]))
    assert not has_qe_verify_flag(_bug())
