import logging

import pytest

from bzkanban.core.bugzilla_client import BugzillaAPI
from bzkanban.core.config import AppSettings
from bzkanban.core.errors import InvalidApiKeyError, InvalidBaseUrlError
from bzkanban.core.mappers import map_bug
from bzkanban.core.models import BugFilters
from bzkanban.core.service import BugService, connect


class DummyAPI(BugzillaAPI):
    def __init__(self):
        self.server = "https://bugzilla.example.com/rest"
        self.filters_seen = []
        self.cache_cleared = 0

    def clear_cache(self):
        self.cache_cleared += 1

    def get_bugs(self, filters=None):
        self.filters_seen.append(filters)
        return [
            map_bug({"id": 1, "status": "NEW", "priority": "P3", "last_change_time": "2024-09-01T00:00:00Z"}),
            map_bug({"id": 2, "status": "ASSIGNED", "priority": "P1", "groups": ["core-security"]}),
            map_bug({"id": 3, "status": "NEW", "priority": "P2", "keywords": ["meta"]}),
            map_bug({"id": 4, "status": "IN_PROGRESS", "priority": "P1"}),
        ]


def test_fetch_board_bugs_filters_and_sorts():
    api = DummyAPI()
    svc = BugService(api, AppSettings(default_whiteboard_tag="[fxp]"))
    bugs = svc.fetch_board_bugs()
    assert [b.id for b in bugs] == [4, 1]
    assert api.filters_seen[0].whiteboard_tag == "[fxp]"


def test_meta_bugs_kept_when_configured():
    svc = BugService(DummyAPI(), AppSettings(exclude_meta=False))
    assert [b.id for b in svc.fetch_board_bugs()] == [4, 3, 1]


def test_refresh_reuses_last_filters():
    api = DummyAPI()
    svc = BugService(api)
    events = []
    svc.fetch_board_bugs(BugFilters(component="Toolbar"))
    svc.refresh(progress=lambda msg, cur, tot: events.append(msg))
    assert api.cache_cleared == 1
    assert api.filters_seen[1].component == "Toolbar"
    assert events == ["Querying Bugzilla"]


def test_to_dataframe_has_columns():
    svc = BugService(DummyAPI())
    df = svc.to_dataframe(svc.fetch_board_bugs())
    assert list(df["column"]) == ["in-progress", "backlog"]


def test_connect_builds_service_with_normalized_settings():
    svc = connect("  test_api_key_123 ", "https://bz.example.com/rest/", AppSettings(sort_order="last_changed"))
    assert svc.api.server == "https://bz.example.com/rest"
    assert svc.api.api_key == "test_api_key_123"
    assert svc.settings.sort_order == "last_changed"


def test_connect_logs_and_reraises_rejected_key(caplog):
    with caplog.at_level(logging.WARNING, logger="bzkanban.core.service"):
        with pytest.raises(InvalidApiKeyError):
            connect("short")
    assert "Rejected Bugzilla connection settings" in caplog.text


def test_connect_rejects_bad_server(caplog):
    with caplog.at_level(logging.WARNING, logger="bzkanban.core.service"):
        with pytest.raises(InvalidBaseUrlError):
            connect("test_api_key_123", "ftp://bz.example.com")
    assert caplog.records
