"""BugService: fetches board bugs and applies the read-only board filters."""

from __future__ import annotations

import logging
from collections.abc import Callable

import pandas as pd

from bzkanban.analytics.filters import filter_meta_bugs, filter_public_bugs, filter_recent_bugs
from bzkanban.analytics.sorting import sort_bugs

from .bugzilla_client import BugzillaAPI
from .column_assignment import assign_column
from .config import BUGZILLA_DEFAULT_URL, AppSettings
from .errors import ValidationError
from .mappers import bugs_to_dataframe
from .models import BugFilters, BugModel
from .validation import validate_api_key

ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


class BugService:
    def __init__(self, api: BugzillaAPI, settings: AppSettings | None = None):
        self.api = api
        self.settings = settings or AppSettings()
        self._last_filters: BugFilters | None = None

    def fetch_board_bugs(
        self,
        filters: BugFilters | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> list[BugModel]:
        """Fetch bugs for the board, dropping restricted and meta bugs.

        Non-public bugs (any group membership) are always removed. Meta bugs
        and stale bugs are removed according to ``settings``.
        """
        filters = filters or BugFilters(
            whiteboard_tag=self.settings.default_whiteboard_tag,
            component=self.settings.default_component,
        )
        self._last_filters = filters
        if progress:
            progress("Querying Bugzilla", None, None)
        bugs = self.api.get_bugs(filters)
        fetched = len(bugs)
        bugs = filter_public_bugs(bugs)
        bugs = filter_meta_bugs(bugs, self.settings.exclude_meta)
        if self.settings.recent_only:
            bugs = filter_recent_bugs(bugs)
        logger.debug("Fetched %s bug(s), %s shown on the board", fetched, len(bugs))
        return sort_bugs(bugs, self.settings.sort_order)

    def refresh(self, *, progress: ProgressCallback | None = None) -> list[BugModel]:
        """Re-run the last fetch against fresh data."""
        if hasattr(self.api, "clear_cache"):
            self.api.clear_cache()
        return self.fetch_board_bugs(self._last_filters, progress=progress)

    @staticmethod
    def to_dataframe(bugs: list[BugModel], column_for: Callable[[BugModel], str] = assign_column) -> pd.DataFrame:
        return bugs_to_dataframe(bugs, column_for=column_for)


def connect(api_key: str, server: str | None = None, settings: AppSettings | None = None) -> BugService:
    """Validate credentials and build a BugService over a fresh client.

    Rejected input is logged (never the key itself) and re-raised.
    """
    try:
        key = validate_api_key(api_key)
        api = BugzillaAPI(key, server or BUGZILLA_DEFAULT_URL)
    except ValidationError as exc:
        logger.warning("Rejected Bugzilla connection settings: %s", exc)
        raise
    return BugService(api, settings)
