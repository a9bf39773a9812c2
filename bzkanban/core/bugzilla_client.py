"""Bugzilla REST client wrapper (search + sequential batch updates)."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

import requests

from .config import API_KEY_HEADER, BUGZILLA_DEFAULT_URL, BUGZILLA_FETCH_FIELDS, REQUEST_TIMEOUT_SECONDS
from .errors import BugzillaError, BugzillaTimeoutError
from .mappers import map_bug, update_to_payload
from .models import BatchUpdateResult, BugFilters, BugModel, BugUpdate, FailedUpdate
from .validation import validate_base_url

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]


class BugzillaAPI:
    def __init__(
        self,
        api_key: str,
        server: str = BUGZILLA_DEFAULT_URL,
        *,
        session: requests.Session | None = None,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
    ):
        self.server = validate_base_url(server)
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                API_KEY_HEADER: api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        # Simple in-memory cache: {(hash): (timestamp, data)}
        self._cache: dict[str, tuple[float, list[dict[str, Any]]]] = {}
        self._cache_ttl = 60.0  # seconds

    def clear_cache(self) -> None:
        """Reset the in-memory search cache."""
        cache = getattr(self, "_cache", None)
        if isinstance(cache, dict):
            cache.clear()

    def _cache_key(self, params: dict[str, Any]) -> str:
        return hashlib.sha256(json.dumps(params, sort_keys=True).encode()).hexdigest()

    # ------------------ Reads ------------------
    def search_raw(self, filters: BugFilters | None = None) -> list[dict[str, Any]]:
        filters = filters or BugFilters()
        params: dict[str, Any] = {"include_fields": ",".join(BUGZILLA_FETCH_FIELDS)}
        if filters.whiteboard_tag:
            params["whiteboard"] = filters.whiteboard_tag
        if filters.component:
            params["component"] = filters.component
        if filters.statuses:
            params["status"] = list(filters.statuses)
        if filters.limit:
            params["limit"] = filters.limit

        key = self._cache_key(params)
        now = time.time()
        cached = self._cache.get(key)
        if cached and (now - cached[0]) < self._cache_ttl:
            return cached[1]
        data = self._request("GET", f"{self.server}/bug", params=params)
        bugs = list(data.get("bugs", []) or [])
        self._cache[key] = (now, bugs)
        return bugs

    def get_bugs(self, filters: BugFilters | None = None) -> list[BugModel]:
        return [map_bug(raw) for raw in self.search_raw(filters)]

    # ------------------ Writes ------------------
    def update_bug(self, bug_id: int, changes: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"{self.server}/bug/{bug_id}", json=changes)

    def batch_update_bugs(
        self,
        updates: Sequence[BugUpdate],
        *,
        progress: ProgressCallback | None = None,
    ) -> BatchUpdateResult:
        """Apply updates one at a time, isolating failures per bug.

        At most one request is outstanding at any time. Progress is reported
        as ``(message, done, total)`` before the first and after each update.
        """
        result = BatchUpdateResult()
        if not updates:
            return result
        total = len(updates)
        if progress:
            progress("Applying changes to Bugzilla", 0, total)
        for idx, update in enumerate(updates, start=1):
            try:
                self.update_bug(update.id, update_to_payload(update))
                result.successful.append(update.id)
                logger.debug("Updated bug %s", update.id)
            except BugzillaError as exc:
                logger.warning("Failed to update bug %s: %s", update.id, exc)
                result.failed.append(FailedUpdate(id=update.id, error=str(exc)))
            except Exception as exc:
                # One bad update must not abort the rest of the pass
                logger.exception("Unexpected error updating bug %s", update.id)
                result.failed.append(FailedUpdate(id=update.id, error=str(exc) or "Unknown error"))
            if progress:
                progress("Applying changes to Bugzilla", idx, total)
        # Board data is stale after any write
        self.clear_cache()
        return result

    # ------------------ Internal Helpers ------------------
    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            raise BugzillaTimeoutError(f"Request timeout after {self.timeout} seconds") from exc
        except requests.RequestException as exc:
            raise BugzillaError(str(exc)) from exc
        if resp.status_code >= 400:
            self._raise_for_status(resp)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as exc:
            # Proxies and login redirects answer 2xx with HTML
            raise BugzillaError("Invalid JSON response from Bugzilla", resp.status_code) from exc

    @staticmethod
    def _raise_for_status(resp: requests.Response) -> None:
        message = "Bugzilla API error"
        try:
            payload = resp.json()
            if isinstance(payload, dict) and payload.get("message"):
                message = str(payload["message"])
        except ValueError:
            pass
        status = resp.status_code
        if status == 401:
            raise BugzillaError(f"Unauthorized: {message}", status)
        if status == 404:
            raise BugzillaError("Not Found", status)
        if status in (400, 500):
            raise BugzillaError(message, status)
        raise BugzillaError(f"{message} ({status})", status)
