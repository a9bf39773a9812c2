"""Boundary validation for API keys, bug ids, and Bugzilla base URLs."""

from __future__ import annotations

import re
from urllib.parse import urlparse

from .config import API_KEY_MIN_LENGTH
from .errors import InvalidApiKeyError, InvalidBaseUrlError, InvalidBugIdError

# Bugzilla API keys are alphanumeric with possible underscores/dashes
_API_KEY_PATTERN = re.compile(r"^[\w-]+$")


def validate_api_key(key: str | None) -> str:
    """Return the trimmed key, or raise ``InvalidApiKeyError``.

    Examples
    --------
    >>> validate_api_key("  abcdefghij_12  ")
    'abcdefghij_12'
    """
    trimmed = (key or "").strip()
    if not trimmed:
        raise InvalidApiKeyError("API key cannot be empty")
    if len(trimmed) < API_KEY_MIN_LENGTH:
        raise InvalidApiKeyError(f"API key must be at least {API_KEY_MIN_LENGTH} characters")
    if not _API_KEY_PATTERN.match(trimmed):
        raise InvalidApiKeyError("API key contains invalid characters")
    return trimmed


def try_validate_api_key(key: str | None) -> str | None:
    if not key:
        return None
    try:
        return validate_api_key(key)
    except InvalidApiKeyError:
        return None


def validate_bug_id(bug_id: object) -> int:
    # bool is an int subclass; True must not pass as bug 1
    if isinstance(bug_id, bool) or not isinstance(bug_id, int) or bug_id <= 0:
        raise InvalidBugIdError(f"Invalid bug ID: {bug_id!r}. Must be a positive integer.")
    return bug_id


def validate_base_url(url: str) -> str:
    """Accept an absolute http(s) URL or a relative path; strip trailing slashes."""
    trimmed = (url or "").strip()
    if trimmed.startswith("/"):
        return trimmed.rstrip("/")
    parsed = urlparse(trimmed)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidBaseUrlError(f"Invalid URL: {trimmed}")
    return trimmed.rstrip("/")
