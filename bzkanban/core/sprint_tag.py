"""Helpers for the sprint marker carried in the whiteboard field."""

from __future__ import annotations

import re

from .config import SPRINT_TAG

# Whole bracketed token only: "[bzkanban-sprint-old]" must not match.
_SPRINT_TAG_RE = re.compile(re.escape(SPRINT_TAG) + r"(?![^\s\]])")


def has_sprint_tag(whiteboard: str | None) -> bool:
    return bool(whiteboard) and _SPRINT_TAG_RE.search(whiteboard) is not None


def add_sprint_tag(whiteboard: str | None) -> str:
    trimmed = (whiteboard or "").strip()
    if has_sprint_tag(trimmed):
        return trimmed
    if not trimmed:
        return SPRINT_TAG
    return f"{trimmed} {SPRINT_TAG}"


def remove_sprint_tag(whiteboard: str | None) -> str:
    """Strip every literal copy of the tag once a whole-token tag is present."""
    text = whiteboard or ""
    if not has_sprint_tag(text):
        return text
    return " ".join(text.replace(SPRINT_TAG, "").split())
