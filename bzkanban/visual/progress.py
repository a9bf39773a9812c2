"""Progress feedback for fetch and apply passes."""

from __future__ import annotations

import streamlit as st

from bzkanban.core.models import ApplyResult


class ProgressReporter:
    """Collapsible status block with a bar, fed by ``(message, done, total)`` callbacks."""

    def __init__(self, title: str):
        self._status = st.status(title, expanded=False)
        self._bar = self._status.progress(0.0)
        self._finished = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        if self._finished:
            return
        if current is None or not total:
            # Unknown total, e.g. while a search is in flight
            self._status.update(label=message, state="running")
            return
        ratio = min(max(current / total, 0.0), 1.0)
        self._bar.progress(ratio, text=f"{message} ({current}/{total})")

    def complete(self, message: str) -> None:
        if self._finished:
            return
        self._bar.progress(1.0)
        self._status.update(label=message, state="complete")
        self._finished = True

    def error(self, message: str) -> None:
        if self._finished:
            return
        self._status.update(label=message, state="error", expanded=True)
        self._status.error(message)
        self._finished = True

    def finish_apply(self, result: ApplyResult, apply_error: str | None = None) -> None:
        """Close out an apply pass; any failure keeps the block open."""
        if result.fail_count == 0:
            self.complete(f"{result.success_count} bug(s) updated.")
            return
        summary = f"{result.success_count} updated, {result.fail_count} failed"
        self.error(f"{summary}: {apply_error}" if apply_error else summary)
