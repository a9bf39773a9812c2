"""Mapping raw Bugzilla bug JSON into BugModel instances and back."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import pandas as pd

from .config import BOARD_TABLE_COLUMNS, FIELD_IDS
from .models import BugModel, BugUpdate, FlagModel


def _as_str_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value if v is not None]


def _map_flags(value: Any) -> list[FlagModel]:
    flags: list[FlagModel] = []
    for raw in value or []:
        if not isinstance(raw, dict):
            continue
        name = raw.get("name")
        status = raw.get("status")
        if isinstance(name, str) and isinstance(status, str):
            flags.append(FlagModel(name=name, status=status))
    return flags


def _map_points(value: Any) -> int | str | None:
    # Bugzilla returns "---" for an unset custom field
    if value is None or value == "" or value == "---":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, str)):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return str(value)


def map_bug(raw: dict[str, Any]) -> BugModel:
    detail = raw.get("assigned_to_detail") or {}
    real_name = detail.get("real_name") if isinstance(detail, dict) else None
    return BugModel(
        id=int(raw["id"]),
        summary=raw.get("summary") or "",
        status=raw.get("status") or "",
        resolution=raw.get("resolution") or None,
        assigned_to=raw.get("assigned_to") or "",
        assigned_to_name=real_name or None,
        priority=raw.get("priority") or "--",
        severity=raw.get("severity") or "--",
        component=raw.get("component") or "",
        whiteboard=raw.get("whiteboard") or "",
        points=_map_points(raw.get(FIELD_IDS["points"])),
        keywords=_as_str_list(raw.get("keywords")),
        groups=_as_str_list(raw.get("groups")),
        flags=_map_flags(raw.get("flags")),
        last_change_time=raw.get("last_change_time"),
        creation_time=raw.get("creation_time"),
    )


def update_to_payload(update: BugUpdate) -> dict[str, Any]:
    """Request body for ``PUT /bug/<id>``; unset fields are omitted."""
    return update.changed_fields()


def bugs_to_dataframe(
    bugs: Iterable[BugModel],
    column_for: Callable[[BugModel], str] | None = None,
) -> pd.DataFrame:
    rows = []
    for b in bugs:
        rows.append(
            {
                "id": b.id,
                "summary": b.summary,
                "column": column_for(b) if column_for else None,
                "status": b.status,
                "resolution": b.resolution or "",
                "priority": b.priority,
                "severity": b.severity,
                "assigned_to": b.assigned_to,
                "assigned_to_name": b.assigned_to_name or b.assigned_to,
                "points": b.points,
                "component": b.component,
                "whiteboard": b.whiteboard,
                "last_change_time": b.last_change_time,
                "creation_time": b.creation_time,
            }
        )
    if not rows:
        return pd.DataFrame(columns=list(BOARD_TABLE_COLUMNS))
    df = pd.DataFrame(rows)
    for col in ("last_change_time", "creation_time"):
        df[col] = pd.to_datetime(df[col], utc=True, errors="coerce")
    return df
