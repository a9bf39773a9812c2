"""Load board defaults from an optional ``board.yaml`` (with fallbacks)."""

from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path

import yaml

from .config import SORT_ORDERS, AppSettings

logger = logging.getLogger(__name__)

_CACHE: AppSettings | None = None


def load_board_settings(base_path: str | Path | None = None, *, reload: bool = False) -> AppSettings:
    global _CACHE
    if _CACHE is not None and not reload:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "board.yaml"
    if not yaml_path.exists():
        _CACHE = AppSettings()
        return _CACHE
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable %s: %s", yaml_path, exc)
        _CACHE = AppSettings()
        return _CACHE
    board = data.get("board", {}) or {}
    known = {f.name for f in fields(AppSettings)}
    settings = AppSettings(**{k: v for k, v in board.items() if k in known})
    if settings.sort_order not in SORT_ORDERS:
        logger.warning("Unknown sort order %r in %s; using default", settings.sort_order, yaml_path)
        settings.sort_order = AppSettings().sort_order
    _CACHE = settings
    return _CACHE
