"""
Environment-backed settings.

Values are read on every call, never cached at import.
"""

from __future__ import annotations

import os


def env_str(name: str, default: str = "") -> str:
    value = os.environ.get(name, "").strip()
    return value or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_list(name: str, default: list[str]) -> list[str]:
    """
    Comma-separated list; blank entries are dropped.
    """
    items = [item.strip() for item in os.environ.get(name, "").split(",") if item.strip()]
    return items or list(default)
