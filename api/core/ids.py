"""
Identifier parsing at the API boundary.
"""

from __future__ import annotations

from uuid import UUID

from .errors import ValidationError

# Postgres BIGINT upper bound.
MAX_INT_ID = 2**63 - 1


def parse_int_id(raw: str | int) -> int:
    value = str(raw).strip()
    # str.isdigit() alone also accepts non-ASCII digits such as superscripts.
    if not (value.isascii() and value.isdigit()):
        raise ValidationError(f"Invalid id: {raw!r}")
    parsed = int(value)
    if not 0 < parsed <= MAX_INT_ID:
        raise ValidationError(f"Invalid id: {raw!r}")
    return parsed


def parse_uuid_id(raw: str | UUID) -> UUID:
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw).strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid id: {raw!r}") from exc


def format_id(value: int | UUID) -> str:
    return str(value)
