"""
User rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from core.tables import Table

ROLE_READ = "READ"
ROLE_MODIFY = "MODIFY"
ROLE_ADMIN = "ADMIN"


@dataclass
class User:
    id: int | None = None
    email: str = ""
    password_hash: str = ""
    roles: list[str] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


USER_TABLE = Table("users", User)
