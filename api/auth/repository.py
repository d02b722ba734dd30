"""
Auth persistence helpers.
"""

from __future__ import annotations

from core import db
from core.dbi import DBI

from .tables import USER_TABLE, User


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserQueryBuilder:
    def __init__(self, conn: db.Queryer) -> None:
        self.dbi = DBI(conn)

    async def create(self, user: User) -> User:
        user.email = normalize_email(user.email)
        return await self.dbi.insert(USER_TABLE, user)

    async def find(self, user_id: int) -> User | None:
        return await self.dbi.find(user_id, USER_TABLE)

    async def find_by_email(self, email: str) -> User | None:
        users = await self.dbi.raw_query(
            USER_TABLE,
            "SELECT users.* FROM users WHERE lower(users.email) = lower($1) LIMIT 1",
            [normalize_email(email)],
        )
        return users[0] if users else None
