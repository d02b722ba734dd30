"""
Pending activation persistence.
"""

from __future__ import annotations

from uuid import UUID

from core import db
from core.dbi import DBI

from .tables import PENDING_ACTIVATION_TABLE, PendingActivation


class PendingActivationQueryBuilder:
    def __init__(self, conn: db.Queryer) -> None:
        self.dbi = DBI(conn)

    async def create(self, activation: PendingActivation) -> PendingActivation:
        return await self.dbi.insert(PENDING_ACTIVATION_TABLE, activation)

    async def destroy(self, activation_id: UUID) -> None:
        await self.dbi.delete(activation_id, PENDING_ACTIVATION_TABLE)

    async def find(self, activation_id: UUID) -> PendingActivation | None:
        return await self.dbi.find(activation_id, PENDING_ACTIVATION_TABLE)

    async def _find_first(self, sql: str, value: str) -> PendingActivation | None:
        rows = await self.dbi.raw_query(PENDING_ACTIVATION_TABLE, sql, [value])
        return rows[0] if rows else None

    async def find_by_email(self, email: str) -> PendingActivation | None:
        return await self._find_first(
            "SELECT pending_activations.* FROM pending_activations "
            "WHERE lower(pending_activations.email) = lower($1)",
            email,
        )

    async def find_by_key(self, key: str) -> PendingActivation | None:
        return await self._find_first(
            "SELECT pending_activations.* FROM pending_activations "
            "WHERE pending_activations.invite_key = $1",
            key,
        )

    async def count(self) -> int:
        return await self.dbi.count(PENDING_ACTIVATION_TABLE)
