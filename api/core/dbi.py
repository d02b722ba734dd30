"""
Generic data-access interface over asyncpg.

`DBI` maps row dataclasses to and from tables described by `core.tables`.
It keeps no state besides the connection it was built with: pass the pool
for standalone reads, or the connection yielded by `db.transaction()` to take
part in a caller's transaction. DBI never commits or rolls back.

Every write re-reads the row afterwards so callers get storage-computed
values (defaults, timestamps) instead of their own in-memory copy.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from . import db
from .errors import NotFoundError, StorageError
from .tables import JoinTable, RowT, Table, row_values

logger = logging.getLogger(__name__)

# Written once at insert time and never overwritten by update().
IMMUTABLE_COLUMNS = frozenset({"id", "created_at"})


def placeholders(count: int, start: int = 1) -> str:
    return ", ".join(f"${i}" for i in range(start, start + count))


def select_statement(table: Table[Any]) -> str:
    return f"SELECT {table.name}.* FROM {table.name}"


class DBI:
    def __init__(self, conn: db.Queryer) -> None:
        self.conn = conn

    async def _run(self, operation: str, entity: str, coro):
        try:
            return await coro
        except db.DRIVER_ERRORS as exc:
            logger.warning("storage_error operation=%s entity=%s error=%s", operation, entity, exc)
            raise StorageError(operation, entity, exc) from exc

    async def _insert_row(self, table: Table[Any], row: Any) -> Any:
        columns = table.columns()
        if getattr(row, "id", None) is None:
            columns = [c for c in columns if c != "id"]
        values = row_values(row, columns)
        sql = (
            f"INSERT INTO {table.name} ({', '.join(columns)}) "
            f"VALUES ({placeholders(len(columns))}) RETURNING *"
        )
        return await self._run("insert", table.name, db.fetch_one(self.conn, sql, *values))

    async def insert(self, table: Table[RowT], row: RowT) -> RowT:
        record = await self._insert_row(table, row)
        if record is None:
            raise StorageError("insert", table.name)

        created = await self.find(record["id"], table)
        if created is None:
            raise StorageError("find after insert", table.name)
        return created

    async def update(self, table: Table[RowT], row: RowT) -> RowT:
        row_id = getattr(row, "id")
        columns = [c for c in table.columns() if c not in IMMUTABLE_COLUMNS]
        assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(columns, start=1))
        sql = f"UPDATE {table.name} SET {assignments} WHERE id = ${len(columns) + 1}"

        status = await self._run(
            "update",
            table.name,
            db.execute(self.conn, sql, *row_values(row, columns), row_id),
        )
        if db.affected_rows(status) == 0:
            raise NotFoundError(f"Row with id {row_id} not found in {table.name}")

        updated = await self.find(row_id, table)
        if updated is None:
            raise StorageError("find after update", table.name)
        return updated

    async def delete(self, row_id: Any, table: Table[Any]) -> None:
        existing = await self.find(row_id, table)
        if existing is None:
            raise NotFoundError(f"Row with id {row_id} not found in {table.name}")

        await self._run(
            "delete",
            table.name,
            db.execute(self.conn, f"DELETE FROM {table.name} WHERE id = $1", row_id),
        )

    async def find(self, row_id: Any, table: Table[RowT]) -> RowT | None:
        sql = select_statement(table) + f" WHERE {table.name}.id = $1 LIMIT 1"
        record = await self._run("find", table.name, db.fetch_one(self.conn, sql, row_id))
        if record is None:
            return None
        return table.from_record(record)

    async def insert_join(self, join_table: JoinTable[RowT], row: RowT) -> None:
        await self._insert_row(join_table, row)

    async def insert_joins(self, join_table: JoinTable[RowT], rows: Iterable[RowT]) -> None:
        # Stops at the first failure; earlier inserts are undone only by the
        # enclosing transaction.
        for row in rows:
            await self.insert_join(join_table, row)

    async def replace_joins(self, join_table: JoinTable[RowT], parent_id: Any, rows: Iterable[RowT]) -> None:
        await self.delete_joins(join_table, parent_id)
        await self.insert_joins(join_table, rows)

    async def delete_joins(self, join_table: JoinTable[Any], parent_id: Any) -> None:
        sql = f"DELETE FROM {join_table.name} WHERE {join_table.join_column} = $1"
        await self._run("delete joins", join_table.name, db.execute(self.conn, sql, parent_id))

    async def find_joins(self, join_table: JoinTable[RowT], parent_id: Any) -> list[RowT]:
        sql = select_statement(join_table) + f" WHERE {join_table.name}.{join_table.join_column} = $1"
        return await self.raw_query(join_table, sql, [parent_id])

    async def raw_query(self, table: Table[RowT], sql: str, args: Sequence[Any] = ()) -> list[RowT]:
        records = await self._run("query", table.name, db.fetch_all(self.conn, sql, *args))
        return [table.from_record(record) for record in records]

    async def count(self, table: Table[Any]) -> int:
        sql = f"SELECT COUNT(*) AS total FROM {table.name}"
        record = await self._run("count", table.name, db.fetch_one(self.conn, sql))
        return int((record or {}).get("total", 0))
