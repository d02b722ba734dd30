"""Tests for the generic data-access interface."""

from datetime import date
from unittest.mock import AsyncMock
from uuid import uuid4

import asyncpg
import pytest

from activations.tables import PENDING_ACTIVATION_TABLE, PendingActivation
from core.dbi import DBI
from core.errors import NotFoundError, StorageError
from performers.tables import (
    PERFORMER_ALIAS_TABLE,
    PERFORMER_TABLE,
    PERFORMER_URL_TABLE,
    Performer,
    PerformerAlias,
    PerformerUrl,
)


class TestInsert:
    @pytest.mark.asyncio
    async def test_insert_returns_fresh_copy_with_id(self, conn):
        dbi = DBI(conn)
        row = Performer(name="Jane", birthdate=date(1990, 5, 1), country="US")

        created = await dbi.insert(PERFORMER_TABLE, row)

        assert created.id == 1
        assert created is not row
        assert row.id is None
        assert created.name == "Jane"

    @pytest.mark.asyncio
    async def test_find_after_insert_is_equal(self, conn):
        dbi = DBI(conn)
        created = await dbi.insert(PERFORMER_TABLE, Performer(name="Jane", height=170))

        found = await dbi.find(created.id, PERFORMER_TABLE)

        assert found == created

    @pytest.mark.asyncio
    async def test_insert_keeps_caller_supplied_uuid(self, conn):
        dbi = DBI(conn)
        activation_id = uuid4()

        created = await dbi.insert(
            PENDING_ACTIVATION_TABLE,
            PendingActivation(id=activation_id, email="a@example.com", invite_key="k" * 20),
        )

        assert created.id == activation_id
        sql, _ = conn.statements[0]
        assert sql.startswith("INSERT INTO pending_activations (id, email, invite_key, time)")

    @pytest.mark.asyncio
    async def test_insert_omits_id_when_unset(self, conn):
        await DBI(conn).insert(PERFORMER_TABLE, Performer(name="Jane"))
        sql, _ = conn.statements[0]
        assert "(id," not in sql
        assert sql.startswith("INSERT INTO performers (name,")

    @pytest.mark.asyncio
    async def test_driver_error_is_wrapped(self):
        mock_conn = AsyncMock()
        mock_conn.fetchrow.side_effect = asyncpg.exceptions.UniqueViolationError("duplicate key")

        with pytest.raises(StorageError) as exc_info:
            await DBI(mock_conn).insert(PERFORMER_TABLE, Performer(name="Jane"))

        assert exc_info.value.operation == "insert"
        assert exc_info.value.entity == "performers"
        assert isinstance(exc_info.value.__cause__, asyncpg.exceptions.UniqueViolationError)

    @pytest.mark.asyncio
    async def test_connection_error_is_wrapped(self):
        mock_conn = AsyncMock()
        mock_conn.fetchrow.side_effect = ConnectionRefusedError("db down")

        with pytest.raises(StorageError) as exc_info:
            await DBI(mock_conn).find(1, PERFORMER_TABLE)

        assert exc_info.value.operation == "find"


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_then_find_returns_new_values(self, conn):
        dbi = DBI(conn)
        created = await dbi.insert(PERFORMER_TABLE, Performer(name="Jane", country="US"))

        created.name = "Janet"
        created.country = "CA"
        updated = await dbi.update(PERFORMER_TABLE, created)
        found = await dbi.find(created.id, PERFORMER_TABLE)

        assert updated.name == "Janet"
        assert found.name == "Janet"
        assert found.country == "CA"

    @pytest.mark.asyncio
    async def test_update_never_touches_id_or_created_at(self, conn):
        dbi = DBI(conn)
        created = await dbi.insert(PERFORMER_TABLE, Performer(name="Jane"))

        await dbi.update(PERFORMER_TABLE, created)

        sql, _ = conn.statements[-2]
        assert sql.startswith("UPDATE performers SET name = $1")
        set_clause, where_clause = sql.split(" WHERE ")
        assert "created_at =" not in set_clause
        assert " id = " not in set_clause
        assert where_clause.startswith("id = $")

    @pytest.mark.asyncio
    async def test_update_missing_row_raises_not_found(self, conn):
        with pytest.raises(NotFoundError):
            await DBI(conn).update(PERFORMER_TABLE, Performer(id=42, name="Ghost"))


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_missing_row_raises_not_found(self, conn):
        with pytest.raises(NotFoundError):
            await DBI(conn).delete(99, PERFORMER_TABLE)
        # Nothing was deleted: only the existence check ran.
        assert all(not sql.startswith("DELETE") for sql, _ in conn.statements)

    @pytest.mark.asyncio
    async def test_delete_leaves_no_join_rows(self, conn):
        dbi = DBI(conn)
        created = await dbi.insert(PERFORMER_TABLE, Performer(name="Jane"))
        await dbi.insert_joins(
            PERFORMER_ALIAS_TABLE,
            [PerformerAlias(created.id, "JJ"), PerformerAlias(created.id, "Janie")],
        )

        await dbi.delete(created.id, PERFORMER_TABLE)

        assert await dbi.find(created.id, PERFORMER_TABLE) is None
        assert await dbi.find_joins(PERFORMER_ALIAS_TABLE, created.id) == []

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, conn):
        assert await DBI(conn).find(7, PERFORMER_TABLE) is None


class TestJoins:
    @pytest.mark.asyncio
    async def test_replace_joins_is_idempotent(self, conn):
        dbi = DBI(conn)
        performer = await dbi.insert(PERFORMER_TABLE, Performer(name="Jane"))
        urls = [
            PerformerUrl(performer.id, "https://a.test", "HOME"),
            PerformerUrl(performer.id, "https://b.test", "SOCIAL"),
        ]

        await dbi.replace_joins(PERFORMER_URL_TABLE, performer.id, urls)
        first = await dbi.find_joins(PERFORMER_URL_TABLE, performer.id)
        await dbi.replace_joins(PERFORMER_URL_TABLE, performer.id, urls)
        second = await dbi.find_joins(PERFORMER_URL_TABLE, performer.id)

        assert first == second == urls

    @pytest.mark.asyncio
    async def test_replace_joins_drops_rows_not_in_new_set(self, conn):
        dbi = DBI(conn)
        performer = await dbi.insert(PERFORMER_TABLE, Performer(name="Jane"))
        await dbi.insert_joins(PERFORMER_ALIAS_TABLE, [PerformerAlias(performer.id, "Old")])

        await dbi.replace_joins(PERFORMER_ALIAS_TABLE, performer.id, [PerformerAlias(performer.id, "New")])

        aliases = await dbi.find_joins(PERFORMER_ALIAS_TABLE, performer.id)
        assert [a.alias for a in aliases] == ["New"]

    @pytest.mark.asyncio
    async def test_delete_joins_with_no_rows_succeeds(self, conn):
        await DBI(conn).delete_joins(PERFORMER_ALIAS_TABLE, 12)

    @pytest.mark.asyncio
    async def test_insert_joins_stops_at_first_error(self, conn):
        dbi = DBI(conn)
        rows = [
            PerformerUrl(1, "https://a.test", "HOME"),
            PerformerUrl(1, "https://a.test", "HOME"),
            PerformerUrl(1, "https://c.test", "HOME"),
        ]

        with pytest.raises(StorageError):
            await dbi.insert_joins(PERFORMER_URL_TABLE, rows)

        # The first insert stays until the enclosing transaction rolls back.
        assert [r["url"] for r in conn.rows("performer_urls")] == ["https://a.test"]

    @pytest.mark.asyncio
    async def test_joins_are_scoped_to_parent(self, conn):
        dbi = DBI(conn)
        await dbi.insert_joins(
            PERFORMER_ALIAS_TABLE,
            [PerformerAlias(1, "One"), PerformerAlias(2, "Two")],
        )

        await dbi.delete_joins(PERFORMER_ALIAS_TABLE, 1)

        assert [a.alias for a in await dbi.find_joins(PERFORMER_ALIAS_TABLE, 2)] == ["Two"]


class TestRawQuery:
    @pytest.mark.asyncio
    async def test_no_rows_is_empty_list(self, conn):
        rows = await DBI(conn).raw_query(
            PERFORMER_TABLE,
            "SELECT performers.* FROM performers WHERE upper(performers.name) = upper($1)",
            ["nobody"],
        )
        assert rows == []

    @pytest.mark.asyncio
    async def test_each_record_becomes_a_fresh_row(self):
        mock_conn = AsyncMock()
        mock_conn.fetch.return_value = [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}]

        rows = await DBI(mock_conn).raw_query(PERFORMER_TABLE, "SELECT 1", [])

        assert [r.name for r in rows] == ["A", "B"]
        assert all(isinstance(r, Performer) for r in rows)

    @pytest.mark.asyncio
    async def test_count(self, conn):
        dbi = DBI(conn)
        await dbi.insert(PERFORMER_TABLE, Performer(name="A"))
        await dbi.insert(PERFORMER_TABLE, Performer(name="B"))
        assert await dbi.count(PERFORMER_TABLE) == 2
