"""
Performer persistence: a thin facade over DBI plus performer-specific lookups.
"""

from __future__ import annotations

from datetime import date

from core import db
from core.dbi import DBI
from core.querybuilder import (
    QueryBuilder,
    age_predicates,
    birth_year_predicates,
    string_predicates,
)
from core.schemas import QuerySpec

from .schemas import PerformerFilter
from .tables import (
    PERFORMER_ALIAS_TABLE,
    PERFORMER_PIERCING_TABLE,
    PERFORMER_TABLE,
    PERFORMER_TATTOO_TABLE,
    PERFORMER_URL_TABLE,
    Performer,
    PerformerAlias,
    PerformerBodyMod,
    PerformerUrl,
)

SORT_COLUMNS = ("name", "birthdate", "created_at", "updated_at")


def _in_binding(count: int) -> str:
    return "(" + ", ".join(f"${i}" for i in range(1, count + 1)) + ")"


class PerformerQueryBuilder:
    def __init__(self, conn: db.Queryer) -> None:
        self.dbi = DBI(conn)

    async def create(self, performer: Performer) -> Performer:
        return await self.dbi.insert(PERFORMER_TABLE, performer)

    async def update(self, performer: Performer) -> Performer:
        return await self.dbi.update(PERFORMER_TABLE, performer)

    async def destroy(self, performer_id: int) -> None:
        await self.dbi.delete(performer_id, PERFORMER_TABLE)

    async def find(self, performer_id: int) -> Performer | None:
        return await self.dbi.find(performer_id, PERFORMER_TABLE)

    async def find_by_name(self, name: str) -> list[Performer]:
        return await self.dbi.raw_query(
            PERFORMER_TABLE,
            "SELECT performers.* FROM performers WHERE upper(performers.name) = upper($1)",
            [name],
        )

    async def find_by_names(self, names: list[str]) -> list[Performer]:
        if not names:
            return []
        return await self.dbi.raw_query(
            PERFORMER_TABLE,
            "SELECT performers.* FROM performers WHERE performers.name IN " + _in_binding(len(names)),
            names,
        )

    async def find_by_alias(self, alias: str) -> list[Performer]:
        return await self.dbi.raw_query(
            PERFORMER_TABLE,
            """
            SELECT DISTINCT performers.* FROM performers
            JOIN performer_aliases ON performer_aliases.performer_id = performers.id
            WHERE upper(performer_aliases.alias) = upper($1)
            """,
            [alias],
        )

    async def find_by_aliases(self, aliases: list[str]) -> list[Performer]:
        if not aliases:
            return []
        return await self.dbi.raw_query(
            PERFORMER_TABLE,
            """
            SELECT DISTINCT performers.* FROM performers
            JOIN performer_aliases ON performer_aliases.performer_id = performers.id
            WHERE performer_aliases.alias IN """ + _in_binding(len(aliases)),
            aliases,
        )

    async def count(self) -> int:
        return await self.dbi.count(PERFORMER_TABLE)

    def build_query(self, performer_filter: PerformerFilter, today: date | None = None) -> QueryBuilder:
        query = QueryBuilder("performers", sort_columns=SORT_COLUMNS, default_sort="name")
        query.search(["performers.name"], performer_filter.name)

        if performer_filter.birth_year is not None:
            query.add(*birth_year_predicates("performers.birthdate", performer_filter.birth_year))
        if performer_filter.age is not None:
            query.add(*age_predicates("performers.birthdate", performer_filter.age, today))
        if performer_filter.country is not None:
            query.add(*string_predicates("performers.country", performer_filter.country))
        if performer_filter.gender is not None:
            query.add(*string_predicates("performers.gender", performer_filter.gender))
        if performer_filter.ethnicity is not None:
            query.add(*string_predicates("performers.ethnicity", performer_filter.ethnicity))
        return query

    async def query(
        self,
        performer_filter: PerformerFilter | None = None,
        spec: QuerySpec | None = None,
    ) -> tuple[list[Performer], int]:
        query = self.build_query(performer_filter or PerformerFilter())
        ids, count = await query.execute_find(self.dbi.conn, spec or QuerySpec())

        performers: list[Performer] = []
        for performer_id in ids:
            performer = await self.find(performer_id)
            if performer is not None:
                performers.append(performer)
        return performers, count

    async def get_aliases(self, performer_id: int) -> list[str]:
        joins = await self.dbi.find_joins(PERFORMER_ALIAS_TABLE, performer_id)
        return [join.alias for join in joins]

    async def get_urls(self, performer_id: int) -> list[PerformerUrl]:
        return await self.dbi.find_joins(PERFORMER_URL_TABLE, performer_id)

    async def get_tattoos(self, performer_id: int) -> list[PerformerBodyMod]:
        return await self.dbi.find_joins(PERFORMER_TATTOO_TABLE, performer_id)

    async def get_piercings(self, performer_id: int) -> list[PerformerBodyMod]:
        return await self.dbi.find_joins(PERFORMER_PIERCING_TABLE, performer_id)

    async def create_aliases(self, joins: list[PerformerAlias]) -> None:
        await self.dbi.insert_joins(PERFORMER_ALIAS_TABLE, joins)

    async def update_aliases(self, performer_id: int, joins: list[PerformerAlias]) -> None:
        await self.dbi.replace_joins(PERFORMER_ALIAS_TABLE, performer_id, joins)

    async def create_urls(self, joins: list[PerformerUrl]) -> None:
        await self.dbi.insert_joins(PERFORMER_URL_TABLE, joins)

    async def update_urls(self, performer_id: int, joins: list[PerformerUrl]) -> None:
        await self.dbi.replace_joins(PERFORMER_URL_TABLE, performer_id, joins)

    async def create_tattoos(self, joins: list[PerformerBodyMod]) -> None:
        await self.dbi.insert_joins(PERFORMER_TATTOO_TABLE, joins)

    async def update_tattoos(self, performer_id: int, joins: list[PerformerBodyMod]) -> None:
        await self.dbi.replace_joins(PERFORMER_TATTOO_TABLE, performer_id, joins)

    async def create_piercings(self, joins: list[PerformerBodyMod]) -> None:
        await self.dbi.insert_joins(PERFORMER_PIERCING_TABLE, joins)

    async def update_piercings(self, performer_id: int, joins: list[PerformerBodyMod]) -> None:
        await self.dbi.replace_joins(PERFORMER_PIERCING_TABLE, performer_id, joins)
