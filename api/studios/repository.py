"""
Studio persistence.
"""

from __future__ import annotations

from core import db
from core.dbi import DBI
from core.querybuilder import QueryBuilder
from core.schemas import QuerySpec

from .schemas import StudioFilter
from .tables import STUDIO_CHILD_TABLE, STUDIO_TABLE, STUDIO_URL_TABLE, Studio, StudioUrl

SORT_COLUMNS = ("name", "created_at", "updated_at")


class StudioQueryBuilder:
    def __init__(self, conn: db.Queryer) -> None:
        self.dbi = DBI(conn)

    async def create(self, studio: Studio) -> Studio:
        return await self.dbi.insert(STUDIO_TABLE, studio)

    async def update(self, studio: Studio) -> Studio:
        return await self.dbi.update(STUDIO_TABLE, studio)

    async def destroy(self, studio_id: int) -> None:
        await self.dbi.delete(studio_id, STUDIO_TABLE)

    async def find(self, studio_id: int) -> Studio | None:
        return await self.dbi.find(studio_id, STUDIO_TABLE)

    async def find_by_name(self, name: str) -> Studio | None:
        studios = await self.dbi.raw_query(
            STUDIO_TABLE,
            "SELECT studios.* FROM studios WHERE upper(studios.name) = upper($1) ORDER BY studios.id LIMIT 1",
            [name],
        )
        return studios[0] if studios else None

    async def find_by_parent_id(self, parent_id: int) -> list[Studio]:
        return await self.dbi.find_joins(STUDIO_CHILD_TABLE, parent_id)

    async def count(self) -> int:
        return await self.dbi.count(STUDIO_TABLE)

    def build_query(self, studio_filter: StudioFilter) -> QueryBuilder:
        query = QueryBuilder("studios", sort_columns=SORT_COLUMNS, default_sort="name")
        return query.search(["studios.name"], studio_filter.name)

    async def query(
        self,
        studio_filter: StudioFilter | None = None,
        spec: QuerySpec | None = None,
    ) -> tuple[list[Studio], int]:
        query = self.build_query(studio_filter or StudioFilter())
        ids, count = await query.execute_find(self.dbi.conn, spec or QuerySpec())

        studios: list[Studio] = []
        for studio_id in ids:
            studio = await self.find(studio_id)
            if studio is not None:
                studios.append(studio)
        return studios, count

    async def get_urls(self, studio_id: int) -> list[StudioUrl]:
        return await self.dbi.find_joins(STUDIO_URL_TABLE, studio_id)

    async def create_urls(self, joins: list[StudioUrl]) -> None:
        await self.dbi.insert_joins(STUDIO_URL_TABLE, joins)

    async def update_urls(self, studio_id: int, joins: list[StudioUrl]) -> None:
        await self.dbi.replace_joins(STUDIO_URL_TABLE, studio_id, joins)
