"""
Studio business logic.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import asyncpg

from auth import service as auth_service
from core import db
from core.errors import ValidationError
from core.ids import format_id, parse_int_id

from . import schemas, tables
from .repository import StudioQueryBuilder
from .tables import Studio

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def _resolve_parent_id(qb: StudioQueryBuilder, raw_parent_id: str | None, *, studio_id: int | None = None) -> int | None:
    if raw_parent_id is None or not raw_parent_id.strip():
        return None

    parent_id = parse_int_id(raw_parent_id)
    if studio_id is not None and parent_id == studio_id:
        raise ValidationError("A studio cannot be its own parent.")
    parent = await qb.find(parent_id)
    if parent is None:
        raise ValidationError(f"Parent studio {parent_id} does not exist.")
    if studio_id is not None:
        await _check_ancestry(qb, parent, studio_id)
    return parent_id


async def _check_ancestry(qb: StudioQueryBuilder, parent: Studio, studio_id: int) -> None:
    # Walk up from the new parent; meeting studio_id means the link would close a cycle.
    seen = {int(parent.id)}
    current = parent
    while current.parent_studio_id is not None:
        ancestor_id = int(current.parent_studio_id)
        if ancestor_id == studio_id:
            raise ValidationError("A studio cannot be an ancestor of its own parent.")
        if ancestor_id in seen:
            return None
        seen.add(ancestor_id)
        current = await qb.find(ancestor_id)
        if current is None:
            return None


def _summary(studio: Studio) -> schemas.StudioSummary:
    return schemas.StudioSummary(id=format_id(int(studio.id)), name=studio.name)


async def to_response(qb: StudioQueryBuilder, studio: Studio) -> schemas.StudioResponse:
    studio_id = int(studio.id)
    urls = await qb.get_urls(studio_id)

    parent = None
    if studio.parent_studio_id is not None:
        parent_row = await qb.find(int(studio.parent_studio_id))
        parent = _summary(parent_row) if parent_row is not None else None

    children = await qb.find_by_parent_id(studio_id)
    return schemas.StudioResponse(
        id=format_id(studio_id),
        name=studio.name,
        urls=[schemas.URLResponse(url=u.url, type=u.type) for u in urls],
        parent=parent,
        child_studios=[_summary(child) for child in children],
        created_at=studio.created_at,
        updated_at=studio.updated_at,
    )


async def find_studio(
    pool: asyncpg.Pool,
    user: dict,
    *,
    studio_id: int | None = None,
    name: str | None = None,
) -> schemas.StudioResponse | None:
    auth_service.validate_read(user)
    qb = StudioQueryBuilder(pool)

    if studio_id is not None:
        studio = await qb.find(studio_id)
    elif name is not None:
        studio = await qb.find_by_name(name)
    else:
        return None

    if studio is None:
        return None
    return await to_response(qb, studio)


async def query_studios(
    pool: asyncpg.Pool,
    user: dict,
    request: schemas.StudioQueryRequest,
) -> schemas.QueryStudiosResponse:
    auth_service.validate_read(user)
    qb = StudioQueryBuilder(pool)
    studios, count = await qb.query(request.studio_filter, request.filter)
    return schemas.QueryStudiosResponse(
        count=count,
        studios=[await to_response(qb, s) for s in studios],
    )


async def create_studio(
    pool: asyncpg.Pool,
    user: dict,
    payload: schemas.StudioCreateInput,
) -> schemas.StudioResponse:
    auth_service.validate_modify(user)

    now = _utc_now()
    async with db.transaction(pool) as conn:
        qb = StudioQueryBuilder(conn)
        new_studio = Studio(
            name=payload.name.strip(),
            parent_studio_id=await _resolve_parent_id(qb, payload.parent_id),
            created_at=now,
            updated_at=now,
        )
        studio = await qb.create(new_studio)
        await qb.create_urls(tables.create_urls(int(studio.id), payload.urls))

    logger.info("studio_created id=%s name=%s", studio.id, studio.name)
    return await to_response(StudioQueryBuilder(pool), studio)


async def update_studio(
    pool: asyncpg.Pool,
    user: dict,
    studio_id: int,
    payload: schemas.StudioUpdateInput,
) -> schemas.StudioResponse:
    auth_service.validate_modify(user)

    async with db.transaction(pool) as conn:
        qb = StudioQueryBuilder(conn)
        existing = await qb.find(studio_id) or Studio(id=studio_id)
        existing.name = payload.name.strip()
        existing.parent_studio_id = await _resolve_parent_id(qb, payload.parent_id, studio_id=studio_id)
        existing.updated_at = _utc_now()

        studio = await qb.update(existing)
        await qb.update_urls(studio_id, tables.create_urls(studio_id, payload.urls))

    logger.info("studio_updated id=%s", studio_id)
    return await to_response(StudioQueryBuilder(pool), studio)


async def destroy_studio(pool: asyncpg.Pool, user: dict, studio_id: int) -> bool:
    auth_service.validate_modify(user)

    # studio_urls cascade; children keep existing with parent_studio_id set to NULL.
    async with db.transaction(pool) as conn:
        await StudioQueryBuilder(conn).destroy(studio_id)

    logger.info("studio_destroyed id=%s", studio_id)
    return True
