"""
Performer business logic.

Mutations follow one lifecycle: authorize, open a transaction, write the
performer row, replace its alias/url/tattoo/piercing sets, commit. Any error
rolls the whole transaction back and propagates unchanged.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import asyncpg

from auth import service as auth_service
from core import db
from core.ids import format_id

from . import schemas, tables
from .repository import PerformerQueryBuilder
from .tables import Performer

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _copy_fields(performer: Performer, payload: schemas.PerformerCreateInput | schemas.PerformerUpdateInput) -> None:
    performer.name = payload.name.strip()
    performer.disambiguation = payload.disambiguation
    performer.gender = payload.gender.value if payload.gender else None
    performer.birthdate = payload.birthdate
    performer.birthdate_accuracy = payload.birthdate_accuracy.value if payload.birthdate_accuracy else None
    performer.ethnicity = payload.ethnicity
    performer.country = payload.country
    performer.eye_color = payload.eye_color
    performer.hair_color = payload.hair_color
    performer.height = payload.height
    performer.cup_size = payload.cup_size
    performer.band_size = payload.band_size
    performer.waist_size = payload.waist_size
    performer.hip_size = payload.hip_size
    performer.breast_type = payload.breast_type
    performer.career_start_year = payload.career_start_year
    performer.career_end_year = payload.career_end_year


async def to_response(qb: PerformerQueryBuilder, performer: Performer) -> schemas.PerformerResponse:
    performer_id = int(performer.id)
    urls = await qb.get_urls(performer_id)
    tattoos = await qb.get_tattoos(performer_id)
    piercings = await qb.get_piercings(performer_id)
    return schemas.PerformerResponse(
        id=format_id(performer_id),
        name=performer.name,
        disambiguation=performer.disambiguation,
        gender=performer.gender,
        birthdate=performer.birthdate,
        birthdate_accuracy=performer.birthdate_accuracy,
        ethnicity=performer.ethnicity,
        country=performer.country,
        eye_color=performer.eye_color,
        hair_color=performer.hair_color,
        height=performer.height,
        cup_size=performer.cup_size,
        band_size=performer.band_size,
        waist_size=performer.waist_size,
        hip_size=performer.hip_size,
        breast_type=performer.breast_type,
        career_start_year=performer.career_start_year,
        career_end_year=performer.career_end_year,
        aliases=await qb.get_aliases(performer_id),
        urls=[schemas.URLResponse(url=u.url, type=u.type) for u in urls],
        tattoos=[schemas.BodyModificationResponse(location=t.location, description=t.description) for t in tattoos],
        piercings=[schemas.BodyModificationResponse(location=p.location, description=p.description) for p in piercings],
        created_at=performer.created_at,
        updated_at=performer.updated_at,
    )


async def find_performer(pool: asyncpg.Pool, user: dict, performer_id: int) -> schemas.PerformerResponse | None:
    auth_service.validate_read(user)
    qb = PerformerQueryBuilder(pool)
    performer = await qb.find(performer_id)
    if performer is None:
        return None
    return await to_response(qb, performer)


async def find_performers_by_name(pool: asyncpg.Pool, user: dict, name: str) -> list[schemas.PerformerResponse]:
    auth_service.validate_read(user)
    qb = PerformerQueryBuilder(pool)
    performers = await qb.find_by_name(name)
    if not performers:
        performers = await qb.find_by_alias(name)
    return [await to_response(qb, p) for p in performers]


async def query_performers(
    pool: asyncpg.Pool,
    user: dict,
    request: schemas.PerformerQueryRequest,
) -> schemas.QueryPerformersResponse:
    auth_service.validate_read(user)
    qb = PerformerQueryBuilder(pool)
    performers, count = await qb.query(request.performer_filter, request.filter)
    return schemas.QueryPerformersResponse(
        count=count,
        performers=[await to_response(qb, p) for p in performers],
    )


async def create_performer(
    pool: asyncpg.Pool,
    user: dict,
    payload: schemas.PerformerCreateInput,
) -> schemas.PerformerResponse:
    auth_service.validate_modify(user)

    now = _utc_now()
    new_performer = Performer(created_at=now, updated_at=now)
    _copy_fields(new_performer, payload)

    async with db.transaction(pool) as conn:
        qb = PerformerQueryBuilder(conn)
        performer = await qb.create(new_performer)
        performer_id = int(performer.id)

        await qb.create_aliases(tables.create_aliases(performer_id, payload.aliases))
        await qb.create_urls(tables.create_urls(performer_id, payload.urls))
        await qb.create_tattoos(tables.create_body_mods(performer_id, payload.tattoos))
        await qb.create_piercings(tables.create_body_mods(performer_id, payload.piercings))

    logger.info("performer_created id=%s name=%s", performer.id, performer.name)
    return await to_response(PerformerQueryBuilder(pool), performer)


async def update_performer(
    pool: asyncpg.Pool,
    user: dict,
    performer_id: int,
    payload: schemas.PerformerUpdateInput,
) -> schemas.PerformerResponse:
    auth_service.validate_modify(user)

    async with db.transaction(pool) as conn:
        qb = PerformerQueryBuilder(conn)
        existing = await qb.find(performer_id)
        if existing is None:
            # Let update() raise NotFoundError with the standard message.
            existing = Performer(id=performer_id)
        _copy_fields(existing, payload)
        existing.updated_at = _utc_now()

        performer = await qb.update(existing)

        await qb.update_aliases(performer_id, tables.create_aliases(performer_id, payload.aliases))
        await qb.update_urls(performer_id, tables.create_urls(performer_id, payload.urls))
        await qb.update_tattoos(performer_id, tables.create_body_mods(performer_id, payload.tattoos))
        await qb.update_piercings(performer_id, tables.create_body_mods(performer_id, payload.piercings))

    logger.info("performer_updated id=%s", performer_id)
    return await to_response(PerformerQueryBuilder(pool), performer)


async def destroy_performer(pool: asyncpg.Pool, user: dict, performer_id: int) -> bool:
    auth_service.validate_modify(user)

    # Join rows reference performers with ON DELETE CASCADE.
    async with db.transaction(pool) as conn:
        await PerformerQueryBuilder(conn).destroy(performer_id)

    logger.info("performer_destroyed id=%s", performer_id)
    return True
