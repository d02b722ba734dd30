"""
Performer API endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends, HTTPException, Query

from auth import dependencies as auth_dependencies
from core import db
from core.ids import parse_int_id

from . import schemas, service

router = APIRouter()


@router.get("/performers/{performer_id}")
async def get_performer(
    performer_id: str,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.PerformerResponse:
    performer = await service.find_performer(pool, current_user, parse_int_id(performer_id))
    if performer is None:
        raise HTTPException(status_code=404, detail="Performer not found.")
    return performer


@router.get("/performers")
async def find_performers(
    name: str = Query(..., min_length=1, max_length=255),
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    """
    Case-insensitive lookup by name, falling back to aliases.
    """
    performers = await service.find_performers_by_name(pool, current_user, name)
    return {"performers": performers, "count": len(performers)}


@router.post("/performers/query")
async def query_performers(
    request: schemas.PerformerQueryRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.QueryPerformersResponse:
    return await service.query_performers(pool, current_user, request)


@router.post("/performers")
async def create_performer(
    payload: schemas.PerformerCreateInput,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.PerformerResponse:
    return await service.create_performer(pool, current_user, payload)


@router.put("/performers/{performer_id}")
async def update_performer(
    performer_id: str,
    payload: schemas.PerformerUpdateInput,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.PerformerResponse:
    return await service.update_performer(pool, current_user, parse_int_id(performer_id), payload)


@router.delete("/performers/{performer_id}")
async def destroy_performer(
    performer_id: str,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    ok = await service.destroy_performer(pool, current_user, parse_int_id(performer_id))
    return {"ok": ok}
