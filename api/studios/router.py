"""
Studio API endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends, HTTPException, Query

from auth import dependencies as auth_dependencies
from core import db
from core.ids import parse_int_id

from . import schemas, service

router = APIRouter()


@router.get("/studios/{studio_id}")
async def get_studio(
    studio_id: str,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.StudioResponse:
    studio = await service.find_studio(pool, current_user, studio_id=parse_int_id(studio_id))
    if studio is None:
        raise HTTPException(status_code=404, detail="Studio not found.")
    return studio


@router.get("/studios")
async def find_studio_by_name(
    name: str = Query(..., min_length=1, max_length=255),
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.StudioResponse:
    studio = await service.find_studio(pool, current_user, name=name)
    if studio is None:
        raise HTTPException(status_code=404, detail="Studio not found.")
    return studio


@router.post("/studios/query")
async def query_studios(
    request: schemas.StudioQueryRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.QueryStudiosResponse:
    return await service.query_studios(pool, current_user, request)


@router.post("/studios")
async def create_studio(
    payload: schemas.StudioCreateInput,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.StudioResponse:
    return await service.create_studio(pool, current_user, payload)


@router.put("/studios/{studio_id}")
async def update_studio(
    studio_id: str,
    payload: schemas.StudioUpdateInput,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.StudioResponse:
    return await service.update_studio(pool, current_user, parse_int_id(studio_id), payload)


@router.delete("/studios/{studio_id}")
async def destroy_studio(
    studio_id: str,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    ok = await service.destroy_studio(pool, current_user, parse_int_id(studio_id))
    return {"ok": ok}
