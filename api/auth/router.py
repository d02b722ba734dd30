"""
Auth API endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends

from core import db

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/auth/login")
async def login(
    payload: schemas.LoginRequest,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> schemas.LoginResponse:
    return await service.login(pool, payload)


@router.get("/auth/me")
async def me(current_user: dict = Depends(dependencies.get_current_user)) -> schemas.UserResponse:
    return service.me(current_user)
