"""
Activation API endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from auth.schemas import UserResponse
from core import db

from . import schemas, service

router = APIRouter()


@router.post("/activations")
async def create_activation(
    payload: schemas.ActivationCreateInput,
    pool: asyncpg.Pool = Depends(db.get_pool),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.ActivationResponse:
    """
    Invite an email address. The invite key is returned to the caller, who
    passes it on to the invitee.
    """
    return await service.create_activation(pool, current_user, payload)


@router.post("/activations/activate")
async def activate_account(
    payload: schemas.ActivateAccountInput,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> UserResponse:
    return await service.activate(pool, payload)
