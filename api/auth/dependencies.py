"""
Auth dependencies for protected FastAPI routes.

`get_current_user` only authenticates; the read/modify role checks live in
the services.
"""

from __future__ import annotations

import asyncpg
from fastapi import Depends, Header

from core import db
from core.errors import AuthenticationError

from . import service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise AuthenticationError("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise AuthenticationError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise AuthenticationError("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(
    access_token: str = Depends(get_bearer_token),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> dict:
    return await service.get_user_from_access_token(pool, access_token)
