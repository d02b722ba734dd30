"""
Auth business logic: login, token resolution and role gates.
"""

from __future__ import annotations

import dataclasses

import asyncpg

from core.errors import AuthenticationError, AuthorizationError
from core.ids import format_id

from . import schemas, security
from .repository import UserQueryBuilder
from .tables import ROLE_ADMIN, ROLE_MODIFY, ROLE_READ, User


def to_user_dict(user: User) -> dict:
    data = dataclasses.asdict(user)
    data.pop("password_hash", None)
    return data


def _to_user_response(user: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=format_id(int(user["id"])),
        email=str(user["email"]),
        roles=list(user.get("roles") or []),
        is_active=bool(user.get("is_active", False)),
        created_at=user.get("created_at"),
    )


def _has_role(user: dict | None, role: str) -> bool:
    roles = set((user or {}).get("roles") or [])
    return role in roles or ROLE_ADMIN in roles


def validate_read(user: dict | None) -> None:
    if not _has_role(user, ROLE_READ) and not _has_role(user, ROLE_MODIFY):
        raise AuthorizationError("Not authorized to read.")


def validate_modify(user: dict | None) -> None:
    if not _has_role(user, ROLE_MODIFY):
        raise AuthorizationError("Not authorized to modify.")


async def login(pool: asyncpg.Pool, payload: schemas.LoginRequest) -> schemas.LoginResponse:
    user = await UserQueryBuilder(pool).find_by_email(payload.email)
    if user is None or not security.verify_password(payload.password, user.password_hash):
        raise AuthenticationError("Invalid email or password.")
    if not user.is_active:
        raise AuthorizationError("User is inactive.")

    access_token = security.build_access_token(user_id=int(user.id), email=user.email, roles=user.roles)
    return schemas.LoginResponse(
        user=_to_user_response(to_user_dict(user)),
        token=schemas.TokenResponse(access_token=access_token),
    )


async def get_user_from_access_token(pool: asyncpg.Pool, access_token: str) -> dict:
    try:
        claims = security.read_access_claims(access_token)
    except security.AuthSecurityError as exc:
        raise AuthenticationError(str(exc)) from exc

    # Roles come from the user row, not from the token.
    user = await UserQueryBuilder(pool).find(claims.user_id)
    if user is None:
        raise AuthenticationError("User not found.")
    if not user.is_active:
        raise AuthorizationError("User is inactive.")
    return to_user_dict(user)


def me(user: dict) -> schemas.UserResponse:
    return _to_user_response(user)
