"""
Account activation: invite an email address, then turn the invite into a user.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import asyncpg

from auth import security
from auth import service as auth_service
from auth.repository import UserQueryBuilder, normalize_email
from auth.schemas import UserResponse
from auth.tables import ROLE_READ, User
from core import config, db
from core.errors import ValidationError
from core.ids import format_id

from . import schemas
from .repository import PendingActivationQueryBuilder
from .tables import PendingActivation

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def activation_expire_hours() -> int:
    return config.env_int("ACTIVATION_EXPIRE_HOURS", 48)


def default_user_roles() -> list[str]:
    return [role.upper() for role in config.env_list("DEFAULT_USER_ROLES", [ROLE_READ])]


def _to_response(activation: PendingActivation) -> schemas.ActivationResponse:
    return schemas.ActivationResponse(
        id=format_id(activation.id),
        email=activation.email,
        invite_key=activation.invite_key,
        time=activation.time,
    )


def is_expired(activation: PendingActivation, now: datetime | None = None) -> bool:
    if activation.time is None:
        return True
    created = activation.time
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return (now or _utc_now()) - created > timedelta(hours=activation_expire_hours())


async def create_activation(
    pool: asyncpg.Pool,
    user: dict,
    payload: schemas.ActivationCreateInput,
) -> schemas.ActivationResponse:
    auth_service.validate_modify(user)
    email = normalize_email(payload.email)

    async with db.transaction(pool) as conn:
        if await UserQueryBuilder(conn).find_by_email(email) is not None:
            raise ValidationError("Email is already registered.")

        qb = PendingActivationQueryBuilder(conn)
        # One outstanding invite per address: a new request replaces the old one.
        existing = await qb.find_by_email(email)
        if existing is not None:
            await qb.destroy(existing.id)

        activation = await qb.create(
            PendingActivation(
                id=uuid4(),
                email=email,
                invite_key=security.build_invite_key(),
                time=_utc_now(),
            )
        )

    logger.info("activation_created id=%s email=%s", activation.id, activation.email)
    return _to_response(activation)


async def activate(pool: asyncpg.Pool, payload: schemas.ActivateAccountInput) -> UserResponse:
    async with db.transaction(pool) as conn:
        qb = PendingActivationQueryBuilder(conn)
        activation = await qb.find_by_key(payload.invite_key)
        if activation is None or activation.email != normalize_email(payload.email):
            raise ValidationError("Invalid activation key.")
        if is_expired(activation):
            raise ValidationError("Activation key has expired.")

        users = UserQueryBuilder(conn)
        if await users.find_by_email(activation.email) is not None:
            raise ValidationError("Email is already registered.")

        now = _utc_now()
        created = await users.create(
            User(
                email=activation.email,
                password_hash=security.hash_password(payload.password),
                roles=default_user_roles(),
                is_active=True,
                created_at=now,
                updated_at=now,
            )
        )
        await qb.destroy(activation.id)

    logger.info("account_activated user_id=%s", created.id)
    return auth_service.me(auth_service.to_user_dict(created))
