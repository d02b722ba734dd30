"""
Credentials: bcrypt password hashes, signed access tokens and invite keys.
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass

import bcrypt
import jwt

from core import config

_DEV_SECRET = "dev-change-this-secret"
_TOKEN_TYPE = "access"


class AuthSecurityError(RuntimeError):
    pass


@dataclass(frozen=True)
class AccessClaims:
    user_id: int
    email: str
    roles: tuple[str, ...]
    expires_at: int


def jwt_secret() -> str:
    # Set JWT_SECRET outside local development.
    return config.env_str("JWT_SECRET", _DEV_SECRET)


def jwt_algorithm() -> str:
    return config.env_str("JWT_ALG", "HS256")


def access_token_expire_minutes() -> int:
    return config.env_int("ACCESS_TOKEN_EXPIRE_MIN", 60)


def hash_password(plain_password: str) -> str:
    if not plain_password:
        raise AuthSecurityError("Password is empty.")
    digest = bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt())
    return digest.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def build_access_token(*, user_id: int, email: str, roles: list[str]) -> str:
    issued_at = int(time.time())
    claims = {
        "sub": str(user_id),
        "email": email,
        "roles": list(roles),
        "type": _TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + access_token_expire_minutes() * 60,
    }
    return jwt.encode(claims, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict:
    """
    Verify signature, expiry and token type; return the raw JWT payload.
    """
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    if payload.get("type") != _TOKEN_TYPE:
        raise AuthSecurityError("Token is not an access token.")
    return payload


def read_access_claims(token: str) -> AccessClaims:
    payload = decode_access_token(token)
    subject = str(payload.get("sub") or "")
    if not (subject.isascii() and subject.isdigit()):
        raise AuthSecurityError("Invalid access token subject.")
    return AccessClaims(
        user_id=int(subject),
        email=str(payload.get("email") or ""),
        roles=tuple(payload.get("roles") or ()),
        expires_at=int(payload["exp"]),
    )


def build_invite_key() -> str:
    return secrets.token_urlsafe(32)
