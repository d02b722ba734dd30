"""
Async database access helpers (raw SQL) using asyncpg.

FastAPI creates the connection pool on startup, keeps it on
`app.state.db_pool` and closes it on shutdown (see `api/main.py`). Nothing in
the data layer reaches for a process-wide handle: every call receives either
the pool (autocommit reads) or a connection inside `transaction()`.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import config
from .errors import StorageError

logger = logging.getLogger(__name__)

DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

# Anything with fetch/fetchrow/execute: the pool or one connection.
Queryer = Union[asyncpg.Pool, asyncpg.Connection]


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = config.env_str("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


async def create_pool(dsn: str | None = None) -> asyncpg.Pool:
    pool = await asyncpg.create_pool(
        dsn=dsn or database_url(),
        min_size=config.env_int("DB_POOL_MIN_SIZE", 1),
        max_size=config.env_int("DB_POOL_MAX_SIZE", 5),
        command_timeout=config.env_int("DB_COMMAND_TIMEOUT", 30),
    )
    logger.info("db_pool_created")
    return pool


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return None
    await pool.close()
    logger.info("db_pool_closed")


def get_pool(request: Request) -> asyncpg.Pool:
    """
    FastAPI dependency returning the pool created in the app lifespan.
    """
    pool = getattr(request.app.state, "db_pool", None)
    if pool is None:
        raise RuntimeError("DB pool is not initialized. Create it in the app lifespan.")
    return pool


@asynccontextmanager
async def transaction(pool: asyncpg.Pool) -> AsyncIterator[asyncpg.Connection]:
    """
    Hold one pooled connection inside a transaction for the duration of the block.

    Commits when the block exits normally. Any exception rolls back and is
    re-raised unchanged; if the rollback itself fails that failure is only
    logged, so the first error is the one the caller sees.
    """
    async with pool.acquire() as conn:
        tx = conn.transaction()
        await tx.start()
        try:
            yield conn
        except BaseException:
            try:
                await tx.rollback()
                logger.info("transaction_rolled_back")
            except Exception:
                logger.warning("transaction_rollback_failed", exc_info=True)
            raise
        try:
            await tx.commit()
        except DRIVER_ERRORS as exc:
            raise StorageError("commit", "transaction", exc) from exc


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(conn: Queryer, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(conn: Queryer, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(conn: Queryer, sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL) and return the status tag,
    e.g. "UPDATE 1".
    """
    return await conn.execute(sql, *args)


def affected_rows(status: str) -> int:
    """
    Row count from an asyncpg status tag ("UPDATE 3", "INSERT 0 1", ...).
    """
    try:
        return int((status or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0
