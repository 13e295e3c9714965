"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

Connection settings come from DATABASE_URL, or from the libpq-style PG*
variables when DATABASE_URL is not set.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg

_pool: asyncpg.Pool | None = None


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _url_from_pg_env() -> str:
    host = os.environ.get("PGHOST", "").strip() or "localhost"
    port = os.environ.get("PGPORT", "").strip() or "5432"
    database = os.environ.get("PGDATABASE", "").strip() or "fashion_db"
    user = os.environ.get("PGUSER", "").strip() or "postgres"
    password = os.environ.get("PGPASSWORD", "").strip() or "postgres"
    return f"postgresql://{quote(user)}:{quote(password)}@{host}:{port}/{quote(database)}"


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        return _url_from_pg_env()
    return _sanitize_database_url(url)


def pool_max_size() -> int:
    raw = os.environ.get("PGMAX", "").strip()
    try:
        return max(1, int(raw)) if raw else 10
    except ValueError:
        return 10


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=1,
        max_size=pool_max_size(),
        command_timeout=60,
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool().fetch(sql, *args)
    return [dict(r) for r in rows]
