"""
Name: Credential Store Connection Pool

Responsibilities:
  - Open and close the process-wide psycopg pool in the app lifespan
  - Prepare each connection (session timezone, statement timeout, app name)
  - Hand the pool to the PostgreSQL repositories

Collaborators:
  - main.lifespan: init_pool / close_pool
  - infrastructure.repositories.postgres_*: get_pool

Constraints:
  - One pool per process; a second init_pool is a programming error
  - Repositories run on Starlette's threadpool, so the pool is the sync one
"""

import threading
from typing import Optional

from psycopg import sql
from psycopg_pool import ConnectionPool

from ...logger import logger

APPLICATION_NAME = "carelink-api"

_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _prepare_session(conn) -> None:
    """R: Runs once per new physical connection."""
    from ...config import get_settings

    conn.execute(
        sql.SQL("SET application_name = {}").format(sql.Literal(APPLICATION_NAME))
    )
    # R: created_at / updated_at comparisons are done in UTC
    conn.execute("SET TIME ZONE 'UTC'")
    timeout_ms = int(get_settings().db_statement_timeout_ms)
    if timeout_ms > 0:
        conn.execute(sql.SQL("SET statement_timeout = {}").format(sql.Literal(timeout_ms)))
    conn.commit()


def init_pool(database_url: str, min_size: int, max_size: int) -> ConnectionPool:
    """
    R: Open the pool and wait until min_size connections are ready.

    Raises:
        RuntimeError: the pool is already open
        psycopg_pool.PoolTimeout: the database did not answer in time
    """
    global _pool

    with _pool_lock:
        if _pool is not None:
            raise RuntimeError("Connection pool already initialized")

        pool = ConnectionPool(
            conninfo=database_url,
            min_size=min_size,
            max_size=max_size,
            configure=_prepare_session,
            check=ConnectionPool.check_connection,
            open=False,
        )
        pool.open(wait=True)
        _pool = pool

    logger.info(
        "Credential store pool open",
        extra={"min_size": min_size, "max_size": max_size},
    )
    return pool


def get_pool() -> ConnectionPool:
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    return _pool


def close_pool() -> None:
    """R: No-op when the pool was never opened (APP_ENV=test)."""
    global _pool

    with _pool_lock:
        pool, _pool = _pool, None

    if pool is not None:
        pool.close()
        logger.info("Credential store pool closed")
