"""
Combined connectivity snapshot for PostgreSQL and Redis.
"""
from __future__ import annotations

import asyncio
import os
from typing import Optional

from opskit.constants import REDIS_PONG
from opskit.storage import db, kv

NOT_CONFIGURED = "not_configured"


async def _not_configured() -> str:
    return NOT_CONFIGURED


async def connectivity_snapshot(
    database_url: Optional[str] = None,
    redis_host: Optional[str] = None,
    redis_username: Optional[str] = None,
    redis_password: Optional[str] = None,
) -> dict:
    """
    Check PostgreSQL and Redis concurrently.

    Unset arguments fall back to DATABASE_URL, REDIS_HOST, REDIS_USERNAME and
    REDIS_PASSWORD. A store with no target is reported as "not_configured"
    and does not count as an issue.
    """
    database_url = database_url or os.getenv("DATABASE_URL")
    redis_host = redis_host or os.getenv("REDIS_HOST")
    if redis_username is None:
        redis_username = os.getenv("REDIS_USERNAME")
    if redis_password is None:
        redis_password = os.getenv("REDIS_PASSWORD")

    pg_check = db.test_postgres_url(database_url) if database_url else _not_configured()
    redis_check = (
        kv.test_redis_parameters(redis_host, redis_username, redis_password)
        if redis_host
        else _not_configured()
    )
    pg_result, redis_result = await asyncio.gather(pg_check, redis_check)

    database = pg_result.to_dict() if not isinstance(pg_result, str) else pg_result
    database_ok = isinstance(pg_result, str) or pg_result.ok
    redis_ok = redis_result in (REDIS_PONG, NOT_CONFIGURED)

    return {
        "database": database,
        "redis": redis_result,
        "status": "ok" if database_ok and redis_ok else "issues",
    }
