"""
Redis connectivity check.

Unlike the PostgreSQL helpers this returns a plain status string: the PING
reply ("PONG") on success, otherwise a description of the failure.
"""
from typing import Optional
from urllib.parse import quote

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from opskit.config.config import get_config
from opskit.constants import REDIS_PONG
from opskit.monitoring.logger import get_logger
from opskit.monitoring.redaction import redact_url

logger = get_logger(__name__)


def build_redis_url(host: str, username: Optional[str] = None, password: Optional[str] = None) -> str:
    """
    Build a ``redis://`` URL for *host* (``host`` or ``host:port``).

    A username is only used together with a password; ``None`` means no
    credential was supplied. Credentials are percent-encoded.
    """
    if password is not None:
        user = quote(username, safe="") if username is not None else ""
        return f"redis://{user}:{quote(password, safe='')}@{host}/"
    return f"redis://{host}/"


async def test_redis_parameters(
    host: str,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> str:
    """
    Connect to Redis at *host* and send PING.

    Returns:
        "PONG" on success, otherwise the error message
    """
    url = build_redis_url(host, username, password)
    cfg = get_config().redis

    try:
        client = aioredis.from_url(
            url,
            socket_connect_timeout=cfg.socket_connect_timeout_seconds,
            socket_timeout=cfg.socket_timeout_seconds,
        )
    except (RedisError, ValueError) as e:
        logger.warning("REDIS_CHECK", url=redact_url(url), error=str(e))
        return str(e) or type(e).__name__

    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning("REDIS_CHECK", url=redact_url(url), error=str(e))
        return str(e) or type(e).__name__
    finally:
        await client.aclose()

    logger.info("REDIS_CHECK", url=redact_url(url), reply=REDIS_PONG)
    return REDIS_PONG
