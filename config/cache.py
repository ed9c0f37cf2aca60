# config/cache.py
import logging
from typing import Optional
from redis.asyncio import Redis, from_url
from config.settings import settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


async def get_redis(url: Optional[str] = None) -> Redis:
    """Shared connection for the Redis usage backend, opened on first use."""
    global _client
    if _client is None:
        client = from_url(
            url or settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,  # the counter is a plain decimal string
            socket_connect_timeout=5,
            health_check_interval=30,
        )
        await client.ping()
        logger.info("redis.connected")
        _client = client
    return _client


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
