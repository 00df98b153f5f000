import logging
from typing import Optional

import redis
from redis.backoff import ExponentialBackoff
from redis.retry import Retry

from .config import settings

logger = logging.getLogger(__name__)

_client: Optional[redis.Redis] = None


def link_key(slug: str) -> str:
    return f"link:{slug}"


def meta_key(slug: str) -> str:
    return f"meta:{slug}"


def count_key(slug: str) -> str:
    return f"count:{slug}"


def collection_key(collection_id: str) -> str:
    return f"collection:{collection_id}"


def get_redis() -> redis.Redis:
    """
    Return the shared Redis client, creating it on first use.

    Commands are retried with exponential backoff on connection errors,
    so a dropped connection is re-established transparently.
    """
    global _client

    if _client is None:
        retry = Retry(
            ExponentialBackoff(cap=settings.REDIS_BACKOFF_CAP, base=settings.REDIS_BACKOFF_BASE),
            settings.REDIS_MAX_RETRIES,
        )
        _client = redis.Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            retry=retry,
            retry_on_error=[redis.exceptions.ConnectionError, redis.exceptions.TimeoutError],
            health_check_interval=30,
        )
        logger.info("Redis client created for %s", settings.REDIS_URL)

    return _client


def close_redis() -> None:
    global _client

    if _client is not None:
        _client.close()
        _client = None
        logger.info("Redis client closed")


def check_redis_health(client: Optional[redis.Redis] = None) -> bool:
    try:
        return bool((client or get_redis()).ping())
    except redis.exceptions.RedisError as e:
        logger.error("Redis health check failed: %s", e)
        return False


# Dependency to get the store client
def get_store():
    yield get_redis()
