import logging
import pickle
from functools import wraps
from typing import Callable

import redis

from storefront.core.config import settings

logger = logging.getLogger(__name__)

# Redis client setup; report caching stays off when no URL is configured
redis_client = (
    redis.Redis.from_url(settings.REDIS_URL, decode_responses=False)  # Keep as binary for pickle serialization
    if settings.REDIS_URL
    else None
)


def cache(prefix: str, expire: int = settings.REPORT_CACHE_SECONDS):
    """Cache the result of ``func(session, *args)``; the session is left out of the key."""
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(session, *args, **kwargs):
            client = redis_client
            if client is None:
                return func(session, *args, **kwargs)

            # Create a cache key from function name and arguments
            cache_key = f"{prefix}:{func.__name__}:{args!r}:{sorted(kwargs.items())!r}"
            try:
                cached_data = client.get(cache_key)
            except redis.RedisError as exc:
                logger.warning("Cache read failed for %s: %s", cache_key, exc)
                return func(session, *args, **kwargs)
            if cached_data:
                return pickle.loads(cached_data)

            result = func(session, *args, **kwargs)
            try:
                client.setex(name=cache_key, time=expire, value=pickle.dumps(result))
            except redis.RedisError as exc:
                logger.warning("Cache write failed for %s: %s", cache_key, exc)
            return result
        return wrapper
    return decorator


def invalidate(prefix: str) -> None:
    client = redis_client
    if client is None:
        return
    try:
        keys = client.keys(f"{prefix}:*")
        if keys:
            client.delete(*keys)
    except redis.RedisError as exc:
        logger.warning("Cache invalidation failed for %s: %s", prefix, exc)
