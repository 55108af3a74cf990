"""
In-memory cache for frequently read aggregates
"""
import inspect
import logging
from functools import wraps
from typing import Callable, Optional

from cachetools import TTLCache
from sqlalchemy.orm import Session

from app.core.config import settings

logger = logging.getLogger(__name__)

# In-memory cache with TTL
cache = TTLCache(maxsize=1000, ttl=settings.CACHE_TTL_SECONDS)


def _make_key(key_prefix: str, func: Callable, args, kwargs) -> str:
    # Sessions differ on every request, so they never take part in the key
    key_args = [arg for arg in args if not isinstance(arg, Session)]
    key_kwargs = sorted((k, v) for k, v in kwargs.items() if not isinstance(v, Session))
    return f"{key_prefix}:{func.__name__}:{key_args}:{key_kwargs}"


def cached(key_prefix: str = ""):
    """
    Decorator that caches function results

    Args:
        key_prefix: Prefix for the cache key, also used by clear_cache
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            if not settings.CACHE_ENABLED:
                return await func(*args, **kwargs)

            cache_key = _make_key(key_prefix, func, args, kwargs)
            if cache_key in cache:
                logger.debug(f"Cache hit: {cache_key}")
                return cache[cache_key]

            logger.debug(f"Cache miss: {cache_key}")
            result = await func(*args, **kwargs)
            cache[cache_key] = result
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            if not settings.CACHE_ENABLED:
                return func(*args, **kwargs)

            cache_key = _make_key(key_prefix, func, args, kwargs)
            if cache_key in cache:
                logger.debug(f"Cache hit: {cache_key}")
                return cache[cache_key]

            logger.debug(f"Cache miss: {cache_key}")
            result = func(*args, **kwargs)
            cache[cache_key] = result
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def clear_cache(pattern: Optional[str] = None):
    """
    Clears the cache

    Args:
        pattern: Only remove keys starting with this prefix
    """
    if pattern:
        keys_to_remove = [key for key in list(cache.keys()) if key.startswith(pattern)]
        for key in keys_to_remove:
            del cache[key]
        logger.info(f"Cache cleared: {len(keys_to_remove)} keys removed (prefix: {pattern})")
    else:
        cache.clear()
        logger.info("Cache fully cleared")
