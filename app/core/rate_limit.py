"""
Rate limiting for the public auth endpoints
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

_original_limit = limiter.limit


def limit(*args, **kwargs):
    """Wraps limiter.limit so routes stay untouched when rate limiting is disabled"""
    if not settings.RATE_LIMIT_ENABLED:
        def noop_decorator(func):
            return func
        return noop_decorator
    return _original_limit(*args, **kwargs)


limiter.limit = limit
