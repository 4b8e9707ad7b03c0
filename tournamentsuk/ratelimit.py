"""
Failed-login counters per email on top of the Django cache.

Request throttling for public endpoints lives in tournamentsuk.throttling;
these counters track failures for an account rather than requests from a client.
"""
import logging

from django.core.cache import cache

logger = logging.getLogger(__name__)


def check_rate_limit(key: str, limit: int, window: int) -> bool:
    """
    Count one hit against `key` and report whether it is still within `limit`
    hits per `window` seconds. Counters are not durable.
    """
    cache_key = f"ratelimit:{key}"
    # add() only sets when absent, so the window starts at the first hit
    if cache.add(cache_key, 1, timeout=window):
        return True
    try:
        count = cache.incr(cache_key)
    except ValueError:
        # Expired between add() and incr()
        cache.set(cache_key, 1, timeout=window)
        return True

    if count > limit:
        logger.warning(f"Rate limit exceeded for {key} ({count}/{limit} in {window}s)")
        return False
    return True


def is_rate_limited(key: str, limit: int) -> bool:
    """Whether `key` has already used up its hits, without counting a new one"""
    return (cache.get(f"ratelimit:{key}") or 0) >= limit


def reset_rate_limit(key: str):
    cache.delete(f"ratelimit:{key}")
