"""Fixed-window request quotas for the generative endpoints, kept in Redis."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, Tuple

from fastapi import HTTPException, Request
import redis.asyncio as redis

from config import settings

logger = logging.getLogger(__name__)

_local_windows: Dict[str, Tuple[int, int]] = {}
_local_lock = asyncio.Lock()


def client_key(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "anonymous"


def window_start(now: float, window_seconds: int) -> int:
    return int(now // window_seconds) * window_seconds


async def _count_in_redis(key: str, window_seconds: int) -> int:
    client = redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        async with client.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.expire(key, window_seconds)
            count, _ = await pipe.execute()
        return int(count)
    finally:
        await client.aclose()


async def _count_locally(key: str, start: int, window_seconds: int) -> int:
    async with _local_lock:
        count, reset_at = _local_windows.get(key, (0, start + window_seconds))
        if start >= reset_at:
            count = 0
            reset_at = start + window_seconds
        count += 1
        _local_windows[key] = (count, reset_at)
        return count


def rate_limit(scope: str, limit: int, window_seconds: int) -> Callable:
    """
    Dependency factory: at most ``limit`` calls per client per window.

    Counting falls back to process memory when Redis is unreachable, so a
    missing Redis never blocks generation.
    """

    async def _dependency(request: Request) -> None:
        if getattr(request.app.state, "disable_rate_limits", False):
            return

        now = time.time()
        start = window_start(now, window_seconds)
        key = f"{settings.STORE_NAMESPACE}:quota:{scope}:{client_key(request)}"

        try:
            count = await _count_in_redis(f"{key}:{start}", window_seconds)
        except (redis.RedisError, OSError) as exc:
            logger.debug("Redis unavailable for quotas, counting locally: %s", exc)
            count = await _count_locally(key, start, window_seconds)

        if count > limit:
            retry_after = max(1, int(start + window_seconds - now))
            raise HTTPException(
                status_code=429,
                detail=f"Too many {scope} requests. Try again in {retry_after} seconds.",
                headers={"Retry-After": str(retry_after)},
            )

    return _dependency
