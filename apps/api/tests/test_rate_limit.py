import pytest
import redis.asyncio as redis
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from unittest.mock import AsyncMock, patch

from routers import rate_limit


def _quota_app(limit: int) -> FastAPI:
    quota_app = FastAPI()

    @quota_app.get("/generate")
    async def generate(_rate_limit: None = Depends(rate_limit.rate_limit("writer_titles", limit=limit, window_seconds=3600))):
        return {"ok": True}

    return quota_app


@pytest.mark.asyncio
async def test_quota_falls_back_to_local_counting_when_redis_is_down():
    failing_redis = AsyncMock(side_effect=redis.RedisError("connection refused"))
    with patch("routers.rate_limit._count_in_redis", failing_redis):
        async with AsyncClient(transport=ASGITransport(app=_quota_app(limit=2)), base_url="http://test") as client:
            first = await client.get("/generate")
            second = await client.get("/generate")
            blocked = await client.get("/generate")

    assert first.status_code == 200
    assert second.status_code == 200
    assert blocked.status_code == 429
    assert 1 <= int(blocked.headers["Retry-After"]) <= 3600
    assert "writer_titles" in blocked.json()["detail"]
    assert failing_redis.await_count == 3


@pytest.mark.asyncio
async def test_quota_uses_redis_count_when_available():
    with patch("routers.rate_limit._count_in_redis", AsyncMock(return_value=5)) as counter:
        async with AsyncClient(transport=ASGITransport(app=_quota_app(limit=5)), base_url="http://test") as client:
            assert (await client.get("/generate")).status_code == 200
        counter.return_value = 6
        async with AsyncClient(transport=ASGITransport(app=_quota_app(limit=5)), base_url="http://test") as client:
            assert (await client.get("/generate")).status_code == 429

    redis_key = counter.await_args.args[0]
    assert ":quota:writer_titles:" in redis_key
    assert rate_limit._local_windows == {}


@pytest.mark.asyncio
async def test_local_counter_resets_in_place_across_windows():
    for window in range(1000):
        start = window * 60
        assert await rate_limit._count_locally("scriptos:quota:chat:1.2.3.4", start, 60) == 1

    assert len(rate_limit._local_windows) == 1
    assert await rate_limit._count_locally("scriptos:quota:chat:1.2.3.4", 999 * 60, 60) == 2


def test_client_key_prefers_forwarded_header():
    class _Request:
        headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1"}
        client = None

    assert rate_limit.client_key(_Request()) == "203.0.113.7"
