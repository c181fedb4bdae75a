"""
Health check endpoints.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
import redis.asyncio as redis

from config import settings
from database import engine

router = APIRouter()


def _credential_status() -> dict:
    return {
        "youtube_api_key": "configured" if settings.YOUTUBE_API_KEY else "missing",
        "openai_api_key": "configured" if settings.OPENAI_API_KEY else "missing",
    }


@router.get("/health")
async def health_check():
    """
    Overall status. The store is required; Redis only backs request quotas,
    so its absence degrades nothing but is still reported.
    """
    health_status = {
        "status": "healthy",
        "api": "up",
        "store": "unknown",
        "redis": "unknown",
        **_credential_status(),
    }

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        health_status["store"] = "up"
    except Exception as e:
        health_status["store"] = f"down: {e}"
        health_status["status"] = "degraded"

    try:
        client = redis.from_url(settings.REDIS_URL)
        try:
            await client.ping()
        finally:
            await client.aclose()
        health_status["redis"] = "up"
    except Exception as e:
        health_status["redis"] = f"down: {e}"

    return health_status


@router.get("/health/ready")
async def readiness_check():
    """Ready once both external API keys are configured."""
    missing = [name.upper() for name, status in _credential_status().items() if status == "missing"]
    if missing:
        return JSONResponse(
            status_code=503,
            content={"ready": False, "missing": missing},
        )
    return {"ready": True}


@router.get("/health/live")
async def liveness_check():
    return {"alive": True}
