"""Trend hunter router."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from generative.llm import GenerativeClient
from generative.models import Language, TrendReport
from ingestion.models import YouTubeVideo
from ingestion.youtube import YouTubeClient
from routers.dependencies import get_llm, get_optional_youtube_client
from routers.rate_limit import rate_limit
from services.trends import hunt_trends_service

router = APIRouter()


class TrendHuntRequest(BaseModel):
    query: str = Field(min_length=1)
    lang: Language = "en-us"


class TrendHuntResponse(BaseModel):
    query: str
    report: TrendReport
    videos: List[YouTubeVideo] = Field(default_factory=list)


@router.post("/hunt", response_model=TrendHuntResponse)
async def hunt(
    request: TrendHuntRequest,
    _rate_limit: None = Depends(rate_limit("trend_hunt", limit=60, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
    youtube: Optional[YouTubeClient] = Depends(get_optional_youtube_client),
):
    """Web trend report and matching YouTube videos, fetched in parallel."""
    return await hunt_trends_service(request.query, request.lang, llm, youtube)
