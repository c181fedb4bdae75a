"""
YouTube API router for channel resolution, video lookup and video search.
"""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ingestion.models import ChannelRecord, YouTubeVideo
from ingestion.youtube import YouTubeClient
from routers.dependencies import get_youtube_client

router = APIRouter()


class ResolveChannelRequest(BaseModel):
    """A handle, channel ID, channel URL or free-text channel name."""
    identifier: str


@router.post("/resolve", response_model=ChannelRecord)
async def resolve_channel(
    request: ResolveChannelRequest,
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    """
    Resolve a channel identifier and return its data with recent uploads.

    Supports:
    - @handle (anywhere in the text)
    - UC... channel IDs
    - youtube.com/channel/UC...
    - free text (channel search)
    """
    record = await asyncio.to_thread(youtube.fetch_channel_deep_data, request.identifier)
    if record is None:
        raise HTTPException(status_code=404, detail="Channel not found")
    return record


@router.get("/video", response_model=YouTubeVideo)
async def get_video(
    url: str = Query(..., min_length=1, description="Video URL or 11-character video ID"),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    """Get a single video with its viral velocity."""
    video = await asyncio.to_thread(youtube.get_video, url)
    if video is None:
        raise HTTPException(status_code=404, detail="Video not found")
    return video


@router.get("/search", response_model=List[YouTubeVideo])
async def search_videos(
    q: str = Query(..., min_length=1),
    limit: int = Query(default=6, ge=1, le=50),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    """Search videos by relevance."""
    return await asyncio.to_thread(youtube.search_videos, q, limit)
