"""
Typed records shaped from YouTube API payloads.
"""

from typing import List
from pydantic import BaseModel, Field


RECENT_VIDEOS_CAP = 5
RECENT_DESCRIPTION_CAP = 200


class RecentUpload(BaseModel):
    title: str
    description: str = ""


class ChannelRecord(BaseModel):
    """Channel data used to seed prompts and the channel profile."""
    title: str = ""
    description: str = ""
    custom_url: str = ""
    subscribers: str = "0"   # string-encoded integer, as returned by the API
    video_count: str = "0"
    keywords: str = ""
    recent_videos: List[RecentUpload] = Field(default_factory=list)


class YouTubeVideo(BaseModel):
    """Video summary with the derived views-per-day metric."""
    id: str
    title: str = ""
    channel_title: str = ""
    thumbnail_url: str = ""
    published_at: str = ""
    view_count: str = "0"    # formatted, e.g. "1,200"
    viral_velocity: int = 0
    description: str = ""
