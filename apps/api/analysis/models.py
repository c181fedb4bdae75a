"""
Analysis models and schemas.
"""

from typing import List
from pydantic import BaseModel, Field


class ChartPoint(BaseModel):
    """One day of the views chart."""
    name: str   # day of month, "DD"
    val: float


class TopVideo(BaseModel):
    title: str
    views: int


class ChannelAnalytics(BaseModel):
    """Snapshot of the authenticated channel plus its recent daily views."""
    views: int = 0
    subscribers: int = 0
    videos: int = 0
    avg_views: int = 0
    growth_rate: float = 0.0  # percentage, second half of window vs first half
    top_videos: List[TopVideo] = Field(default_factory=list)
    chart_data: List[ChartPoint] = Field(default_factory=list)
