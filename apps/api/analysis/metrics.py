"""
Core metrics logic: viral velocity and channel analytics summaries.
"""

import math
import numpy as np
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from .models import ChannelAnalytics, ChartPoint, TopVideo

MS_PER_DAY = 1000 * 60 * 60 * 24


def parse_published_at(value: Union[str, datetime]) -> datetime:
    """Parse an RFC 3339 timestamp (``2024-01-01T00:00:00Z``) into an aware datetime."""
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def days_since(published_at: Union[str, datetime], now: Optional[datetime] = None) -> float:
    """Elapsed days since publication, floored at one day."""
    now = parse_published_at(now) if now is not None else datetime.now(timezone.utc)
    elapsed_ms = (now - parse_published_at(published_at)).total_seconds() * 1000
    return max(1.0, elapsed_ms / MS_PER_DAY)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def viral_velocity(
    view_count: int,
    published_at: Union[str, datetime],
    now: Optional[datetime] = None,
) -> int:
    """
    Views per elapsed day since publication.

    Same-day uploads count as one day old, so a fresh video reports its full
    view count. No smoothing or clamping is applied.
    """
    return round_half_up(int(view_count or 0) / days_since(published_at, now))


def format_view_count(view_count: int) -> str:
    return f"{int(view_count or 0):,}"


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class AnalyticsSummarizer:
    """Turns channel statistics and a views-by-day report into ChannelAnalytics."""

    def __init__(
        self,
        statistics: Dict[str, Any],
        report_rows: Optional[List[List[Any]]] = None,
        top_videos: Optional[List[TopVideo]] = None,
    ):
        self.statistics = statistics or {}
        self.top_videos = top_videos or []
        # Analytics API rows for dimensions=day: [["2024-05-01", 120], ...]
        self.rows = [row for row in (report_rows or []) if len(row) >= 2]

    def summarize(self) -> ChannelAnalytics:
        views = _to_int(self.statistics.get("viewCount"))
        subscribers = _to_int(self.statistics.get("subscriberCount"))
        videos = _to_int(self.statistics.get("videoCount"))

        return ChannelAnalytics(
            views=views,
            subscribers=subscribers,
            videos=videos,
            avg_views=round_half_up(views / (videos or 1)),
            growth_rate=self._growth_rate(),
            top_videos=self.top_videos,
            chart_data=self._chart_data(),
        )

    def _chart_data(self) -> List[ChartPoint]:
        return [
            ChartPoint(name=str(row[0]).split("-")[-1], val=float(row[1] or 0))
            for row in self.rows
        ]

    def _growth_rate(self) -> float:
        """Percent change of the second half of the window over the first half."""
        if not self.rows:
            return 0.0
        daily = np.array([float(row[1] or 0) for row in self.rows])
        midpoint = len(daily) // 2
        first_half = float(np.sum(daily[:midpoint]))
        second_half = float(np.sum(daily[midpoint:]))
        if first_half <= 0:
            return 0.0
        return float(round_half_up((second_half - first_half) / first_half * 100))
