"""
YouTube Data and Analytics API client for channel, video and search data.
"""

import logging
import re
from datetime import date, timedelta
from typing import Optional, List, Dict, Any

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from analysis.metrics import AnalyticsSummarizer, format_view_count, viral_velocity
from analysis.models import ChannelAnalytics, TopVideo
from .models import (
    RECENT_DESCRIPTION_CAP,
    RECENT_VIDEOS_CAP,
    ChannelRecord,
    RecentUpload,
    YouTubeVideo,
)

logger = logging.getLogger(__name__)

CHANNEL_ID_PREFIX = "UC"
CHANNEL_ID_LENGTH = 24
VIDEO_ID_LENGTH = 11
TOP_VIDEOS_CAP = 5

HANDLE_PATTERN = re.compile(r"(@[\w\-.]+)")
VIDEO_URL_PATTERN = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")

# Errors raised by the Google client for HTTP failures and transport problems.
REMOTE_ERRORS = (HttpError, httplib2.HttpLib2Error, OSError)


def extract_video_id(url_or_id: str) -> Optional[str]:
    """Extract an 11-character video ID from a watch/short/embed URL or a bare ID."""
    value = (url_or_id or "").strip()
    match = VIDEO_URL_PATTERN.match(value)
    if match and len(match.group(2)) == VIDEO_ID_LENGTH:
        return match.group(2)
    if len(value) == VIDEO_ID_LENGTH:
        return value
    return None


def _thumbnail_url(snippet: Dict[str, Any], *preferred: str) -> str:
    thumbnails = snippet.get("thumbnails") or {}
    for size in preferred:
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


class YouTubeClient:
    """Client for interacting with YouTube Data API v3 and YouTube Analytics API v2."""

    def __init__(self, api_key: Optional[str] = None, credentials: Any = None):
        """
        Initialize YouTube client.

        Args:
            api_key: API key for public data access
            credentials: OAuth2 credentials for authenticated access
        """
        self.credentials = credentials
        if credentials:
            self.youtube = build("youtube", "v3", credentials=credentials)
        elif api_key:
            self.youtube = build("youtube", "v3", developerKey=api_key)
        else:
            raise ValueError("Either api_key or credentials must be provided")
        self._analytics = None

    # ==================== Channel resolution ====================

    def resolve_channel_lookup(self, identifier: str) -> Optional[Dict[str, str]]:
        """
        Turn a free-form channel identifier into ``channels.list`` lookup params.

        Tried in order, first match wins:
        - a ``@handle`` anywhere in the string -> ``{"forHandle": "@handle"}``
        - a bare channel ID (UC..., 24 chars, no spaces) -> ``{"id": ...}``
        - a ``/channel/<id>`` URL -> ``{"id": <id>}``
        - anything else -> channel search, first result -> ``{"id": ...}``

        Exact structural matches always win over search, since a fuzzy search
        can silently return the wrong channel.
        """
        clean_input = (identifier or "").strip()
        if not clean_input:
            return None

        handle_match = HANDLE_PATTERN.search(clean_input)
        if handle_match:
            return {"forHandle": handle_match.group(1)}

        if (
            " " not in clean_input
            and clean_input.startswith(CHANNEL_ID_PREFIX)
            and len(clean_input) == CHANNEL_ID_LENGTH
        ):
            return {"id": clean_input}

        if "/channel/" in clean_input:
            potential_id = re.split(r"[/?]", clean_input.split("/channel/", 1)[1])[0]
            if potential_id:
                return {"id": potential_id}

        channel_id = self._search_channel(clean_input)
        if channel_id:
            return {"id": channel_id}
        logger.warning("YouTube search: no channel found for query %r", clean_input)
        return None

    def _search_channel(self, query: str) -> Optional[str]:
        """Search for a channel by free text and return the first result's ID."""
        response = self.youtube.search().list(
            part="snippet",
            q=query,
            type="channel",
            maxResults=1,
        ).execute()

        for item in response.get("items") or []:
            channel_id = (item.get("id") or {}).get("channelId") or (item.get("snippet") or {}).get("channelId")
            if channel_id:
                return channel_id
        return None

    def fetch_channel_deep_data(self, identifier: str) -> Optional[ChannelRecord]:
        """
        Resolve ``identifier`` and return the channel record with its recent uploads.

        Returns None when no channel matches or the API call fails.
        """
        try:
            lookup = self.resolve_channel_lookup(identifier)
            if not lookup:
                return None

            response = self.youtube.channels().list(
                part="snippet,contentDetails,statistics,brandingSettings",
                **lookup,
            ).execute()

            items = response.get("items") or []
            if not items:
                return None

            item = items[0]
            snippet = item.get("snippet") or {}
            stats = item.get("statistics") or {}
            branding = (item.get("brandingSettings") or {}).get("channel") or {}
            uploads_playlist_id = ((item.get("contentDetails") or {}).get("relatedPlaylists") or {}).get("uploads")

            return ChannelRecord(
                title=snippet.get("title", ""),
                description=snippet.get("description", ""),
                custom_url=snippet.get("customUrl", ""),
                subscribers=str(stats.get("subscriberCount", "0")),
                video_count=str(stats.get("videoCount", "0")),
                keywords=branding.get("keywords", "") or "",
                recent_videos=self._get_recent_uploads(uploads_playlist_id) if uploads_playlist_id else [],
            )
        except REMOTE_ERRORS as e:
            logger.error("YouTube API error resolving channel %r: %s", identifier, e)
            return None

    def _get_recent_uploads(self, uploads_playlist_id: str) -> List[RecentUpload]:
        """Latest uploads, capped in count and description length to bound prompt size."""
        try:
            response = self.youtube.playlistItems().list(
                part="snippet",
                playlistId=uploads_playlist_id,
                maxResults=RECENT_VIDEOS_CAP,
            ).execute()
        except REMOTE_ERRORS as e:
            logger.warning("Could not load uploads playlist %s: %s", uploads_playlist_id, e)
            return []

        uploads = []
        for item in (response.get("items") or [])[:RECENT_VIDEOS_CAP]:
            snippet = item.get("snippet") or {}
            uploads.append(RecentUpload(
                title=snippet.get("title", ""),
                description=(snippet.get("description") or "")[:RECENT_DESCRIPTION_CAP],
            ))
        return uploads

    # ==================== Videos ====================

    def get_video(self, url_or_id: str) -> Optional[YouTubeVideo]:
        """Get a single video summary from a URL or bare video ID."""
        video_id = extract_video_id(url_or_id)
        if not video_id:
            return None

        try:
            videos = self._videos_by_ids([video_id], thumbnail_sizes=("maxres", "medium"))
        except REMOTE_ERRORS as e:
            logger.error("Error fetching video %s: %s", video_id, e)
            return None
        return videos[0] if videos else None

    def search_videos(self, query: str, max_results: int = 6) -> List[YouTubeVideo]:
        """
        Search videos by relevance and return them with view counts and velocity.

        View counts are not part of search results, so a second ``videos.list``
        call fetches statistics for the matched IDs.
        """
        query = (query or "").strip()
        if not query:
            return []

        try:
            response = self.youtube.search().list(
                part="snippet",
                q=query,
                type="video",
                maxResults=max(1, min(max_results, 50)),
                order="relevance",
            ).execute()

            video_ids = [
                (item.get("id") or {}).get("videoId")
                for item in response.get("items") or []
            ]
            video_ids = [video_id for video_id in video_ids if video_id]
            if not video_ids:
                return []

            return self._videos_by_ids(video_ids, thumbnail_sizes=("medium", "default"))
        except REMOTE_ERRORS as e:
            logger.error("YouTube search error for query %r: %s", query, e)
            return []

    def _videos_by_ids(self, video_ids: List[str], thumbnail_sizes=("medium",)) -> List[YouTubeVideo]:
        response = self.youtube.videos().list(
            part="snippet,statistics",
            id=",".join(video_ids),
        ).execute()

        videos = []
        for item in response.get("items") or []:
            snippet = item.get("snippet") or {}
            stats = item.get("statistics") or {}
            published_at = snippet.get("publishedAt", "")
            try:
                view_count = int(stats.get("viewCount") or 0)
                velocity = viral_velocity(view_count, published_at) if published_at else view_count
            except (TypeError, ValueError) as e:
                logger.warning("Skipping video %s with malformed statistics: %s", item.get("id"), e)
                continue

            videos.append(YouTubeVideo(
                id=item.get("id", ""),
                title=snippet.get("title", ""),
                channel_title=snippet.get("channelTitle", ""),
                thumbnail_url=_thumbnail_url(snippet, *thumbnail_sizes),
                published_at=published_at,
                view_count=format_view_count(view_count),
                viral_velocity=velocity,
                description=snippet.get("description", ""),
            ))
        return videos

    # ==================== Authenticated (OAuth) ====================

    def get_my_channel(self) -> Optional[Dict[str, Any]]:
        """
        Get the authenticated user's channel identity.

        Requires OAuth credentials with youtube.readonly scope.
        """
        try:
            response = self.youtube.channels().list(
                part="snippet,statistics,brandingSettings",
                mine=True,
            ).execute()
        except REMOTE_ERRORS as e:
            logger.error("Error fetching authenticated channel: %s", e)
            return None

        items = response.get("items") or []
        if not items:
            return None

        item = items[0]
        snippet = item.get("snippet") or {}
        stats = item.get("statistics") or {}
        return {
            "channel_id": item.get("id"),
            "channel_name": snippet.get("title", ""),
            "channel_handle": snippet.get("customUrl", ""),
            "avatar_url": _thumbnail_url(snippet, "medium", "default") or None,
            "subscriber_count": str(stats.get("subscriberCount", "0")),
        }

    def get_my_analytics(
        self,
        window_days: int = 28,
        today: Optional[date] = None,
    ) -> Optional[ChannelAnalytics]:
        """
        Current channel statistics plus views-by-day for the last ``window_days``.

        A failing Analytics API call (missing scope, brand-new channel) leaves
        the chart empty instead of failing the snapshot.
        """
        try:
            response = self.youtube.channels().list(part="statistics", mine=True).execute()
        except REMOTE_ERRORS as e:
            logger.error("Error fetching authenticated channel statistics: %s", e)
            return None

        items = response.get("items") or []
        if not items:
            return None
        statistics = items[0].get("statistics") or {}

        end_date = today or date.today()
        start_date = end_date - timedelta(days=window_days)
        rows: List[List[Any]] = []
        try:
            report = self._analytics_service().reports().query(
                ids="channel==MINE",
                startDate=start_date.isoformat(),
                endDate=end_date.isoformat(),
                metrics="views",
                dimensions="day",
                sort="day",
            ).execute()
            rows = report.get("rows") or []
        except REMOTE_ERRORS + (ValueError,) as e:
            logger.warning("Analytics API fetch failed (likely no permission or no data): %s", e)
            return AnalyticsSummarizer(statistics, rows).summarize()

        top_videos = self._top_videos(start_date, end_date)
        return AnalyticsSummarizer(statistics, rows, top_videos).summarize()

    def _top_videos(self, start_date: date, end_date: date) -> List[TopVideo]:
        """Most viewed uploads in the window, titled through the Data API."""
        try:
            report = self._analytics_service().reports().query(
                ids="channel==MINE",
                startDate=start_date.isoformat(),
                endDate=end_date.isoformat(),
                metrics="views",
                dimensions="video",
                sort="-views",
                maxResults=TOP_VIDEOS_CAP,
            ).execute()
            views_by_id = {
                str(row[0]): int(row[1] or 0)
                for row in report.get("rows") or []
                if len(row) >= 2
            }
            if not views_by_id:
                return []

            response = self.youtube.videos().list(part="snippet", id=",".join(views_by_id)).execute()
        except REMOTE_ERRORS + (ValueError,) as e:
            logger.warning("Top videos fetch failed: %s", e)
            return []

        titles = {
            item.get("id"): (item.get("snippet") or {}).get("title", "")
            for item in response.get("items") or []
        }
        return [
            TopVideo(title=titles.get(video_id) or video_id, views=views)
            for video_id, views in views_by_id.items()
        ]

    def _analytics_service(self):
        if self._analytics is None:
            if not self.credentials:
                raise ValueError("YouTube Analytics requires OAuth credentials")
            self._analytics = build("youtubeAnalytics", "v2", credentials=self.credentials)
        return self._analytics


def create_youtube_client_with_api_key(api_key: str) -> YouTubeClient:
    """Create a YouTube client using an API key."""
    return YouTubeClient(api_key=api_key)


def create_youtube_client_with_oauth(access_token: str) -> YouTubeClient:
    """Create a YouTube client using OAuth credentials."""
    from google.oauth2.credentials import Credentials
    credentials = Credentials(token=access_token)
    return YouTubeClient(credentials=credentials)
