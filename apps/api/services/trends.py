"""Trend hunter: web intelligence and YouTube market data, fetched in parallel."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from generative.llm import GenerativeClient
from generative.models import Language, TrendReport
from generative.parsing import unique_sources
from generative.prompts import build_trend_prompt
from ingestion.models import YouTubeVideo
from ingestion.youtube import YouTubeClient

logger = logging.getLogger(__name__)


def trend_hunt(llm: GenerativeClient, query: str, lang: Language) -> TrendReport:
    """Grounded trend summary with de-duplicated sources."""
    try:
        response = llm.search_grounded(build_trend_prompt(query, lang))
    except Exception as exc:
        logger.warning("Trend hunt failed for %r: %s", query, exc)
        return TrendReport(content=f"Connection to search grid failed. Error: {exc}", sources=[])

    return TrendReport(
        content=response.text or "No trends found in the static.",
        sources=unique_sources(response.sources),
    )


def video_query(query: str, lang: Language) -> str:
    return f"{query} pt-br" if lang == "pt-br" else query


async def hunt_trends_service(
    query: str,
    lang: Language,
    llm: GenerativeClient,
    youtube: Optional[YouTubeClient],
) -> Dict[str, Any]:
    """Run the trend report and the video search concurrently and wait for both."""

    async def _videos() -> List[YouTubeVideo]:
        if youtube is None:
            return []
        return await asyncio.to_thread(youtube.search_videos, video_query(query, lang))

    report, videos = await asyncio.gather(
        asyncio.to_thread(trend_hunt, llm, query, lang),
        _videos(),
    )
    return {
        "query": query,
        "report": report,
        "videos": videos,
    }
