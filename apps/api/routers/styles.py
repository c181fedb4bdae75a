"""Style DNA router: the saved style library and the style decoder."""

import asyncio
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from generative.llm import GenerativeClient
from generative.models import Language, StyleDNA
from ingestion.youtube import YouTubeClient
from routers.dependencies import get_llm, get_optional_youtube_client, get_store
from routers.rate_limit import rate_limit
from services.style_decoder import decode_channel_from_data, decode_style
from storage.store import LocalStore

router = APIRouter()


DecodeMode = Literal["TEXT", "URL", "CHANNEL_API"]


class DecodeStyleRequest(BaseModel):
    source: str = Field(min_length=1, description="Pasted text, a URL, or a channel identifier")
    mode: DecodeMode = "TEXT"
    lang: Language = "en-us"
    save: bool = False


@router.get("", response_model=List[StyleDNA])
async def list_styles(store: LocalStore = Depends(get_store)):
    """Saved styles; the default Noir Detective profile when nothing was saved yet."""
    return await store.get_styles()


@router.post("", response_model=StyleDNA)
async def save_style(style: StyleDNA, store: LocalStore = Depends(get_store)):
    """Insert, or replace the style with the same id in place."""
    return await store.save_style(style)


@router.post("/decode", response_model=StyleDNA)
async def decode(
    request: DecodeStyleRequest,
    _rate_limit: None = Depends(rate_limit("style_decode", limit=60, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
    youtube: Optional[YouTubeClient] = Depends(get_optional_youtube_client),
    store: LocalStore = Depends(get_store),
):
    """
    Decode a Style DNA profile.

    - TEXT / URL: web-search grounded analysis of the input
    - CHANNEL_API: resolve the channel through the YouTube API first and
      analyze its metadata and recent uploads
    """
    if request.mode == "CHANNEL_API":
        if youtube is None:
            raise HTTPException(status_code=503, detail="YOUTUBE_API_KEY is not configured.")
        record = await asyncio.to_thread(youtube.fetch_channel_deep_data, request.source)
        if record is None:
            raise HTTPException(status_code=404, detail="Channel not found")
        style = await asyncio.to_thread(decode_channel_from_data, llm, record, request.lang)
    else:
        style = await asyncio.to_thread(decode_style, llm, request.source, request.lang)

    if request.save and style.id != "error":
        await store.save_style(style)
    return style
