"""Script-writer router: title variants, thumbnail concept/render, script draft."""

from __future__ import annotations

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from generative.llm import GenerativeClient
from generative.models import Language, StyleDNA, ThumbnailData, TitleVariant
from routers.dependencies import get_llm, get_store
from routers.rate_limit import rate_limit
from services.profile import get_identity
from services.writer import (
    generate_script,
    generate_thumbnail_concept,
    generate_thumbnail_image,
    generate_viral_titles,
)
from storage.store import LocalStore

router = APIRouter()


class TitlesRequest(BaseModel):
    topic: str = Field(min_length=1)
    lang: Language = "en-us"


class ThumbnailConceptRequest(BaseModel):
    title: str = Field(min_length=1)
    topic: str
    style_id: str
    lang: Language = "en-us"


class ThumbnailRenderRequest(BaseModel):
    image_prompt: str = Field(min_length=1)


class ThumbnailRenderResponse(BaseModel):
    image_base64: Optional[str] = None


class ScriptDraftRequest(BaseModel):
    topic: str = Field(min_length=1)
    style_id: str
    duration: str = "Medium (8-12 min)"
    lang: Language = "en-us"
    context: Optional[str] = None
    title: Optional[str] = None
    thumbnail_concept: Optional[str] = None


class ScriptDraftResponse(BaseModel):
    content: str


async def _require_style(style_id: str, store: LocalStore) -> StyleDNA:
    style = await store.get_style(style_id)
    if style is None:
        raise HTTPException(status_code=404, detail="Style not found")
    return style


@router.post("/titles", response_model=List[TitleVariant])
async def titles(
    request: TitlesRequest,
    _rate_limit: None = Depends(rate_limit("writer_titles", limit=120, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
    store: LocalStore = Depends(get_store),
):
    identity = await get_identity(store)
    return await asyncio.to_thread(generate_viral_titles, llm, request.topic, request.lang, identity)


@router.post("/thumbnail", response_model=ThumbnailData)
async def thumbnail_concept(
    request: ThumbnailConceptRequest,
    _rate_limit: None = Depends(rate_limit("writer_thumbnail", limit=120, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
    store: LocalStore = Depends(get_store),
):
    style = await _require_style(request.style_id, store)
    identity = await get_identity(store)
    return await asyncio.to_thread(
        generate_thumbnail_concept, llm, request.title, request.topic, style, request.lang, identity
    )


@router.post("/thumbnail/render", response_model=ThumbnailRenderResponse)
async def thumbnail_render(
    request: ThumbnailRenderRequest,
    _rate_limit: None = Depends(rate_limit("writer_render", limit=30, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
):
    image = await asyncio.to_thread(generate_thumbnail_image, llm, request.image_prompt)
    return ThumbnailRenderResponse(image_base64=image)


@router.post("/script", response_model=ScriptDraftResponse)
async def script_draft(
    request: ScriptDraftRequest,
    _rate_limit: None = Depends(rate_limit("writer_script", limit=60, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
    store: LocalStore = Depends(get_store),
):
    style = await _require_style(request.style_id, store)
    identity = await get_identity(store)
    content = await asyncio.to_thread(
        generate_script,
        llm,
        request.topic,
        style,
        request.duration,
        request.lang,
        request.context,
        request.title,
        request.thumbnail_concept,
        identity,
    )
    return ScriptDraftResponse(content=content)
