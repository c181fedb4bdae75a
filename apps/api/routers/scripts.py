"""
Scripts router: CRUD over saved scripts, the production board and the studio
actions (viral analysis, remix, Markdown export).
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Dict, List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field, ValidationError

from generative.llm import GenerativeClient
from generative.models import Language, RemixMode, ThumbnailData, TitleVariant, ViralMetrics
from routers.dependencies import get_llm, get_store
from routers.rate_limit import rate_limit
from services.board import dashboard_totals, group_by_status, move_script_service, now_ms
from services.profile import get_identity
from services.studio import analyze_viral_score, export_filename, remix_script
from storage.models import Script, ScriptReference, ScriptStatus
from storage.store import LocalStore

router = APIRouter()


class ScriptCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    topic: str = ""
    content: str = ""
    status: ScriptStatus = ScriptStatus.IDEA
    style_id: Optional[str] = None
    language: Optional[Language] = None
    selected_title: Optional[TitleVariant] = None
    thumbnail: Optional[ThumbnailData] = None
    references: List[ScriptReference] = Field(default_factory=list)
    duration: Optional[str] = None
    estimated_views: Optional[int] = None


class ScriptUpdateRequest(BaseModel):
    title: Optional[str] = None
    topic: Optional[str] = None
    content: Optional[str] = None
    status: Optional[ScriptStatus] = None
    style_id: Optional[str] = None
    language: Optional[Language] = None
    selected_title: Optional[TitleVariant] = None
    thumbnail: Optional[ThumbnailData] = None
    references: Optional[List[ScriptReference]] = None
    duration: Optional[str] = None
    estimated_views: Optional[int] = None


class StatusUpdateRequest(BaseModel):
    status: ScriptStatus


class StudioRequest(BaseModel):
    lang: Language = "en-us"


class RemixRequest(BaseModel):
    mode: RemixMode
    lang: Language = "en-us"


class RemixResponse(BaseModel):
    content: str


class BoardResponse(BaseModel):
    columns: Dict[str, List[Script]]
    totals: Dict[str, int]


async def _require_script(script_id: str, store: LocalStore) -> Script:
    script = await store.get_script(script_id)
    if script is None:
        raise HTTPException(status_code=404, detail="Script not found")
    return script


@router.get("", response_model=List[Script])
async def list_scripts(store: LocalStore = Depends(get_store)):
    scripts = await store.get_scripts()
    return sorted(scripts, key=lambda script: script.last_modified, reverse=True)


@router.get("/board", response_model=BoardResponse)
async def board(store: LocalStore = Depends(get_store)):
    """Scripts grouped into the five production columns."""
    scripts = await store.get_scripts()
    return BoardResponse(columns=group_by_status(scripts), totals=dashboard_totals(scripts))


@router.post("", response_model=Script, status_code=201)
async def create_script(request: ScriptCreateRequest, store: LocalStore = Depends(get_store)):
    timestamp = now_ms()
    script = Script(
        id=str(uuid.uuid4()),
        created_at=timestamp,
        last_modified=timestamp,
        **request.model_dump(),
    )
    return await store.save_script(script)


@router.get("/{script_id}", response_model=Script)
async def get_script(script_id: str, store: LocalStore = Depends(get_store)):
    return await _require_script(script_id, store)


@router.put("/{script_id}", response_model=Script)
async def update_script(script_id: str, request: ScriptUpdateRequest, store: LocalStore = Depends(get_store)):
    script = await _require_script(script_id, store)
    changes = request.model_dump(exclude_unset=True)
    changes["last_modified"] = now_ms()
    try:
        updated = Script.model_validate({**script.model_dump(), **changes})
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False),
        )
    return await store.save_script(updated)


@router.delete("/{script_id}", status_code=204)
async def delete_script(script_id: str, store: LocalStore = Depends(get_store)):
    if not await store.delete_script(script_id):
        raise HTTPException(status_code=404, detail="Script not found")
    return Response(status_code=204)


@router.patch("/{script_id}/status", response_model=Script)
async def move_script(script_id: str, request: StatusUpdateRequest, store: LocalStore = Depends(get_store)):
    """Move a board card. Moving it onto its current column is a no-op."""
    script = await move_script_service(script_id, request.status, store)
    if script is None:
        raise HTTPException(status_code=404, detail="Script not found")
    return script


@router.post("/{script_id}/analyze", response_model=ViralMetrics)
async def analyze_script(
    script_id: str,
    request: StudioRequest,
    _rate_limit: None = Depends(rate_limit("studio_analyze", limit=120, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
    store: LocalStore = Depends(get_store),
):
    """Score the script and store the metrics on it."""
    script = await _require_script(script_id, store)
    identity = await get_identity(store)
    metrics = await asyncio.to_thread(analyze_viral_score, llm, script.content, request.lang, identity)
    await store.save_script(script.model_copy(update={"viral_metrics": metrics, "last_modified": now_ms()}))
    return metrics


@router.post("/{script_id}/remix", response_model=RemixResponse)
async def remix(
    script_id: str,
    request: RemixRequest,
    _rate_limit: None = Depends(rate_limit("studio_remix", limit=60, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
    store: LocalStore = Depends(get_store),
):
    """Rewritten text only; the stored script is not changed."""
    script = await _require_script(script_id, store)
    identity = await get_identity(store)
    content = await asyncio.to_thread(remix_script, llm, script.content, request.mode, request.lang, identity)
    return RemixResponse(content=content)


@router.get("/{script_id}/export")
async def export_script(script_id: str, store: LocalStore = Depends(get_store)):
    script = await _require_script(script_id, store)
    filename = export_filename(script)
    return Response(
        content=script.content,
        media_type="text/markdown",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
