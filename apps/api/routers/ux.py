"""UX-focused endpoints: workspace state and guided workflow progress."""

from typing import Dict, Literal, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from generative.models import Language
from routers.dependencies import get_store
from services.board import dashboard_totals
from storage.models import ScriptStatus
from storage.store import DEFAULT_STYLE, LocalStore

router = APIRouter()


ViewState = Literal[
    "DASHBOARD",
    "TREND_HUNTER",
    "WRITER",
    "DECODER",
    "PRODUCTION",
    "STUDIO",
    "AUTOMATIONS",
    "PROFILE",
]

FlowAction = Literal[
    "connect_channel",
    "decode_style",
    "write_script",
    "analyze_script",
    "publish_script",
    "hunt_trends",
]


class WriterSeed(BaseModel):
    """Topic and research context handed from the trend hunter to the writer."""
    topic: str = ""
    context: str = ""


class WorkspaceState(BaseModel):
    view: ViewState = "DASHBOARD"
    active_script_id: Optional[str] = None
    lang: Language = "pt-br"
    writer_seed: Optional[WriterSeed] = None


class WorkspaceUpdate(BaseModel):
    view: Optional[ViewState] = None
    active_script_id: Optional[str] = None
    lang: Optional[Language] = None
    writer_seed: Optional[WriterSeed] = None


class FlowStateResponse(BaseModel):
    has_channel: bool = False
    has_custom_style: bool = False
    has_scripts: bool = False
    has_analyzed_script: bool = False
    has_published_script: bool = False
    next_best_action: FlowAction
    next_best_view: ViewState
    completion_percent: int
    stage_completion: Dict[str, bool] = Field(default_factory=dict)
    totals: Dict[str, int] = Field(default_factory=dict)


def get_workspace(request: Request) -> WorkspaceState:
    """The single workspace state owned by the application."""
    state = getattr(request.app.state, "workspace", None)
    if state is None:
        state = WorkspaceState()
        request.app.state.workspace = state
    return state


def apply_update(state: WorkspaceState, update: WorkspaceUpdate) -> WorkspaceState:
    changes = update.model_dump(exclude_unset=True)
    merged = WorkspaceState.model_validate({**state.model_dump(), **changes})
    # The studio needs a script; without one the dashboard is shown instead.
    if merged.view == "STUDIO" and not merged.active_script_id:
        merged = merged.model_copy(update={"view": "DASHBOARD"})
    return merged


def _pick_next_action(
    *,
    has_channel: bool,
    has_custom_style: bool,
    has_scripts: bool,
    has_analyzed_script: bool,
    has_published_script: bool,
) -> tuple:
    if not has_channel:
        return "connect_channel", "PROFILE"
    if not has_custom_style:
        return "decode_style", "DECODER"
    if not has_scripts:
        return "write_script", "WRITER"
    if not has_analyzed_script:
        return "analyze_script", "STUDIO"
    if not has_published_script:
        return "publish_script", "PRODUCTION"
    return "hunt_trends", "TREND_HUNTER"


@router.get("/state", response_model=WorkspaceState)
async def read_state(state: WorkspaceState = Depends(get_workspace)):
    return state


@router.patch("/state", response_model=WorkspaceState)
async def update_state(request: Request, update: WorkspaceUpdate, state: WorkspaceState = Depends(get_workspace)):
    """
    Partially update the workspace.

    Setting ``active_script_id`` without a view opens the studio, the way
    opening a card on the board does.
    """
    if update.active_script_id and update.view is None:
        update = update.model_copy(update={"view": "STUDIO"})
    new_state = apply_update(state, update)
    request.app.state.workspace = new_state
    return new_state


@router.get("/flow_state", response_model=FlowStateResponse)
async def get_flow_state(store: LocalStore = Depends(get_store)):
    profile = await store.get_user_profile()
    styles = await store.get_styles()
    scripts = await store.get_scripts()

    has_channel = bool(profile and profile.channel_name)
    has_custom_style = any(style.id != DEFAULT_STYLE.id for style in styles)
    has_scripts = bool(scripts)
    has_analyzed_script = any(script.viral_metrics is not None for script in scripts)
    has_published_script = any(script.status == ScriptStatus.PUBLISHED for script in scripts)

    next_best_action, next_best_view = _pick_next_action(
        has_channel=has_channel,
        has_custom_style=has_custom_style,
        has_scripts=has_scripts,
        has_analyzed_script=has_analyzed_script,
        has_published_script=has_published_script,
    )

    stage_completion = {
        "channel_connected": has_channel,
        "style_decoded": has_custom_style,
        "script_written": has_scripts,
        "script_analyzed": has_analyzed_script,
        "script_published": has_published_script,
    }
    completed_steps = sum(1 for value in stage_completion.values() if value)
    completion_percent = int(round((completed_steps / len(stage_completion)) * 100))

    return FlowStateResponse(
        has_channel=has_channel,
        has_custom_style=has_custom_style,
        has_scripts=has_scripts,
        has_analyzed_script=has_analyzed_script,
        has_published_script=has_published_script,
        next_best_action=next_best_action,
        next_best_view=next_best_view,
        completion_percent=completion_percent,
        stage_completion=stage_completion,
        totals={**dashboard_totals(scripts), "styles": len(styles)},
    )
