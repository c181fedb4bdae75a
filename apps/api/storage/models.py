"""Records persisted in the local store."""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from analysis.models import ChannelAnalytics
from generative.models import ChannelIdentity, Language, ThumbnailData, TitleVariant, ViralMetrics


class ScriptStatus(str, Enum):
    IDEA = "IDEA"
    DRAFTING = "DRAFTING"
    FILMING = "FILMING"
    EDITING = "EDITING"
    PUBLISHED = "PUBLISHED"


ReferenceType = Literal["FILE", "URL", "YOUTUBE_VIDEO", "YOUTUBE_CHANNEL"]


class ScriptReference(BaseModel):
    id: str
    type: ReferenceType
    data: str
    mime_type: Optional[str] = None
    title: str
    metadata: Optional[Dict[str, Any]] = None


class Script(BaseModel):
    id: str
    title: str
    topic: str
    content: str
    status: ScriptStatus = ScriptStatus.IDEA
    style_id: Optional[str] = None
    created_at: int    # epoch ms
    last_modified: int  # epoch ms
    viral_metrics: Optional[ViralMetrics] = None
    estimated_views: Optional[int] = None
    language: Optional[Language] = None
    selected_title: Optional[TitleVariant] = None
    thumbnail: Optional[ThumbnailData] = None
    references: List[ScriptReference] = Field(default_factory=list)
    duration: Optional[str] = None


class UserProfile(BaseModel):
    channel_id: Optional[str] = None
    channel_name: Optional[str] = None
    channel_handle: Optional[str] = None
    avatar_url: Optional[str] = None
    subscriber_count: Optional[str] = None
    identity: ChannelIdentity = Field(default_factory=ChannelIdentity)
    access_token: Optional[str] = None  # short-lived OAuth token
    analytics: Optional[ChannelAnalytics] = None


NodeType = Literal["TRIGGER_TREND", "ACTION_SCRIPT", "FILTER_STYLE", "OUTPUT_NOTIFY", "LOGIC_DELAY"]
NodeStatus = Literal["idle", "running", "completed"]


class NodePosition(BaseModel):
    x: float = 0
    y: float = 0


class NodeData(BaseModel):
    label: str
    config: Optional[Dict[str, Any]] = None
    status: NodeStatus = "idle"


class AutomationNode(BaseModel):
    id: str
    type: NodeType
    position: NodePosition = Field(default_factory=NodePosition)
    data: NodeData


class AutomationEdge(BaseModel):
    id: str
    source: str
    target: str


class AutomationFlow(BaseModel):
    id: str
    name: str
    nodes: List[AutomationNode] = Field(default_factory=list)
    edges: List[AutomationEdge] = Field(default_factory=list)
    active: bool = True
