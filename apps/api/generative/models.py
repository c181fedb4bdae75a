from typing import List, Literal, Optional
from pydantic import BaseModel, Field

Language = Literal["pt-br", "en-us"]
RemixMode = Literal["RETENTION", "CONTROVERSY"]


class ViralMetrics(BaseModel):
    hook_score: float = 0        # 0-100
    retention_score: float = 0   # 0-100
    controversy_score: float = 0 # 0-100
    feedback: str = ""


class StyleDNA(BaseModel):
    id: str
    name: str
    tone: str             # e.g. "Cynical, Fast-paced, Dark"
    structure: str        # e.g. "Cold Open -> Montage -> Deep Dive"
    audio_signature: str  # e.g. "Synthwave, Distortion"
    description: str


class TitleVariant(BaseModel):
    title: str
    psychology: str = ""
    score: float = 0


class ThumbnailData(BaseModel):
    concept: str
    image_prompt: str
    image_base64: Optional[str] = None


class GroundingSource(BaseModel):
    title: str
    uri: str


class TrendReport(BaseModel):
    content: str
    sources: List[GroundingSource] = Field(default_factory=list)


class ChatMessage(BaseModel):
    id: str
    role: Literal["user", "model"]
    text: str
    timestamp: int  # epoch ms


class ChannelIdentity(BaseModel):
    """Brand bible used to keep generated content voice-consistent."""
    brand_voice: str = ""      # e.g. "Sarcastic, Nihilistic, Educational"
    target_audience: str = ""  # e.g. "Gen Z interested in True Crime"
    manifesto: str = ""        # why the channel exists
