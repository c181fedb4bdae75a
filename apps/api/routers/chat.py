"""Co-pilot chat router."""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from generative.llm import GenerativeClient
from generative.models import ChatMessage, Language
from routers.dependencies import get_llm, get_store
from routers.rate_limit import rate_limit
from services.chat import chat_with_assistant, greeting
from services.profile import get_identity
from storage.store import LocalStore

router = APIRouter()


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    history: List[ChatMessage] = Field(default_factory=list)
    lang: Language = "en-us"


class ChatReply(BaseModel):
    text: str


@router.get("/greeting", response_model=ChatReply)
async def get_greeting(lang: Language = Query(default="en-us")):
    return ChatReply(text=greeting(lang))


@router.post("", response_model=ChatReply)
async def send_message(
    request: ChatRequest,
    _rate_limit: None = Depends(rate_limit("chat", limit=300, window_seconds=3600)),
    llm: GenerativeClient = Depends(get_llm),
    store: LocalStore = Depends(get_store),
):
    """Reply from the assistant; the history is supplied by the client."""
    identity = await get_identity(store)
    text = await asyncio.to_thread(
        chat_with_assistant, llm, request.history, request.message, request.lang, identity
    )
    return ChatReply(text=text)
