"""Co-pilot chat assistant."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from generative.llm import GenerativeClient
from generative.models import ChannelIdentity, ChatMessage, Language
from generative.prompts import build_chat_instruction

logger = logging.getLogger(__name__)


def greeting(lang: Language) -> str:
    if lang == "pt-br":
        return "A.I.N.A Online. Aguardando diretrizes."
    return "A.I.N.A Online. Awaiting directives."


def chat_with_assistant(
    llm: GenerativeClient,
    history: Sequence[ChatMessage],
    message: str,
    lang: Language,
    identity: Optional[ChannelIdentity] = None,
) -> str:
    try:
        reply = llm.chat(history, message, system_instruction=build_chat_instruction(lang, identity))
    except Exception as exc:
        logger.warning("Chat request failed: %s", exc)
        return f"Signal lost. Error: {exc}"
    return reply or "..."
