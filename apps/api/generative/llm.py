import logging
from typing import List, Optional, Sequence

from openai import OpenAI
from pydantic import BaseModel, Field

from config import require_openai_api_key, settings
from .models import ChatMessage, GroundingSource

logger = logging.getLogger(__name__)


class GroundedResponse(BaseModel):
    """Text answer plus the web citations the model attached to it."""
    text: str
    sources: List[GroundingSource] = Field(default_factory=list)


def _citations(response) -> List[GroundingSource]:
    sources = []
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for annotation in getattr(part, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                sources.append(GroundingSource(
                    title=getattr(annotation, "title", None) or "Unknown Source",
                    uri=getattr(annotation, "url", None) or "#",
                ))
    return sources


class GenerativeClient:
    """Thin wrapper over the OpenAI SDK for the request shapes ScriptOS uses."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        search_model: Optional[str] = None,
        image_model: Optional[str] = None,
        image_size: Optional[str] = None,
    ):
        self.client = OpenAI(api_key=api_key)
        self.model = model or settings.OPENAI_MODEL
        self.search_model = search_model or settings.OPENAI_SEARCH_MODEL
        self.image_model = image_model or settings.OPENAI_IMAGE_MODEL
        self.image_size = image_size or settings.OPENAI_IMAGE_SIZE

    def complete(self, prompt: str, system_instruction: Optional[str] = None, json_output: bool = False) -> str:
        """Single-turn completion. ``json_output`` asks for a JSON object response."""
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        kwargs = {}
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            **kwargs,
        )
        return response.choices[0].message.content or ""

    def search_grounded(self, prompt: str, system_instruction: Optional[str] = None) -> GroundedResponse:
        """Completion with the web search tool enabled; returns text and cited sources."""
        kwargs = {}
        if system_instruction:
            kwargs["instructions"] = system_instruction

        response = self.client.responses.create(
            model=self.search_model,
            input=prompt,
            tools=[{"type": "web_search_preview"}],
            **kwargs,
        )
        return GroundedResponse(text=response.output_text or "", sources=_citations(response))

    def chat(
        self,
        history: Sequence[ChatMessage],
        message: str,
        system_instruction: Optional[str] = None,
    ) -> str:
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        for entry in history:
            role = "assistant" if entry.role == "model" else "user"
            messages.append({"role": role, "content": entry.text})
        messages.append({"role": "user", "content": message})

        response = self.client.chat.completions.create(model=self.model, messages=messages)
        return response.choices[0].message.content or ""

    def generate_image(self, prompt: str) -> Optional[str]:
        """Render an image and return it as base64-encoded PNG, or None if nothing came back."""
        response = self.client.images.generate(
            model=self.image_model,
            prompt=prompt,
            size=self.image_size,
            n=1,
        )
        data = getattr(response, "data", None) or []
        if not data:
            return None
        return getattr(data[0], "b64_json", None)


def get_generative_client() -> GenerativeClient:
    """Build a client from settings; raises ValueError when OPENAI_API_KEY is missing."""
    return GenerativeClient(api_key=require_openai_api_key())
