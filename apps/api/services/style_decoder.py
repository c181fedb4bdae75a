"""Style decoder: derive a Style DNA profile from free text, a URL, or live channel data."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from generative.llm import GenerativeClient
from generative.models import Language, StyleDNA
from generative.parsing import extract_json_object
from generative.prompts import build_channel_decode_prompt, build_style_decode_prompt, build_system_instruction
from ingestion.models import ChannelRecord

logger = logging.getLogger(__name__)

STYLE_FIELDS = ("name", "tone", "structure", "audio_signature", "description")


def error_style(reason: str) -> StyleDNA:
    """Sentinel profile rendered as an error card."""
    return StyleDNA(
        id="error",
        name="Decryption Failed",
        tone="Unknown",
        structure="Unknown",
        audio_signature="Unknown",
        description=reason,
    )


def _style_from_payload(payload: Optional[dict]) -> Optional[StyleDNA]:
    if not payload or not payload.get("name"):
        return None
    # Older prompts answered in camelCase.
    if "audio_signature" not in payload and "audioSignature" in payload:
        payload["audio_signature"] = payload["audioSignature"]
    values = {field: str(payload.get(field) or "") for field in STYLE_FIELDS}
    return StyleDNA(id=str(uuid.uuid4()), **values)


def decode_style(llm: GenerativeClient, source: str, lang: Language) -> StyleDNA:
    """Decode from pasted text, a channel URL or a channel name (web-search grounded)."""
    try:
        response = llm.search_grounded(build_style_decode_prompt(source, lang))
        style = _style_from_payload(extract_json_object(response.text))
        if style is None:
            raise ValueError("Model response was not valid JSON")
        return style
    except Exception as exc:
        logger.error("Decode failed: %s", exc)
        return error_style(f"System failed to decode style. Error: {exc}")


def decode_channel_from_data(llm: GenerativeClient, record: ChannelRecord, lang: Language) -> StyleDNA:
    """Decode from channel metadata and recent uploads fetched from the YouTube API."""
    try:
        raw = llm.complete(
            build_channel_decode_prompt(record, lang),
            system_instruction=build_system_instruction(lang),
            json_output=True,
        )
        style = _style_from_payload(extract_json_object(raw))
        if style is None:
            raise ValueError("No response generated")
        return style
    except Exception as exc:
        logger.error("Channel decode failed: %s", exc)
        return error_style(f"System failed to decode channel data. Error: {exc}")
