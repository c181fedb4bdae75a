"""Script-writer wizard: titles -> thumbnail -> script."""

from __future__ import annotations

import logging
from typing import List, Optional

from generative.llm import GenerativeClient
from generative.models import ChannelIdentity, Language, StyleDNA, ThumbnailData, TitleVariant
from generative.parsing import extract_json_object
from generative.prompts import (
    build_script_prompt,
    build_system_instruction,
    build_thumbnail_prompt,
    build_titles_prompt,
)

logger = logging.getLogger(__name__)

SCRIPT_ERROR_TEXT = "SYSTEM ERROR: Could not generate script. Check Neural Link (API Key)."


def _safe_score(value) -> float:
    try:
        return max(0.0, min(100.0, float(value)))
    except (TypeError, ValueError):
        return 0.0


def generate_viral_titles(
    llm: GenerativeClient,
    topic: str,
    lang: Language,
    identity: Optional[ChannelIdentity] = None,
) -> List[TitleVariant]:
    """Title variants ranked by click potential; empty list when generation fails."""
    try:
        raw = llm.complete(
            build_titles_prompt(topic, lang),
            system_instruction=build_system_instruction(lang, identity),
            json_output=True,
        )
    except Exception as exc:
        logger.warning("Title generation failed: %s", exc)
        return []

    parsed = extract_json_object(raw) or {}
    rows = parsed.get("titles")
    if not isinstance(rows, list):
        return []

    variants = []
    for row in rows:
        if not isinstance(row, dict) or not str(row.get("title") or "").strip():
            continue
        variants.append(TitleVariant(
            title=str(row["title"]).strip(),
            psychology=str(row.get("psychology") or ""),
            score=_safe_score(row.get("score")),
        ))
    variants.sort(key=lambda variant: variant.score, reverse=True)
    return variants


def _fallback_thumbnail(title: str, style: StyleDNA) -> ThumbnailData:
    return ThumbnailData(
        concept=f"High-contrast close-up that teases: {title}",
        image_prompt=(
            f"Cinematic YouTube thumbnail, 16:9, {style.tone.lower()} mood, "
            f"dramatic lighting, single focal subject evoking '{title}', no text"
        ),
    )


def generate_thumbnail_concept(
    llm: GenerativeClient,
    title: str,
    topic: str,
    style: StyleDNA,
    lang: Language,
    identity: Optional[ChannelIdentity] = None,
) -> ThumbnailData:
    """Thumbnail concept and image prompt; derived from the title when the model fails."""
    try:
        raw = llm.complete(
            build_thumbnail_prompt(title, topic, style, lang),
            system_instruction=build_system_instruction(lang, identity),
            json_output=True,
        )
    except Exception as exc:
        logger.warning("Thumbnail concept generation failed: %s", exc)
        return _fallback_thumbnail(title, style)

    parsed = extract_json_object(raw)
    if not parsed or not parsed.get("concept") or not parsed.get("image_prompt"):
        return _fallback_thumbnail(title, style)
    return ThumbnailData(concept=str(parsed["concept"]), image_prompt=str(parsed["image_prompt"]))


def generate_thumbnail_image(llm: GenerativeClient, image_prompt: str) -> Optional[str]:
    """Base64 PNG for the prompt, or None."""
    if not (image_prompt or "").strip():
        return None
    try:
        return llm.generate_image(image_prompt)
    except Exception as exc:
        logger.warning("Thumbnail render failed: %s", exc)
        return None


def generate_script(
    llm: GenerativeClient,
    topic: str,
    style: StyleDNA,
    duration: str,
    lang: Language,
    context: Optional[str] = None,
    title: Optional[str] = None,
    thumbnail_concept: Optional[str] = None,
    identity: Optional[ChannelIdentity] = None,
) -> str:
    """Markdown script with visual/audio cues, fact-checked through web search."""
    prompt = build_script_prompt(
        topic=topic,
        style=style,
        duration=duration,
        lang=lang,
        context=context,
        title=title,
        thumbnail_concept=thumbnail_concept,
    )
    try:
        response = llm.search_grounded(prompt, system_instruction=build_system_instruction(lang, identity))
    except Exception as exc:
        logger.error("Script generation failed: %s", exc)
        return SCRIPT_ERROR_TEXT
    return response.text or "Error: No text generated."
