"""Studio: viral-score analysis, remixing and export of a saved script."""

from __future__ import annotations

import logging
import re
from typing import Optional

from generative.llm import GenerativeClient
from generative.models import ChannelIdentity, Language, RemixMode, ViralMetrics
from generative.parsing import extract_json_object
from generative.prompts import build_remix_prompt, build_system_instruction, build_viral_analysis_prompt
from storage.models import Script

logger = logging.getLogger(__name__)


def _score(value) -> float:
    try:
        return max(0.0, min(100.0, float(value)))
    except (TypeError, ValueError):
        return 0.0


def analyze_viral_score(
    llm: GenerativeClient,
    content: str,
    lang: Language,
    identity: Optional[ChannelIdentity] = None,
) -> ViralMetrics:
    """Hook / retention / controversy scores with harsh feedback; zero scores on failure."""
    try:
        raw = llm.complete(
            build_viral_analysis_prompt(content, lang),
            system_instruction=build_system_instruction(lang, identity),
            json_output=True,
        )
        parsed = extract_json_object(raw)
        if parsed is None:
            raise ValueError("No data returned")
    except Exception as exc:
        logger.error("Analysis failed: %s", exc)
        return ViralMetrics(feedback=f"Analysis Failed: {exc}")

    return ViralMetrics(
        hook_score=_score(parsed.get("hook_score")),
        retention_score=_score(parsed.get("retention_score")),
        controversy_score=_score(parsed.get("controversy_score")),
        feedback=str(parsed.get("feedback") or ""),
    )


def remix_script(
    llm: GenerativeClient,
    content: str,
    mode: RemixMode,
    lang: Language,
    identity: Optional[ChannelIdentity] = None,
) -> str:
    """Rewrite for retention or controversy; the input comes back unchanged on failure."""
    try:
        rewritten = llm.complete(
            build_remix_prompt(content, mode, lang),
            system_instruction=build_system_instruction(lang, identity),
        )
    except Exception as exc:
        logger.warning("Remix (%s) failed: %s", mode, exc)
        return content
    return rewritten or content


def export_filename(script: Script) -> str:
    """``<title>.md`` with characters that are unsafe in filenames removed."""
    title = re.sub(r'[\\/:*?"<>|\r\n]+', "", script.title or "").strip()
    return f"{title or 'script'}.md"
