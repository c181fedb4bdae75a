"""
Prompt templates and persona injection for generative requests.
"""

from typing import List, Optional

from ingestion.models import ChannelRecord
from .models import ChannelIdentity, Language, StyleDNA

SCRIPT_ANALYSIS_CHAR_LIMIT = 5000

STYLE_JSON_FORMAT = """{
  "name": "Creative name for this style (e.g. 'Investigative Noir')",
  "tone": "3 adjectives (e.g. 'Cynical, Fast-paced, Dark')",
  "structure": "The typical video flow (e.g. 'Cold Open -> Montage -> Deep Dive')",
  "audio_signature": "Music/SFX style (e.g. 'Synthwave, Distortion')",
  "description": "A brief summary of why this style is effective."
}"""


def is_portuguese(lang: Language) -> bool:
    return lang == "pt-br"


def language_name(lang: Language) -> str:
    return "Portuguese (Brazil)" if is_portuguese(lang) else "English"


def _identity_section(identity: Optional[ChannelIdentity]) -> str:
    if identity is None:
        return ""
    lines = []
    if identity.brand_voice:
        lines.append(f"- Brand voice: {identity.brand_voice}")
    if identity.target_audience:
        lines.append(f"- Target audience: {identity.target_audience}")
    if identity.manifesto:
        lines.append(f"- Mission: {identity.manifesto}")
    if not lines:
        return ""
    return (
        "\n\nCHANNEL IDENTITY (every output must sound like this channel):\n"
        + "\n".join(lines)
    )


def build_system_instruction(lang: Language, identity: Optional[ChannelIdentity] = None) -> str:
    """Persona instruction for the given output language, with the channel's brand bible when known."""
    output_language = "PORTUGUESE (BRAZIL)" if is_portuguese(lang) else "ENGLISH (US)"
    return (
        'You are "The Archivist", a core component of ScriptOS.\n'
        "You are an expert in creating dark, investigative, and documentary-style content for platforms like YouTube.\n"
        "Your personality is cold, professional, and brutally honest. You value retention, shock value, and truth.\n"
        f"YOUR OUTPUT LANGUAGE IS: {output_language}."
        f"{_identity_section(identity)}\n\n"
        "RULES:\n"
        "1. When writing scripts, start with an aggressive hook in the first 5 seconds.\n"
        '2. NEVER use generic AI openers like "In this video we will explore" or "Neste vídeo vamos explorar". Be visceral.\n'
        "3. Use short sentences. Focus on sensory details.\n"
        "4. If asked to analyze, be a harsh critic. Give low scores if the content is boring.\n"
        "5. Format script output in Markdown with cues for [VISUALS] and [AUDIO]."
    )


def build_chat_instruction(lang: Language, identity: Optional[ChannelIdentity] = None) -> str:
    return (
        build_system_instruction(lang, identity)
        + "\n\nYou are also A.I.N.A, the creator's co-pilot inside ScriptOS. "
        "Answer directly and briefly; suggest the next concrete production step when useful."
    )


def build_titles_prompt(topic: str, lang: Language) -> str:
    return f"""
Generate 5 viral YouTube title variants for the topic below.
LANGUAGE: {language_name(lang)}
TOPIC: {topic}

For each title explain the psychological trigger it uses (curiosity gap, fear, taboo, authority...)
and score its click potential from 0 to 100.

OUTPUT FORMAT:
Return ONLY a JSON object:
{{"titles": [{{"title": "string", "psychology": "string", "score": 0}}]}}
"""


def build_thumbnail_prompt(title: str, topic: str, style: StyleDNA, lang: Language) -> str:
    return f"""
Design a YouTube thumbnail for this video.
LANGUAGE (concept text): {language_name(lang)}
TITLE: {title}
TOPIC: {topic}
STYLE DNA: {style.name} ({style.tone})

The thumbnail must complement the title, not repeat it.

OUTPUT FORMAT:
Return ONLY a JSON object:
{{
  "concept": "Short description of the composition and the emotion it triggers",
  "image_prompt": "Detailed English prompt for an image generator, 16:9, no text overlays"
}}
"""


def build_script_prompt(
    topic: str,
    style: StyleDNA,
    duration: str,
    lang: Language,
    context: Optional[str] = None,
    title: Optional[str] = None,
    thumbnail_concept: Optional[str] = None,
) -> str:
    packaging = ""
    if title:
        packaging += f"\nTITLE: {title}"
    if thumbnail_concept:
        packaging += f"\nTHUMBNAIL CONCEPT: {thumbnail_concept} (the hook must pay off this image)"
    return f"""
Create a script for a video.
LANGUAGE: {language_name(lang)}
TOPIC: {topic}{packaging}
STYLE DNA: {style.name} ({style.tone})
STRUCTURE: {style.structure}
DURATION: {duration}
CONTEXT/DATA: {context or 'None provided. Use your knowledge base.'}

Structure the script with sections: HOOK, INTRO, BODY (divided by key points), OUTRO.
Include [VISUAL CUE] and [AUDIO CUE] directives in bold brackets.
If you need to verify facts, use web search.
"""


def build_remix_prompt(content: str, mode: str, lang: Language) -> str:
    return f"""
Rewrite the following script to maximize {mode}.
LANGUAGE: {language_name(lang)}

IF RETENTION: Focus on removing fluff, increasing pacing, and adding open loops (questions not immediately answered).
IF CONTROVERSY: Focus on stronger opinions, darker truths, and challenging the viewer's worldview.

SCRIPT CONTENT:
{content}
"""


def build_viral_analysis_prompt(content: str, lang: Language) -> str:
    feedback_language = "Portuguese" if is_portuguese(lang) else "English"
    return (
        f"Analyze this script for viral potential on YouTube. Be harsh. Output feedback in {feedback_language}.\n\n"
        "Return ONLY a JSON object:\n"
        '{"hook_score": 0-100, "retention_score": 0-100, "controversy_score": 0-100, '
        '"feedback": "Brutally honest qualitative feedback."}\n\n'
        f"SCRIPT:\n{content[:SCRIPT_ANALYSIS_CHAR_LIMIT]}"
    )


def build_style_decode_prompt(source: str, lang: Language) -> str:
    return f"""
Analyze the following input to create a "Style DNA Profile" for a content creator.
LANGUAGE OUTPUT: {language_name(lang)}

INPUT: "{source}"

INSTRUCTIONS:
1. If the input is a YouTube URL or Channel Name, use web search to find reviews, channel descriptions, popular upload styles, and community discussions about this channel.
2. If the input is text, analyze the writing style directly.
3. Determine the Tone, Structure, and Audio Signature.

OUTPUT FORMAT:
Return ONLY a JSON object.
{STYLE_JSON_FORMAT}
"""


def format_channel_context(record: ChannelRecord) -> str:
    recent: List[str] = [
        f'{index}. "{video.title}" - {video.description}'
        for index, video in enumerate(record.recent_videos, start=1)
    ]
    return (
        f"CHANNEL: {record.title} ({record.custom_url})\n"
        f"SUBSCRIBERS: {record.subscribers}\n"
        f"DESCRIPTION: {record.description}\n"
        f"KEYWORDS: {record.keywords}\n"
        "RECENT VIDEO PATTERNS:\n"
        + "\n".join(recent)
    )


def build_channel_decode_prompt(record: ChannelRecord, lang: Language) -> str:
    return f"""
Analyze the raw channel data provided below and construct a Style DNA profile.
Infer the content strategy, tone, and production style based on the video titles, descriptions, and channel branding.
LANGUAGE OUTPUT: {language_name(lang)}

DATA:
{format_channel_context(record)}

OUTPUT FORMAT:
Return ONLY a JSON object:
{STYLE_JSON_FORMAT}
"""


def build_trend_prompt(query: str, lang: Language) -> str:
    summary_language = "Portuguese" if is_portuguese(lang) else "English"
    return (
        f'Find obscure, dark, or trending topics related to: "{query}".\n'
        "Focus on mysteries, unsolved cases, internet folklore, or disturbing facts.\n"
        f"Provide a comprehensive summary in {summary_language}.\n\n"
        "Always cite your sources by using the search tool."
    )
