import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from generative.llm import GenerativeClient
from generative.models import ChannelIdentity, ChatMessage, GroundingSource, StyleDNA
from generative.parsing import extract_json, extract_json_object, unique_sources
from generative.prompts import (
    SCRIPT_ANALYSIS_CHAR_LIMIT,
    build_channel_decode_prompt,
    build_script_prompt,
    build_system_instruction,
    build_viral_analysis_prompt,
)
from ingestion.models import ChannelRecord, RecentUpload


STYLE = StyleDNA(
    id="s1",
    name="Noir",
    tone="Cynical, Slow-paced",
    structure="Cold Open -> Twist",
    audio_signature="Jazz",
    description="Dark",
)


# ==================== JSON extraction ====================

def test_strict_json_is_parsed_directly():
    assert extract_json('{"a": 1}') == {"a": 1}
    assert extract_json("[1, 2]") == [1, 2]


def test_fenced_block_with_surrounding_prose():
    text = 'Here is the profile:\n```json\n{"a": 1}\n```\nHope it helps.'
    assert extract_json(text) == {"a": 1}


def test_fenced_block_inline_with_prose():
    assert extract_json("prefix text ```json\n{\"a\":1}\n``` suffix") == {"a": 1}


def test_fence_without_language_tag():
    assert extract_json('```\n{"name": "Noir"}\n```') == {"name": "Noir"}


def test_brace_span_inside_prose():
    assert extract_json('Sure! {"name": "Noir", "tone": "dark"} Anything else?') == {"name": "Noir", "tone": "dark"}


@pytest.mark.parametrize("text", [None, "", "no structured data here", "{ broken", "``` not json ```"])
def test_unparseable_text_returns_none(text):
    assert extract_json(text) is None


def test_extract_json_object_rejects_arrays():
    assert extract_json_object("[1, 2, 3]") is None
    assert extract_json_object('{"ok": true}') == {"ok": True}


def test_unique_sources_keeps_first_occurrence_and_drops_placeholders():
    sources = [
        GroundingSource(title="A", uri="https://a.example"),
        GroundingSource(title="Unknown Source", uri="#"),
        GroundingSource(title="A again", uri="https://a.example"),
        GroundingSource(title="B", uri="https://b.example"),
        GroundingSource(title="Empty", uri=""),
    ]
    result = unique_sources(sources)
    assert [(source.title, source.uri) for source in result] == [
        ("A", "https://a.example"),
        ("B", "https://b.example"),
    ]


# ==================== Prompts ====================

def test_system_instruction_follows_language():
    assert "PORTUGUESE (BRAZIL)" in build_system_instruction("pt-br")
    assert "ENGLISH (US)" in build_system_instruction("en-us")


def test_identity_is_injected_into_persona():
    identity = ChannelIdentity(
        brand_voice="Sarcastic, Nihilistic",
        target_audience="Gen Z true crime fans",
        manifesto="Expose what was buried.",
    )
    instruction = build_system_instruction("en-us", identity)
    assert "Sarcastic, Nihilistic" in instruction
    assert "Gen Z true crime fans" in instruction
    assert "Expose what was buried." in instruction


def test_blank_identity_adds_no_section():
    assert build_system_instruction("en-us", ChannelIdentity()) == build_system_instruction("en-us")


def test_viral_analysis_prompt_truncates_script():
    content = "a" * SCRIPT_ANALYSIS_CHAR_LIMIT + "TAIL_MARKER"
    prompt = build_viral_analysis_prompt(content, "en-us")
    assert "TAIL_MARKER" not in prompt
    assert "a" * SCRIPT_ANALYSIS_CHAR_LIMIT in prompt


def test_script_prompt_includes_packaging_only_when_given():
    bare = build_script_prompt("Cicada 3301", STYLE, "Short", "en-us")
    assert "TITLE:" not in bare
    assert "None provided" in bare

    packaged = build_script_prompt(
        "Cicada 3301", STYLE, "Short", "pt-br",
        context="facts", title="The Puzzle", thumbnail_concept="A cicada on a keyboard",
    )
    assert "TITLE: The Puzzle" in packaged
    assert "A cicada on a keyboard" in packaged
    assert "Portuguese (Brazil)" in packaged


def test_channel_decode_prompt_lists_recent_uploads():
    record = ChannelRecord(
        title="Dark Files",
        custom_url="@darkfiles",
        subscribers="1000",
        recent_videos=[RecentUpload(title="Case 1", description="first"), RecentUpload(title="Case 2")],
    )
    prompt = build_channel_decode_prompt(record, "en-us")
    assert "Dark Files (@darkfiles)" in prompt
    assert '1. "Case 1" - first' in prompt
    assert '2. "Case 2"' in prompt


# ==================== Client ====================

@pytest.fixture
def openai_client():
    with patch("generative.llm.OpenAI") as mock_openai:
        sdk = MagicMock()
        mock_openai.return_value = sdk
        yield sdk


def _completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def test_complete_requests_json_object(openai_client):
    openai_client.chat.completions.create.return_value = _completion('{"ok": 1}')
    llm = GenerativeClient(api_key="sk-test", model="test-model")

    assert llm.complete("prompt", system_instruction="persona", json_output=True) == '{"ok": 1}'

    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0] == {"role": "system", "content": "persona"}
    assert kwargs["messages"][1] == {"role": "user", "content": "prompt"}


def test_chat_maps_model_role_to_assistant(openai_client):
    openai_client.chat.completions.create.return_value = _completion("Understood.")
    llm = GenerativeClient(api_key="sk-test")
    history = [
        ChatMessage(id="1", role="user", text="hi", timestamp=1),
        ChatMessage(id="2", role="model", text="Awaiting directives.", timestamp=2),
    ]

    assert llm.chat(history, "next?") == "Understood."

    messages = openai_client.chat.completions.create.call_args.kwargs["messages"]
    assert [message["role"] for message in messages] == ["user", "assistant", "user"]


def test_search_grounded_collects_url_citations(openai_client):
    annotation = SimpleNamespace(type="url_citation", title="Wiki", url="https://wiki.example")
    other = SimpleNamespace(type="file_citation", title="ignored", url="x")
    openai_client.responses.create.return_value = SimpleNamespace(
        output_text="Report",
        output=[
            SimpleNamespace(type="web_search_call"),
            SimpleNamespace(type="message", content=[SimpleNamespace(annotations=[annotation, other])]),
        ],
    )
    llm = GenerativeClient(api_key="sk-test")

    response = llm.search_grounded("query", system_instruction="persona")

    assert response.text == "Report"
    assert [(source.title, source.uri) for source in response.sources] == [("Wiki", "https://wiki.example")]
    assert response.model_dump()["text"] == "Report"
    kwargs = openai_client.responses.create.call_args.kwargs
    assert kwargs["tools"] == [{"type": "web_search_preview"}]
    assert kwargs["instructions"] == "persona"


def test_generate_image_returns_base64(openai_client):
    openai_client.images.generate.return_value = SimpleNamespace(data=[SimpleNamespace(b64_json="aGVsbG8=")])
    llm = GenerativeClient(api_key="sk-test")
    assert llm.generate_image("a dark corridor") == "aGVsbG8="

    openai_client.images.generate.return_value = SimpleNamespace(data=[])
    assert llm.generate_image("a dark corridor") is None
