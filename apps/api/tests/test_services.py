import pytest

from analysis.models import ChannelAnalytics
from generative.llm import GroundedResponse
from generative.models import ChannelIdentity, GroundingSource
from ingestion.models import ChannelRecord, YouTubeVideo
from services.automation import (
    FlowNotFound,
    add_edge_service,
    add_node_service,
    create_flow_service,
    remove_node_service,
    simulate_flow_service,
)
from services.board import dashboard_totals, group_by_status, move_script_service
from services.chat import chat_with_assistant, greeting
from services.profile import connect_channel_service, save_identity_service, sync_oauth_service
from services.studio import analyze_viral_score, export_filename, remix_script
from services.style_decoder import decode_channel_from_data, decode_style
from services.trends import hunt_trends_service, trend_hunt
from services.writer import (
    SCRIPT_ERROR_TEXT,
    generate_script,
    generate_thumbnail_concept,
    generate_thumbnail_image,
    generate_viral_titles,
)
from storage.models import Script, ScriptStatus
from storage.store import DEFAULT_STYLE


def _script(script_id="s1", status=ScriptStatus.IDEA, title="Cicada 3301"):
    return Script(
        id=script_id,
        title=title,
        topic="mysteries",
        content="# HOOK\nThe puzzle appeared overnight.",
        status=status,
        created_at=1_000,
        last_modified=1_000,
    )


# ==================== Writer ====================

def test_titles_are_sorted_by_score(mock_llm):
    mock_llm.complete.return_value = (
        '```json\n{"titles": ['
        '{"title": "Low", "psychology": "curiosity", "score": 40},'
        '{"title": "High", "psychology": "fear", "score": 92},'
        '{"title": "", "score": 99}'
        ']}\n```'
    )
    titles = generate_viral_titles(mock_llm, "Cicada 3301", "en-us")
    assert [title.title for title in titles] == ["High", "Low"]
    assert mock_llm.complete.call_args.kwargs["json_output"] is True


def test_titles_degrade_to_empty_list(mock_llm):
    mock_llm.complete.side_effect = RuntimeError("boom")
    assert generate_viral_titles(mock_llm, "topic", "en-us") == []


def test_thumbnail_concept_falls_back_to_title(mock_llm):
    mock_llm.complete.return_value = "not json"
    thumbnail = generate_thumbnail_concept(mock_llm, "The Puzzle", "mysteries", DEFAULT_STYLE, "en-us")
    assert "The Puzzle" in thumbnail.concept
    assert "The Puzzle" in thumbnail.image_prompt


def test_thumbnail_render_failure_is_none(mock_llm):
    mock_llm.generate_image.side_effect = RuntimeError("content policy")
    assert generate_thumbnail_image(mock_llm, "a corridor") is None
    assert generate_thumbnail_image(mock_llm, "   ") is None


def test_script_uses_grounded_search_with_persona(mock_llm):
    mock_llm.search_grounded.return_value = GroundedResponse(text="# HOOK\n...", sources=[])
    identity = ChannelIdentity(brand_voice="Cold")

    content = generate_script(mock_llm, "Cicada", DEFAULT_STYLE, "Short", "en-us", identity=identity)

    assert content == "# HOOK\n..."
    assert "Cold" in mock_llm.search_grounded.call_args.kwargs["system_instruction"]


def test_script_failure_returns_error_text(mock_llm):
    mock_llm.search_grounded.side_effect = RuntimeError("timeout")
    assert generate_script(mock_llm, "Cicada", DEFAULT_STYLE, "Short", "en-us") == SCRIPT_ERROR_TEXT


# ==================== Studio ====================

def test_viral_score_is_parsed_and_clamped(mock_llm):
    mock_llm.complete.return_value = '{"hook_score": 120, "retention_score": 55, "controversy_score": "x", "feedback": "Dull."}'
    metrics = analyze_viral_score(mock_llm, "script", "en-us")
    assert metrics.hook_score == 100
    assert metrics.retention_score == 55
    assert metrics.controversy_score == 0
    assert metrics.feedback == "Dull."


def test_viral_score_failure_carries_error_text(mock_llm):
    mock_llm.complete.side_effect = RuntimeError("quota exceeded")
    metrics = analyze_viral_score(mock_llm, "script", "en-us")
    assert metrics.hook_score == 0
    assert metrics.feedback.startswith("Analysis Failed")
    assert "quota exceeded" in metrics.feedback


def test_remix_returns_original_on_failure(mock_llm):
    mock_llm.complete.side_effect = RuntimeError("boom")
    assert remix_script(mock_llm, "original text", "RETENTION", "en-us") == "original text"


def test_remix_returns_rewrite(mock_llm):
    mock_llm.complete.return_value = "sharper text"
    assert remix_script(mock_llm, "original text", "CONTROVERSY", "pt-br") == "sharper text"
    assert "CONTROVERSY" in mock_llm.complete.call_args.args[0]


def test_export_filename_strips_unsafe_characters():
    assert export_filename(_script(title='Who is "Cicada"? / 3301')) == "Who is Cicada  3301.md"
    assert export_filename(_script(title="   ")) == "script.md"


# ==================== Style decoder ====================

def test_decode_style_accepts_camel_case_audio_signature(mock_llm):
    mock_llm.search_grounded.return_value = GroundedResponse(
        text='Profile: {"name": "Noir", "tone": "Dark", "structure": "A -> B", "audioSignature": "Jazz", "description": "d"}'
    )
    style = decode_style(mock_llm, "https://youtube.com/@darkfiles", "en-us")
    assert style.name == "Noir"
    assert style.audio_signature == "Jazz"
    assert style.id not in ("", "error")


def test_decode_style_failure_returns_sentinel(mock_llm):
    mock_llm.search_grounded.return_value = GroundedResponse(text="I cannot help with that.")
    style = decode_style(mock_llm, "text", "en-us")
    assert style.id == "error"
    assert style.name == "Decryption Failed"


def test_decode_channel_from_data(mock_llm):
    mock_llm.complete.return_value = '{"name": "Archive", "tone": "Calm", "structure": "S", "audio_signature": "Ambient", "description": "d"}'
    record = ChannelRecord(title="Dark Files", custom_url="@darkfiles")
    style = decode_channel_from_data(mock_llm, record, "en-us")
    assert style.name == "Archive"
    assert "Dark Files" in mock_llm.complete.call_args.args[0]


def test_decode_channel_failure_returns_sentinel(mock_llm):
    mock_llm.complete.side_effect = RuntimeError("boom")
    style = decode_channel_from_data(mock_llm, ChannelRecord(title="x"), "en-us")
    assert style.id == "error"


# ==================== Trends ====================

def test_trend_report_deduplicates_sources(mock_llm):
    mock_llm.search_grounded.return_value = GroundedResponse(
        text="Report",
        sources=[
            GroundingSource(title="A", uri="https://a.example"),
            GroundingSource(title="A", uri="https://a.example"),
            GroundingSource(title="B", uri="https://b.example"),
        ],
    )
    report = trend_hunt(mock_llm, "cults", "en-us")
    assert report.content == "Report"
    assert [source.uri for source in report.sources] == ["https://a.example", "https://b.example"]


def test_trend_report_failure_has_no_sources(mock_llm):
    mock_llm.search_grounded.side_effect = RuntimeError("offline")
    report = trend_hunt(mock_llm, "cults", "en-us")
    assert report.content.startswith("Connection to search grid failed")
    assert report.sources == []


@pytest.mark.asyncio
async def test_hunt_appends_language_suffix_to_video_query(mock_llm, mock_youtube):
    mock_llm.search_grounded.return_value = GroundedResponse(text="Relatório")
    mock_youtube.search_videos.return_value = [YouTubeVideo(id="v1", title="Caso")]

    result = await hunt_trends_service("casos sem solução", "pt-br", mock_llm, mock_youtube)

    mock_youtube.search_videos.assert_called_once_with("casos sem solução pt-br")
    assert result["report"].content == "Relatório"
    assert [video.id for video in result["videos"]] == ["v1"]


@pytest.mark.asyncio
async def test_hunt_without_youtube_client_still_reports(mock_llm):
    mock_llm.search_grounded.return_value = GroundedResponse(text="Report")
    result = await hunt_trends_service("cults", "en-us", mock_llm, None)
    assert result["videos"] == []
    assert result["report"].content == "Report"


# ==================== Chat ====================

def test_chat_failure_returns_signal_lost(mock_llm):
    mock_llm.chat.side_effect = RuntimeError("network")
    assert chat_with_assistant(mock_llm, [], "hello", "en-us").startswith("Signal lost.")


def test_greeting_is_localized():
    assert "Aguardando" in greeting("pt-br")
    assert "Awaiting" in greeting("en-us")


# ==================== Profile ====================

@pytest.mark.asyncio
async def test_connect_channel_applies_identity_defaults(store, mock_youtube):
    mock_youtube.fetch_channel_deep_data.return_value = ChannelRecord(
        title="Dark Files", custom_url="@darkfiles", subscribers="1200"
    )

    profile = await connect_channel_service("@darkfiles", store, mock_youtube, ChannelIdentity(brand_voice="Cold"))

    assert profile.channel_name == "Dark Files"
    assert profile.channel_handle == "@darkfiles"
    assert profile.subscriber_count == "1200"
    assert profile.identity.brand_voice == "Cold"
    assert profile.identity.target_audience == "General Audience"
    assert profile.identity.manifesto == "To uncover the truth."
    assert (await store.get_user_profile()).channel_name == "Dark Files"


@pytest.mark.asyncio
async def test_connect_unknown_channel_leaves_profile_untouched(store, mock_youtube):
    mock_youtube.fetch_channel_deep_data.return_value = None
    assert await connect_channel_service("@nobody", store, mock_youtube) is None
    assert await store.get_user_profile() is None


@pytest.mark.asyncio
async def test_identity_can_be_saved_without_a_channel(store):
    profile = await save_identity_service(ChannelIdentity(manifesto="Truth"), store)
    assert profile.channel_name is None
    assert (await store.get_user_profile()).identity.manifesto == "Truth"


@pytest.mark.asyncio
async def test_oauth_sync_stores_channel_and_analytics(store, mock_youtube):
    mock_youtube.get_my_channel.return_value = {
        "channel_id": "UC1",
        "channel_name": "Mine",
        "channel_handle": "@mine",
        "avatar_url": None,
        "subscriber_count": "10",
    }
    mock_youtube.get_my_analytics.return_value = ChannelAnalytics(views=100, subscribers=10, videos=2)

    profile = await sync_oauth_service("ya29.token", store, mock_youtube)

    assert profile.channel_id == "UC1"
    assert profile.analytics.views == 100
    stored = await store.get_user_profile()
    assert stored.access_token == "ya29.token"
    assert stored.identity.brand_voice == "Professional, Deep, Analytical"


@pytest.mark.asyncio
async def test_oauth_sync_without_channel(store, mock_youtube):
    mock_youtube.get_my_channel.return_value = None
    assert await sync_oauth_service("ya29.token", store, mock_youtube) is None
    mock_youtube.get_my_analytics.assert_not_called()


# ==================== Board ====================

def test_group_by_status_has_every_column():
    columns = group_by_status([_script("a"), _script("b", ScriptStatus.PUBLISHED)])
    assert list(columns) == ["IDEA", "DRAFTING", "FILMING", "EDITING", "PUBLISHED"]
    assert [script.id for script in columns["IDEA"]] == ["a"]
    assert [script.id for script in columns["PUBLISHED"]] == ["b"]


def test_dashboard_totals():
    scripts = [
        _script("a", ScriptStatus.IDEA),
        _script("b", ScriptStatus.DRAFTING),
        _script("c", ScriptStatus.EDITING),
        _script("d", ScriptStatus.PUBLISHED),
    ]
    assert dashboard_totals(scripts) == {"total": 4, "in_production": 2, "published": 1}


@pytest.mark.asyncio
async def test_move_to_same_status_is_a_no_op(store):
    await store.save_script(_script("a", ScriptStatus.FILMING))
    moved = await move_script_service("a", ScriptStatus.FILMING, store)
    assert moved.last_modified == 1_000


@pytest.mark.asyncio
async def test_move_updates_status_and_timestamp(store):
    await store.save_script(_script("a"))
    moved = await move_script_service("a", ScriptStatus.EDITING, store)
    assert moved.status == ScriptStatus.EDITING
    assert moved.last_modified > 1_000
    assert (await store.get_script("a")).status == ScriptStatus.EDITING
    assert await move_script_service("missing", ScriptStatus.EDITING, store) is None


# ==================== Automations ====================

@pytest.mark.asyncio
async def test_flow_editing(store):
    flow = await create_flow_service("Night Shift", store)
    assert flow.nodes == []

    flow = await add_node_service(flow.id, "TRIGGER_TREND", store, label="Scan")
    flow = await add_node_service(flow.id, "ACTION_SCRIPT", store, label="Draft")
    first, second = (node.id for node in flow.nodes)

    flow = await add_edge_service(flow.id, first, second, store)
    flow = await add_edge_service(flow.id, first, second, store)
    assert len(flow.edges) == 1

    flow = await remove_node_service(flow.id, second, store)
    assert [node.id for node in flow.nodes] == [first]
    assert flow.edges == []


@pytest.mark.asyncio
async def test_edges_need_existing_distinct_nodes(store):
    with pytest.raises(ValueError):
        await add_edge_service("flow-1", "1", "99", store)
    with pytest.raises(ValueError):
        await add_edge_service("flow-1", "1", "1", store)
    with pytest.raises(FlowNotFound):
        await add_edge_service("missing", "1", "2", store)


@pytest.mark.asyncio
async def test_simulation_is_cosmetic(store):
    run = await simulate_flow_service("flow-1", store)
    assert run["duration_ms"] == 3000
    assert {node.data.status for node in run["nodes"]} == {"running"}

    stored = (await store.get_flows())[0]
    assert {node.data.status for node in stored.nodes} == {"idle"}
