import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from unittest.mock import MagicMock

from database import Base, get_db
from generative.llm import GenerativeClient, GroundedResponse
from ingestion.youtube import YouTubeClient
from main import app
from routers import rate_limit
from routers.dependencies import (
    get_llm,
    get_oauth_youtube_client,
    get_optional_youtube_client,
    get_youtube_client,
)
from storage.store import LocalStore


@pytest.fixture(autouse=True)
def reset_local_rate_limit_counters():
    """Keep in-memory quota state isolated between tests."""
    previous = getattr(app.state, "disable_rate_limits", False)
    app.state.disable_rate_limits = True
    rate_limit._local_windows.clear()
    yield
    rate_limit._local_windows.clear()
    app.state.disable_rate_limits = previous


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    db_path = tmp_path / "scriptos_test.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield maker
    await engine.dispose()


@pytest_asyncio.fixture
async def store(session_maker):
    async with session_maker() as session:
        yield LocalStore(session)


@pytest.fixture
def mock_llm():
    llm = MagicMock(spec=GenerativeClient)
    llm.complete.return_value = "{}"
    llm.search_grounded.return_value = GroundedResponse(text="", sources=[])
    llm.chat.return_value = ""
    llm.generate_image.return_value = None
    return llm


@pytest.fixture
def mock_youtube():
    client = MagicMock(spec=YouTubeClient)
    client.fetch_channel_deep_data.return_value = None
    client.search_videos.return_value = []
    client.get_video.return_value = None
    client.get_my_channel.return_value = None
    client.get_my_analytics.return_value = None
    return client


@pytest_asyncio.fixture
async def api_client(session_maker, mock_llm, mock_youtube):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm] = lambda: mock_llm
    app.dependency_overrides[get_youtube_client] = lambda: mock_youtube
    app.dependency_overrides[get_optional_youtube_client] = lambda: mock_youtube
    app.dependency_overrides[get_oauth_youtube_client] = lambda: mock_youtube
    app.state.workspace = None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
