"""Shared FastAPI dependencies for the store and the external clients."""

from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from config import require_youtube_api_key
from database import get_db
from generative.llm import GenerativeClient, get_generative_client
from ingestion.youtube import YouTubeClient, create_youtube_client_with_api_key, create_youtube_client_with_oauth
from storage.store import LocalStore


oauth_scheme = HTTPBearer(auto_error=False)


async def get_store(db: AsyncSession = Depends(get_db)) -> LocalStore:
    return LocalStore(db)


def get_youtube_client() -> YouTubeClient:
    """YouTube client using the API key; 503 when the key is missing."""
    try:
        return create_youtube_client_with_api_key(require_youtube_api_key())
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def get_optional_youtube_client() -> Optional[YouTubeClient]:
    """Like get_youtube_client, but None instead of an error when unconfigured."""
    try:
        return create_youtube_client_with_api_key(require_youtube_api_key())
    except ValueError:
        return None


def get_llm() -> GenerativeClient:
    """Generative client; 503 when OPENAI_API_KEY is missing."""
    try:
        return get_generative_client()
    except ValueError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def get_oauth_access_token(
    credentials: HTTPAuthorizationCredentials = Depends(oauth_scheme),
) -> str:
    """Short-lived Google OAuth access token passed as a Bearer header."""
    if not credentials or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Missing Bearer OAuth access token.")
    return credentials.credentials


def get_oauth_youtube_client(access_token: str = Depends(get_oauth_access_token)) -> YouTubeClient:
    return create_youtube_client_with_oauth(access_token)
