"""
Application configuration using Pydantic Settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./scriptos.db"

    # Redis
    REDIS_URL: str = "redis://localhost:6379"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Google OAuth (client-side token flow; the backend only receives access tokens)
    GOOGLE_CLIENT_ID: str = ""
    YOUTUBE_OAUTH_SCOPES: List[str] = [
        "https://www.googleapis.com/auth/youtube.readonly",
        "https://www.googleapis.com/auth/yt-analytics.readonly",
    ]
    YOUTUBE_API_KEY: str = ""  # For public data access without OAuth

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_SEARCH_MODEL: str = "gpt-4o"
    OPENAI_IMAGE_MODEL: str = "gpt-image-1"
    OPENAI_IMAGE_SIZE: str = "1536x1024"

    # Local store
    STORE_NAMESPACE: str = "scriptos"
    ANALYTICS_WINDOW_DAYS: int = 28

    # Security
    ENCRYPTION_KEY: str = "change_me_32_byte_key_for_prod"
    AUTO_CREATE_DB_SCHEMA: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()


def require_youtube_api_key() -> str:
    """Return configured YouTube API key or raise a configuration error."""
    api_key = (settings.YOUTUBE_API_KEY or "").strip()
    if not api_key:
        raise ValueError("YOUTUBE_API_KEY is not configured")
    return api_key


def require_openai_api_key() -> str:
    """Return configured OpenAI API key or raise a configuration error."""
    api_key = (settings.OPENAI_API_KEY or "").strip()
    if not api_key or "your_" in api_key:
        raise ValueError("OPENAI_API_KEY is not configured")
    return api_key


def validate_security_settings() -> None:
    """Fail fast when no token encryption key is configured."""
    encryption_key = (settings.ENCRYPTION_KEY or "").strip()
    if not encryption_key:
        raise ValueError("ENCRYPTION_KEY is empty. Configure a key to store OAuth tokens.")
