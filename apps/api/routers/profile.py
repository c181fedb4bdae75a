"""
Channel profile router: connect a channel, edit the brand bible and sync the
authenticated channel over OAuth.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from analysis.models import ChannelAnalytics
from config import settings
from generative.models import ChannelIdentity
from ingestion.youtube import YouTubeClient
from routers.dependencies import get_oauth_access_token, get_oauth_youtube_client, get_store, get_youtube_client
from services.profile import connect_channel_service, save_identity_service, sync_oauth_service
from storage.models import UserProfile
from storage.store import LocalStore

router = APIRouter()


class ProfileResponse(BaseModel):
    """Stored profile without the OAuth token."""
    channel_id: Optional[str] = None
    channel_name: Optional[str] = None
    channel_handle: Optional[str] = None
    avatar_url: Optional[str] = None
    subscriber_count: Optional[str] = None
    identity: ChannelIdentity = Field(default_factory=ChannelIdentity)
    analytics: Optional[ChannelAnalytics] = None
    oauth_connected: bool = False

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileResponse":
        return cls(
            channel_id=profile.channel_id,
            channel_name=profile.channel_name,
            channel_handle=profile.channel_handle,
            avatar_url=profile.avatar_url,
            subscriber_count=profile.subscriber_count,
            identity=profile.identity,
            analytics=profile.analytics,
            oauth_connected=bool(profile.access_token),
        )


class ConnectChannelRequest(BaseModel):
    identifier: str = Field(min_length=1)
    identity: Optional[ChannelIdentity] = None


@router.get("", response_model=Optional[ProfileResponse])
async def get_profile(store: LocalStore = Depends(get_store)):
    profile = await store.get_user_profile()
    if profile is None:
        return None
    return ProfileResponse.from_profile(profile)


@router.post("/connect", response_model=ProfileResponse)
async def connect_channel(
    request: ConnectChannelRequest,
    store: LocalStore = Depends(get_store),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    profile = await connect_channel_service(request.identifier, store, youtube, request.identity)
    if profile is None:
        raise HTTPException(status_code=404, detail="Channel not found")
    return ProfileResponse.from_profile(profile)


@router.put("/identity", response_model=ProfileResponse)
async def save_identity(identity: ChannelIdentity, store: LocalStore = Depends(get_store)):
    profile = await save_identity_service(identity, store)
    return ProfileResponse.from_profile(profile)


@router.post("/sync", response_model=ProfileResponse)
async def sync_oauth(
    access_token: str = Depends(get_oauth_access_token),
    youtube: YouTubeClient = Depends(get_oauth_youtube_client),
    store: LocalStore = Depends(get_store),
):
    """
    Pull the authenticated channel and its last 28 days of views.

    The short-lived Google access token is passed as a Bearer header.
    """
    profile = await sync_oauth_service(access_token, store, youtube)
    if profile is None:
        raise HTTPException(status_code=404, detail="No channel found for this Google account")
    return ProfileResponse.from_profile(profile)


class OAuthConfigResponse(BaseModel):
    client_id: str
    scopes: List[str]


@router.get("/oauth-config", response_model=OAuthConfigResponse)
async def oauth_config():
    """Client ID and scopes for the browser-side Google token flow used before /sync."""
    if not settings.GOOGLE_CLIENT_ID:
        raise HTTPException(status_code=503, detail="GOOGLE_CLIENT_ID is not configured.")
    return OAuthConfigResponse(client_id=settings.GOOGLE_CLIENT_ID, scopes=settings.YOUTUBE_OAUTH_SCOPES)
