"""Channel profile: connect a channel, keep the brand bible, sync OAuth identity."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from config import settings
from generative.models import ChannelIdentity
from ingestion.youtube import YouTubeClient
from storage.models import UserProfile
from storage.store import LocalStore

logger = logging.getLogger(__name__)

DEFAULT_IDENTITY = ChannelIdentity(
    brand_voice="Professional, Deep, Analytical",
    target_audience="General Audience",
    manifesto="To uncover the truth.",
)


def _identity_with_defaults(identity: Optional[ChannelIdentity]) -> ChannelIdentity:
    identity = identity or ChannelIdentity()
    return ChannelIdentity(
        brand_voice=identity.brand_voice or DEFAULT_IDENTITY.brand_voice,
        target_audience=identity.target_audience or DEFAULT_IDENTITY.target_audience,
        manifesto=identity.manifesto or DEFAULT_IDENTITY.manifesto,
    )


async def connect_channel_service(
    identifier: str,
    store: LocalStore,
    youtube: YouTubeClient,
    identity: Optional[ChannelIdentity] = None,
) -> Optional[UserProfile]:
    """
    Resolve ``identifier`` and merge the channel into the stored profile.

    Blank identity fields fall back to defaults. Returns None when the channel
    cannot be found; the stored profile is left untouched in that case.
    """
    record = await asyncio.to_thread(youtube.fetch_channel_deep_data, identifier)
    if record is None:
        return None

    existing = await store.get_user_profile() or UserProfile()
    profile = existing.model_copy(update={
        "channel_name": record.title,
        "channel_handle": record.custom_url,
        "subscriber_count": record.subscribers,
        "identity": _identity_with_defaults(identity or existing.identity),
    })
    return await store.save_user_profile(profile)


async def save_identity_service(identity: ChannelIdentity, store: LocalStore) -> UserProfile:
    """Save the brand bible, creating a channel-less profile when none exists yet."""
    existing = await store.get_user_profile()
    if existing is None:
        profile = UserProfile(identity=identity)
    else:
        profile = existing.model_copy(update={"identity": identity})
    return await store.save_user_profile(profile)


async def sync_oauth_service(access_token: str, store: LocalStore, youtube: YouTubeClient) -> Optional[UserProfile]:
    """
    Hydrate the profile from the authenticated channel and its analytics.

    ``youtube`` must be built from the same OAuth access token.
    """
    channel = await asyncio.to_thread(youtube.get_my_channel)
    if not channel:
        return None
    analytics = await asyncio.to_thread(youtube.get_my_analytics, settings.ANALYTICS_WINDOW_DAYS)

    existing = await store.get_user_profile() or UserProfile(identity=DEFAULT_IDENTITY.model_copy())
    profile = existing.model_copy(update={
        **channel,
        "access_token": access_token,
        "analytics": analytics or existing.analytics,
    })
    return await store.save_user_profile(profile)


async def get_identity(store: LocalStore) -> Optional[ChannelIdentity]:
    """Identity used for persona injection, if a profile exists."""
    profile = await store.get_user_profile()
    return profile.identity if profile else None
