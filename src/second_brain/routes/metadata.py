"""
# Embed Metadata Routes

Thin wrappers around `MetadataResolver` so browsers never call the oEmbed providers directly.

- `GET /tweet-metadata?url=` - `TweetMetadata`; 400 without `url`, 500 when the provider fails
- `GET /video-metadata?url=` - `VideoMetadata`; same error contract

These endpoints do not require authentication.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from second_brain.exceptions import ValidationError
from second_brain.models.content_models import TweetMetadata, VideoMetadata
from second_brain.services.metadata_resolver import MetadataResolver, get_metadata_resolver

router = APIRouter(tags=["Metadata"])


@router.get("/tweet-metadata", response_model=TweetMetadata)
async def tweet_metadata(url: Optional[str] = None, resolver: MetadataResolver = Depends(get_metadata_resolver)):
    """Resolve a tweet URL to its embed markup."""
    if not url:
        raise ValidationError("Tweet URL is required")
    return await resolver.resolve_tweet(url)


@router.get("/video-metadata", response_model=VideoMetadata)
async def video_metadata(url: Optional[str] = None, resolver: MetadataResolver = Depends(get_metadata_resolver)):
    """Resolve a video URL to its embed markup."""
    if not url:
        raise ValidationError("Video URL is required")
    return await resolver.resolve_video(url)
