"""
# Metadata Resolver

Fetches **oEmbed** data for tweets and videos so the UI can render embeds without talking to the
providers itself.

| Kind | Provider endpoint | Result |
|---|---|---|
| `tweet` | `settings.TWEET_OEMBED_URL` (publish.twitter.com) | `TweetMetadata` + `tweet_url` |
| `video` | `settings.VIDEO_OEMBED_URL` (noembed.com) | `VideoMetadata` + `video_url` |

## Failure Model

Every provider problem surfaces as `UpstreamFetchError`:

- transport errors and timeouts
- non-2xx responses
- bodies that are not JSON objects
- bodies carrying an `error` key (noembed answers failures with HTTP 200)
- bodies missing the `html` field

There is no retry and no caching. Content creation treats the error as "no metadata".

## Testing

Pass an `httpx.MockTransport` as `transport` to stub the providers:

```python
resolver = MetadataResolver(transport=httpx.MockTransport(handler))
meta = await resolver.resolve("tweet", "https://twitter.com/u/status/1")
```
"""

from typing import Any, Dict, Optional, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from second_brain.config import settings
from second_brain.exceptions import UpstreamFetchError, ValidationError
from second_brain.managers.logging_manager import get_logger
from second_brain.models.content_models import TweetMetadata, VideoMetadata
from second_brain.utils.logging_utils import log_performance

logger = get_logger(prefix="[Metadata Resolver]")

SUPPORTED_KINDS = ("tweet", "video")


class MetadataResolver:
    """Resolve external URLs into normalized embed metadata."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: Optional[float] = None):
        self.transport = transport
        self.timeout = timeout if timeout is not None else settings.METADATA_FETCH_TIMEOUT

    async def _fetch(self, endpoint: str, url: str, kind: str) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.get(endpoint, params={"url": url})
        except httpx.HTTPError as e:
            logger.warning("Error fetching %s metadata for %s: %s", kind, url, e)
            raise UpstreamFetchError(f"Failed to fetch {kind} metadata") from e

        if response.is_error:
            logger.warning("%s provider answered %d for %s", kind.capitalize(), response.status_code, url)
            raise UpstreamFetchError(f"Failed to fetch {kind} metadata")

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("%s provider returned a non-JSON body for %s", kind.capitalize(), url)
            raise UpstreamFetchError(f"Failed to fetch {kind} metadata") from e

        if not isinstance(data, dict) or "error" in data:
            logger.warning("%s provider reported an error for %s: %s", kind.capitalize(), url, data)
            raise UpstreamFetchError(f"Failed to fetch {kind} metadata")

        return data

    @log_performance("resolve_tweet_metadata")
    async def resolve_tweet(self, url: str) -> TweetMetadata:
        data = await self._fetch(settings.TWEET_OEMBED_URL, url, "tweet")
        try:
            return TweetMetadata(
                html=data.get("html"),
                author_name=data.get("author_name"),
                author_url=data.get("author_url"),
                provider_name=data.get("provider_name"),
                provider_url=data.get("provider_url"),
                cache_age=data.get("cache_age"),
                tweet_url=url,
            )
        except PydanticValidationError as e:
            raise UpstreamFetchError("Failed to fetch tweet metadata") from e

    @log_performance("resolve_video_metadata")
    async def resolve_video(self, url: str) -> VideoMetadata:
        data = await self._fetch(settings.VIDEO_OEMBED_URL, url, "video")
        try:
            return VideoMetadata(
                html=data.get("html"),
                title=data.get("title"),
                author_name=data.get("author_name"),
                author_url=data.get("author_url"),
                provider_name=data.get("provider_name"),
                provider_url=data.get("provider_url"),
                thumbnail_url=data.get("thumbnail_url"),
                video_url=url,
            )
        except PydanticValidationError as e:
            raise UpstreamFetchError("Failed to fetch video metadata") from e

    async def resolve(self, kind: str, url: str) -> Union[TweetMetadata, VideoMetadata]:
        """
        Resolve `url` as the given kind.

        Raises:
            ValidationError: If `kind` is not `tweet` or `video`, or `url` is blank.
            UpstreamFetchError: If the provider could not produce metadata.
        """
        if kind not in SUPPORTED_KINDS:
            raise ValidationError(f"Unsupported metadata kind: {kind}")
        if not url or not url.strip():
            raise ValidationError(f"{kind.capitalize()} URL is required")

        logger.info("Resolving %s metadata for %s", kind, url)
        if kind == "tweet":
            return await self.resolve_tweet(url)
        return await self.resolve_video(url)


metadata_resolver = MetadataResolver()


def get_metadata_resolver() -> MetadataResolver:
    """FastAPI dependency returning the shared resolver."""
    return metadata_resolver
