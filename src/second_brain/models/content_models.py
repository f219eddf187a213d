"""
# Content Models

This module defines the **knowledge item** data structures: the stored `Content` document, the
request bodies used to create and patch it, and the embed metadata blocks attached to tweets and
videos.

## Domain Model Overview

- **Content**: A saved item (note, link, tweet, video, ...) owned by exactly one user.
- **TweetMetadata**: oEmbed data for a tweet, attached only to `tweet` items.
- **VideoMetadata**: oEmbed data for a video, attached only to `video` items.

## Wire Format

Documents are stored and served with camelCase keys (`userId`, `tweetMetadata`, `createdAt`) and
`_id` as the identifier. Python code uses the snake_case attribute names; every model accepts both
spellings on input (`populate_by_name`).

## Content Types

The storage enumeration is deliberately wider than what the UI offers:

| Set | Members |
|---|---|
| `ContentType` | text, tweet, video, document, link, note, task, other |
| `UI_CONTENT_TYPES` | text, tweet, video, document, link |
| `LINK_REQUIRED_TYPES` | link, tweet, video |

## Module Attributes

Attributes:
    UI_CONTENT_TYPES (List[ContentType]): Types offered by the add-content form, in display order.
    LINK_REQUIRED_TYPES (FrozenSet[ContentType]): Types that must carry a `link`.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    """Enumeration of storable content kinds."""

    TEXT = "text"
    TWEET = "tweet"
    VIDEO = "video"
    DOCUMENT = "document"
    LINK = "link"
    NOTE = "note"
    TASK = "task"
    OTHER = "other"


UI_CONTENT_TYPES: List[ContentType] = [
    ContentType.TEXT,
    ContentType.TWEET,
    ContentType.VIDEO,
    ContentType.DOCUMENT,
    ContentType.LINK,
]

LINK_REQUIRED_TYPES: FrozenSet[ContentType] = frozenset({ContentType.LINK, ContentType.TWEET, ContentType.VIDEO})


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def unique_ids(ids: List[str]) -> List[str]:
    """Drop duplicate ids while keeping first-seen order."""
    seen = set()
    result = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class TweetMetadata(BaseModel):
    """Embed data returned by the tweet oEmbed provider.

    Attributes:
        html (str): Embeddable blockquote markup.
        author_name (Optional[str]): Display name of the tweet author.
        author_url (Optional[str]): Profile URL of the author.
        provider_name (Optional[str]): Usually "Twitter".
        provider_url (Optional[str]): Provider home page.
        cache_age (Optional[str]): Provider cache hint, kept as text.
        tweet_url (Optional[str]): The URL the metadata was resolved for.
    """

    model_config = ConfigDict(extra="ignore")

    html: str
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    provider_name: Optional[str] = None
    provider_url: Optional[str] = None
    cache_age: Optional[str] = None
    tweet_url: Optional[str] = None

    @field_validator("cache_age", mode="before")
    @classmethod
    def stringify_cache_age(cls, v):
        # Providers send this as a number or a numeric string
        return None if v is None else str(v)


class VideoMetadata(BaseModel):
    """Embed data returned by the video oEmbed provider.

    Attributes:
        html (str): Embeddable player markup.
        title (Optional[str]): Video title.
        author_name (Optional[str]): Channel or uploader name.
        author_url (Optional[str]): Channel URL.
        provider_name (Optional[str]): e.g. "YouTube".
        provider_url (Optional[str]): Provider home page.
        thumbnail_url (Optional[str]): Preview image.
        video_url (Optional[str]): The URL the metadata was resolved for.
    """

    model_config = ConfigDict(extra="ignore")

    html: str
    title: Optional[str] = None
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    provider_name: Optional[str] = None
    provider_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None


class ContentCreate(BaseModel):
    """Request body for creating a content item.

    Only shape is checked here. Semantic rules (non-blank title, required link, metadata matching
    the type, tags owned by the caller) are enforced by the content service so that they apply to
    merged updates as well.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "FastAPI release thread",
                "type": "tweet",
                "link": "https://twitter.com/tiangolo/status/1",
                "tags": ["4f0c8a5e-1c1b-4d7e-9d55-6f7ad3b4a0c2"],
            }
        },
    )

    title: str
    body: Optional[str] = None
    type: ContentType = ContentType.TEXT
    link: Optional[str] = None
    tweet_metadata: Optional[TweetMetadata] = Field(None, alias="tweetMetadata")
    video_metadata: Optional[VideoMetadata] = Field(None, alias="videoMetadata")
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: List[str]) -> List[str]:
        return unique_ids(v)


class ContentUpdate(BaseModel):
    """Partial update; only the fields present in the request are replaced."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    body: Optional[str] = None
    type: Optional[ContentType] = None
    link: Optional[str] = None
    tweet_metadata: Optional[TweetMetadata] = Field(None, alias="tweetMetadata")
    video_metadata: Optional[VideoMetadata] = Field(None, alias="videoMetadata")
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def dedupe_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return None if v is None else unique_ids(v)


class Content(BaseModel):
    """A stored knowledge item.

    Attributes:
        id (str): UUID4 string, serialized as `_id`. Immutable.
        title (str): Trimmed, non-empty title.
        body (Optional[str]): Free text.
        type (ContentType): Storage type, defaults to `text`.
        link (Optional[str]): External URL; required for link, tweet and video items.
        tweet_metadata (Optional[TweetMetadata]): Only on tweet items.
        video_metadata (Optional[VideoMetadata]): Only on video items.
        tags (List[str]): Tag ids owned by the same user, without duplicates.
        user_id (str): Owner id. Immutable.
        created_at (datetime): Creation time (UTC).
        updated_at (datetime): Last modification time (UTC).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()), alias="_id")
    title: str
    body: Optional[str] = None
    type: ContentType = ContentType.TEXT
    link: Optional[str] = None
    tweet_metadata: Optional[TweetMetadata] = Field(None, alias="tweetMetadata")
    video_metadata: Optional[VideoMetadata] = Field(None, alias="videoMetadata")
    tags: List[str] = Field(default_factory=list)
    user_id: str = Field(..., alias="userId")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")

    def to_document(self) -> dict:
        """Serialize for MongoDB, dropping unset optional fields."""
        document = self.model_dump(by_alias=True, exclude_none=True)
        document["type"] = self.type.value
        return document


class DeleteResponse(BaseModel):
    message: str
