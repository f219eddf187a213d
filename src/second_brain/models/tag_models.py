"""
# Tag Models

Tags are user-scoped labels stored independently of content. Content items reference them by id.
Titles are unique per user regardless of case; `title_lower` is persisted alongside the display
title so the uniqueness check can lean on a compound index.
"""

from datetime import datetime
from typing import List
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from second_brain.models.content_models import utc_now


class TagCreate(BaseModel):
    """Request body for `POST /tags`. Blank titles are rejected by the tag service."""

    title: str = ""


class Tag(BaseModel):
    """A stored tag.

    Attributes:
        id (str): UUID4 string, serialized as `_id`.
        title (str): Trimmed display title.
        user_id (str): Owner id.
        created_at (datetime): Creation time (UTC).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()), alias="_id")
    title: str
    user_id: str = Field(..., alias="userId")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    def to_document(self) -> dict:
        document = self.model_dump(by_alias=True)
        document["title_lower"] = self.title.lower()
        return document


class TagList(BaseModel):
    tags: List[Tag]


class TagCreated(BaseModel):
    message: str = "Tag created"
    tag: Tag
