"""
# Content Service

Persistence and validation for knowledge items. Every operation takes the caller's verified user
id and only ever touches that user's documents: an id owned by somebody else behaves exactly like
an id that does not exist (`NotFound`).

## Validation Rules

Applied on create and again on the merged document during update:

1. `title` is trimmed and must not be blank.
2. `link`, `tweet` and `video` items must carry a non-blank `link`.
3. `tweetMetadata` is only allowed on `tweet` items, `videoMetadata` only on `video` items.
4. Every tag id must name a tag owned by the same user.

Violations raise `ValidationError`. Updates are last-write-wins; there is no concurrency token.
"""

from typing import Any, Dict, List

from second_brain.config import settings
from second_brain.database import db_manager
from second_brain.exceptions import NotFound, ValidationError
from second_brain.managers.logging_manager import get_logger
from second_brain.models.content_models import (
    LINK_REQUIRED_TYPES,
    Content,
    ContentCreate,
    ContentType,
    ContentUpdate,
    utc_now,
)
from second_brain.services.tag_service import tag_service

logger = get_logger(prefix="[Content Service]")

# Fields that cannot be cleared through a patch
NON_NULLABLE_PATCH_FIELDS = ("type", "tags")


class ContentService:
    """Create, read, update and delete content items for one user at a time."""

    def __init__(self):
        self.collection_name = settings.CONTENTS_COLLECTION

    async def _validate(self, user_id: str, content: Content) -> None:
        if not content.title:
            raise ValidationError("Title is required")

        content_type = ContentType(content.type)
        if content_type in LINK_REQUIRED_TYPES and not (content.link or "").strip():
            raise ValidationError(f"Link is required for {content_type.value} content")

        if content.tweet_metadata is not None and content_type != ContentType.TWEET:
            raise ValidationError("Tweet metadata is only allowed on tweet content")
        if content.video_metadata is not None and content_type != ContentType.VIDEO:
            raise ValidationError("Video metadata is only allowed on video content")

        unknown = await tag_service.find_unknown_tag_ids(user_id, content.tags)
        if unknown:
            raise ValidationError("Unknown tag ids", details={"tags": unknown})

    async def list_contents(self, user_id: str) -> List[Content]:
        """Return the user's contents in creation order."""
        collection = db_manager.get_collection(self.collection_name)
        query = {"userId": user_id}
        start_time = db_manager.log_query_start(self.collection_name, "find", query)
        cursor = collection.find(query).sort("createdAt", 1)
        documents = await cursor.to_list(length=None)
        db_manager.log_query_success(self.collection_name, "find", start_time, len(documents))
        return [Content(**document) for document in documents]

    async def create_content(self, user_id: str, draft: ContentCreate) -> Content:
        """
        Validate and store a new content item.

        Returns:
            Content: The stored item with its id and timestamps assigned.

        Raises:
            ValidationError: If any validation rule fails.
        """
        content = Content(
            title=(draft.title or "").strip(),
            body=draft.body,
            type=draft.type,
            link=draft.link.strip() if draft.link else None,
            tweet_metadata=draft.tweet_metadata,
            video_metadata=draft.video_metadata,
            tags=draft.tags,
            user_id=user_id,
        )
        content.updated_at = content.created_at
        await self._validate(user_id, content)

        collection = db_manager.get_collection(self.collection_name)
        start_time = db_manager.log_query_start(self.collection_name, "insert_one")
        try:
            await collection.insert_one(content.to_document())
        except Exception as e:
            db_manager.log_query_error(self.collection_name, "insert_one", start_time, e)
            raise
        db_manager.log_query_success(self.collection_name, "insert_one", start_time)

        logger.info(f"Created {content.type.value} content {content.id} for user {user_id}")
        return content

    async def get_content(self, user_id: str, content_id: str) -> Content:
        collection = db_manager.get_collection(self.collection_name)
        document = await collection.find_one({"_id": content_id, "userId": user_id})
        if not document:
            raise NotFound("Content not found")
        return Content(**document)

    async def update_content(self, user_id: str, content_id: str, patch: ContentUpdate) -> Content:
        """
        Replace the fields present in `patch` and bump `updatedAt`.

        The merged document is validated with the same rules as a new item; `_id`, `userId` and
        `createdAt` are never changed.

        Raises:
            NotFound: If the user owns no content with this id.
            ValidationError: If the merged document is invalid.
        """
        existing = await self.get_content(user_id, content_id)

        changes: Dict[str, Any] = patch.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_PATCH_FIELDS:
            if field in changes and changes[field] is None:
                del changes[field]
        if "title" in changes:
            changes["title"] = (changes["title"] or "").strip()
        if changes.get("link"):
            changes["link"] = changes["link"].strip()
        # Nested blocks come back as dicts from model_dump
        if changes.get("tweet_metadata") is not None:
            changes["tweet_metadata"] = patch.tweet_metadata
        if changes.get("video_metadata") is not None:
            changes["video_metadata"] = patch.video_metadata

        merged = existing.model_copy(update={**changes, "updated_at": utc_now()})
        await self._validate(user_id, merged)

        collection = db_manager.get_collection(self.collection_name)
        result = await collection.replace_one({"_id": content_id, "userId": user_id}, merged.to_document())
        if result.matched_count == 0:
            # Deleted between the read and the write
            raise NotFound("Content not found")

        logger.info(f"Updated content {content_id} for user {user_id} (fields: {sorted(changes)})")
        return merged

    async def delete_content(self, user_id: str, content_id: str) -> None:
        collection = db_manager.get_collection(self.collection_name)
        result = await collection.delete_one({"_id": content_id, "userId": user_id})
        if result.deleted_count == 0:
            raise NotFound("Content not found")
        logger.info(f"Deleted content {content_id} for user {user_id}")


content_service = ContentService()
