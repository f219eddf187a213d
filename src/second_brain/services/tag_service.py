"""
# Tag Service

User-scoped tag storage. Tags live in their own collection; content items hold tag ids.

- Titles are trimmed and must not be blank.
- Titles are unique per user, compared case-insensitively (`Conflict`, HTTP 409).
- Deleting a tag pulls its id out of every content item of the same user. The two writes are not
  atomic; a crash in between leaves dangling ids that the UI ignores.
"""

from typing import Iterable, List

from pymongo.errors import DuplicateKeyError

from second_brain.config import settings
from second_brain.database import db_manager
from second_brain.exceptions import Conflict, NotFound, ValidationError
from second_brain.managers.logging_manager import get_logger
from second_brain.models.tag_models import Tag

logger = get_logger(prefix="[Tag Service]")


class TagService:
    """CRUD for tags, always scoped to the owning user."""

    def __init__(self):
        self.collection_name = settings.TAGS_COLLECTION

    async def list_tags(self, user_id: str) -> List[Tag]:
        collection = db_manager.get_collection(self.collection_name)
        start_time = db_manager.log_query_start(self.collection_name, "find", {"userId": user_id})
        cursor = collection.find({"userId": user_id}).sort("createdAt", 1)
        documents = await cursor.to_list(length=None)
        db_manager.log_query_success(self.collection_name, "find", start_time, len(documents))
        return [Tag(**document) for document in documents]

    async def create_tag(self, user_id: str, title: str) -> Tag:
        """
        Create a tag for the user.

        Raises:
            ValidationError: If the title is blank.
            Conflict: If the user already has a tag with this title (any casing).
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")

        collection = db_manager.get_collection(self.collection_name)
        existing = await collection.find_one({"userId": user_id, "title_lower": title.lower()})
        if existing:
            raise Conflict("Tag already exists", status_code=409)

        tag = Tag(title=title, user_id=user_id)
        try:
            await collection.insert_one(tag.to_document())
        except DuplicateKeyError as e:
            # Lost a race against a concurrent create with the same title
            raise Conflict("Tag already exists", status_code=409) from e

        logger.info(f"Created tag {tag.id} for user {user_id}")
        return tag

    async def delete_tag(self, user_id: str, tag_id: str) -> None:
        """
        Delete a tag and detach it from the user's contents.

        Raises:
            NotFound: If the user owns no tag with this id.
        """
        collection = db_manager.get_collection(self.collection_name)
        result = await collection.delete_one({"_id": tag_id, "userId": user_id})
        if result.deleted_count == 0:
            raise NotFound("Tag not found")

        contents = db_manager.get_collection(settings.CONTENTS_COLLECTION)
        update = await contents.update_many({"userId": user_id, "tags": tag_id}, {"$pull": {"tags": tag_id}})
        logger.info(f"Deleted tag {tag_id} for user {user_id}, detached from {update.modified_count} contents")

    async def find_unknown_tag_ids(self, user_id: str, tag_ids: Iterable[str]) -> List[str]:
        """Return the ids in `tag_ids` that are not tags owned by the user, in input order."""
        tag_ids = list(tag_ids)
        if not tag_ids:
            return []

        collection = db_manager.get_collection(self.collection_name)
        cursor = collection.find({"userId": user_id, "_id": {"$in": tag_ids}}, {"_id": 1})
        known = {document["_id"] for document in await cursor.to_list(length=None)}
        return [tag_id for tag_id in tag_ids if tag_id not in known]


tag_service = TagService()
