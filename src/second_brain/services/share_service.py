"""
# Share Service

Publishes a read-only view of a user's collection behind an opaque token.

## Behavior

- `create_link`: idempotent per user. If the user already has an active link it is returned,
  otherwise a new `secrets.token_urlsafe(16)` token is minted.
- `resolve`: maps a token to `{username, contents}`. Unknown, revoked and expired tokens are all
  reported as `NotFound` so a caller cannot tell them apart. `userId` is stripped from every
  content item in the snapshot.
- `revoke`: marks the user's active links revoked.

Links expire after `settings.SHARE_LINK_EXPIRE_DAYS` days; `0` disables expiry.
"""

import secrets
from datetime import timedelta
from typing import Optional

from pymongo.errors import DuplicateKeyError

from second_brain.config import settings
from second_brain.database import db_manager
from second_brain.exceptions import NotFound
from second_brain.managers.logging_manager import get_logger
from second_brain.models.content_models import utc_now
from second_brain.models.share_models import SharedBrain, ShareLink
from second_brain.services.content_service import content_service

logger = get_logger(prefix="[Share Service]")

TOKEN_BYTES = 16
MINT_ATTEMPTS = 3


class ShareService:
    def __init__(self):
        self.collection_name = settings.SHARE_LINKS_COLLECTION

    async def get_active_link(self, user_id: str) -> Optional[ShareLink]:
        collection = db_manager.get_collection(self.collection_name)
        cursor = collection.find({"userId": user_id, "revoked": False}).sort("createdAt", -1)
        for document in await cursor.to_list(length=None):
            link = ShareLink(**document)
            if link.is_active():
                return link
        return None

    async def create_link(self, user_id: str) -> ShareLink:
        """Return the user's active share link, minting one if needed."""
        existing = await self.get_active_link(user_id)
        if existing:
            logger.debug("Reusing active share link for user %s", user_id)
            return existing

        expires_at = None
        if settings.SHARE_LINK_EXPIRE_DAYS > 0:
            expires_at = utc_now() + timedelta(days=settings.SHARE_LINK_EXPIRE_DAYS)

        collection = db_manager.get_collection(self.collection_name)
        for attempt in range(MINT_ATTEMPTS):
            link = ShareLink(hash=secrets.token_urlsafe(TOKEN_BYTES), user_id=user_id, expires_at=expires_at)
            try:
                await collection.insert_one(link.model_dump(by_alias=True))
            except DuplicateKeyError:
                logger.warning("Share token collision on attempt %d, minting a new one", attempt + 1)
                continue
            logger.info("Created share link for user %s", user_id)
            return link

        raise RuntimeError("Could not mint a unique share token")

    async def resolve(self, share_hash: str) -> SharedBrain:
        """
        Resolve a share token to the owner's username and a snapshot of their contents.

        Raises:
            NotFound: If the token is unknown, revoked or expired, or the owner no longer exists.
        """
        collection = db_manager.get_collection(self.collection_name)
        document = await collection.find_one({"hash": share_hash})
        link = ShareLink(**document) if document else None
        if link is None or not link.is_active():
            raise NotFound("Share link not found")

        users = db_manager.get_collection(settings.USERS_COLLECTION)
        owner = await users.find_one({"_id": link.user_id}, {"username": 1})
        if not owner:
            raise NotFound("Share link not found")

        contents = await content_service.list_contents(link.user_id)
        snapshot = [content.model_dump(mode="json", by_alias=True, exclude={"user_id"}) for content in contents]
        return SharedBrain(username=owner["username"], contents=snapshot)

    async def revoke(self, user_id: str) -> int:
        """
        Revoke every active share link of the user.

        Returns:
            int: Number of links revoked.

        Raises:
            NotFound: If the user has no active link.
        """
        collection = db_manager.get_collection(self.collection_name)
        result = await collection.update_many({"userId": user_id, "revoked": False}, {"$set": {"revoked": True}})
        if result.modified_count == 0:
            raise NotFound("Share link not found")
        logger.info("Revoked %d share link(s) for user %s", result.modified_count, user_id)
        return result.modified_count


share_service = ShareService()
