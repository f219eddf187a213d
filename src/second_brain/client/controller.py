"""
# Content Controller

Owns a `ContentState` for one signed-in session and performs the side effects around it: it
talks to the API, dispatches actions through the pure reducer and records user-facing
notifications.

## Guarantees

- **Serialized dispatch**: transitions are applied one at a time under an `asyncio.Lock`.
- **Server first**: additions and deletions reach the local mirror only after the server
  confirmed them. A failed mutation records an error notification and leaves the state as it was.
- **Non-fatal metadata**: when adding a tweet or video, embed metadata is looked up first; if
  the lookup fails the item is created without it.

## Usage

```python
async with SecondBrainAPI(base_url) as api:
    await api.signin("ada", "lovelace")
    controller = ContentController(api)
    await controller.load()
    await controller.filter_by_type("link")
    controller.state.filtered_contents
```
"""

import asyncio
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

import httpx
from pydantic import BaseModel

from second_brain.client.api import SecondBrainAPI
from second_brain.client.store import Action, ActionType, ContentState, reduce
from second_brain.exceptions import SecondBrainError, ValidationError
from second_brain.managers.logging_manager import get_logger
from second_brain.models.content_models import (
    LINK_REQUIRED_TYPES,
    UI_CONTENT_TYPES,
    ContentCreate,
    ContentType,
    TweetMetadata,
    VideoMetadata,
)

logger = get_logger(prefix="[Content Controller]")


class Notification(BaseModel):
    """A transient message for the user (the UI renders these as toasts)."""

    level: Literal["success", "error"]
    message: str


def validate_draft(draft: ContentCreate) -> Dict[str, str]:
    """
    Check a draft before it is submitted, as the add-content form does.

    Only the types in `UI_CONTENT_TYPES` can be added from the client; link-like types need a link.

    Returns:
        Dict[str, str]: Field name to error message; empty when the draft is valid.
    """
    errors = {}
    if not (draft.title or "").strip():
        errors["title"] = "Title is required"
    content_type = ContentType(draft.type)
    if content_type not in UI_CONTENT_TYPES:
        errors["type"] = f"Content type {content_type.value} cannot be added here"
    if content_type in LINK_REQUIRED_TYPES and not (draft.link or "").strip():
        errors["link"] = "Link is required"
    return errors


def _failure_message(error: Exception, default: str) -> str:
    if isinstance(error, SecondBrainError) and error.message:
        return error.message
    return default


class ContentController:
    """Session-scoped owner of the client content state."""

    def __init__(self, api: SecondBrainAPI, state: Optional[ContentState] = None):
        self.api = api
        self._state = state or ContentState()
        self._lock = asyncio.Lock()
        self.notifications: List[Notification] = []

    @property
    def state(self) -> ContentState:
        return self._state

    async def dispatch(self, action: Action) -> ContentState:
        async with self._lock:
            self._state = reduce(self._state, action)
            return self._state

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))

    def drain_notifications(self) -> List[Notification]:
        """Return and forget the pending notifications."""
        pending, self.notifications = self.notifications, []
        return pending

    # Fetching
    async def load(self) -> None:
        """Fetch contents and tags, as done right after signing in."""
        await self.fetch_contents()
        await self.fetch_tags()

    async def fetch_contents(self) -> None:
        await self.dispatch(Action(type=ActionType.FETCH_START))
        try:
            contents = await self.api.list_contents()
        except (SecondBrainError, httpx.HTTPError) as e:
            message = _failure_message(e, "Failed to fetch contents")
            logger.warning("Fetching contents failed: %s", e)
            await self.dispatch(Action(type=ActionType.FETCH_FAILURE, payload=message))
            self.notify("error", message)
            return
        await self.dispatch(Action(type=ActionType.FETCH_SUCCESS, payload=contents))

    async def fetch_tags(self) -> None:
        try:
            tags = await self.api.list_tags()
        except (SecondBrainError, httpx.HTTPError) as e:
            logger.warning("Fetching tags failed: %s", e)
            self.notify("error", "Failed to fetch tags")
            return
        await self.dispatch(Action(type=ActionType.FETCH_TAGS_SUCCESS, payload=tags))

    # Mutations
    async def _lookup_metadata(self, draft: ContentCreate) -> ContentCreate:
        content_type = ContentType(draft.type)
        if not draft.link or content_type not in (ContentType.TWEET, ContentType.VIDEO):
            return draft

        try:
            if content_type == ContentType.TWEET:
                metadata = TweetMetadata(**await self.api.get_tweet_metadata(draft.link))
                return draft.model_copy(update={"tweet_metadata": metadata})
            metadata = VideoMetadata(**await self.api.get_video_metadata(draft.link))
            return draft.model_copy(update={"video_metadata": metadata})
        except (SecondBrainError, httpx.HTTPError) as e:
            logger.warning("Failed to fetch %s metadata for %s, saving without it: %s", content_type.value, draft.link, e)
            return draft

    async def add_content(self, draft: ContentCreate) -> Optional[Dict[str, Any]]:
        """
        Create an item on the server and prepend it to the mirror.

        Returns:
            The created item, or `None` if the server rejected it (an error notification is
            recorded in that case).

        Raises:
            ValidationError: If the draft fails client-side checks; `details` maps field names to
                messages. Nothing is sent to the server.
        """
        errors = validate_draft(draft)
        if errors:
            raise ValidationError("Invalid content", details=errors)

        draft = await self._lookup_metadata(draft)
        try:
            created = await self.api.create_content(draft)
        except (SecondBrainError, httpx.HTTPError) as e:
            logger.warning("Adding content failed: %s", e)
            self.notify("error", _failure_message(e, "Failed to add content"))
            return None

        await self.dispatch(Action(type=ActionType.ADD_CONTENT_SUCCESS, payload=created))
        self.notify("success", "Content added successfully")
        return created

    async def delete_content(self, content_id: str) -> bool:
        """Delete an item on the server, then drop it from the mirror. Returns `True` on success."""
        try:
            await self.api.delete_content(content_id)
        except (SecondBrainError, httpx.HTTPError) as e:
            logger.warning("Deleting content %s failed: %s", content_id, e)
            self.notify("error", _failure_message(e, "Failed to delete content"))
            return False

        await self.dispatch(Action(type=ActionType.DELETE_CONTENT_SUCCESS, payload=content_id))
        self.notify("success", "Content deleted successfully")
        return True

    async def add_tag(self, title: str) -> Optional[Dict[str, Any]]:
        try:
            tag = await self.api.create_tag(title)
        except (SecondBrainError, httpx.HTTPError) as e:
            logger.warning("Creating tag %r failed: %s", title, e)
            self.notify("error", _failure_message(e, "Failed to create tag"))
            return None

        await self.dispatch(Action(type=ActionType.ADD_TAG_SUCCESS, payload=tag))
        self.notify("success", "Tag created successfully")
        return tag

    # Filters
    async def filter_by_type(self, content_type: Optional[str]) -> ContentState:
        return await self.dispatch(Action(type=ActionType.FILTER_BY_TYPE, payload=content_type))

    async def filter_by_tags(self, tag_ids: Union[str, Iterable[str]]) -> ContentState:
        payload = [tag_ids] if isinstance(tag_ids, str) else list(tag_ids)
        return await self.dispatch(Action(type=ActionType.FILTER_BY_TAGS, payload=payload))

    async def search(self, query: str) -> ContentState:
        return await self.dispatch(Action(type=ActionType.SEARCH_CONTENTS, payload=query))

    async def clear_filters(self) -> ContentState:
        return await self.dispatch(Action(type=ActionType.CLEAR_FILTERS))
