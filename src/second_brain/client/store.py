"""
# Client Content Store

An explicit, immutable state container for a signed-in session: the fetched collection, the
user's tags, the active filters and the derived `filtered_contents` view.

State only changes through `reduce(state, action)`, a pure function returning a new
`ContentState`. Every transition that touches the collection or the filters re-derives
`filtered_contents` from `(contents, filters)`, so the view can never drift from its inputs.

## Usage

```python
state = ContentState()
state = reduce(state, Action(type=ActionType.FETCH_SUCCESS, payload=contents))
state = reduce(state, Action(type=ActionType.FILTER_BY_TYPE, payload="link"))
state.filtered_contents   # only link items
```

## Actions

| Action | Payload | Effect |
|---|---|---|
| `FETCH_START` | none | loading on, error cleared |
| `FETCH_SUCCESS` | list of items | replaces the collection |
| `FETCH_TAGS_SUCCESS` | list of tags | replaces the tags |
| `FETCH_FAILURE` | message | loading off, error recorded, collection kept |
| `ADD_CONTENT_SUCCESS` | item | prepends the item |
| `DELETE_CONTENT_SUCCESS` | id | removes the item with that id |
| `ADD_TAG_SUCCESS` | tag | appends the tag |
| `FILTER_BY_TYPE` | type or `None` | sets the type filter |
| `FILTER_BY_TAGS` | id or iterable of ids | sets the tag filter |
| `SEARCH_CONTENTS` | query | sets the search query |
| `APPLY_FILTERS` | none | re-derives the view |
| `CLEAR_FILTERS` | none | neutral filters, full collection visible |
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from second_brain.client.filters import ContentItem, apply_filters


class ActiveFilters(BaseModel):
    """The filter selection. All-default means neutral: every item is visible."""

    model_config = ConfigDict(frozen=True)

    content_type: Optional[str] = None
    tag_ids: FrozenSet[str] = frozenset()
    search_query: str = ""

    @property
    def is_neutral(self) -> bool:
        return not self.content_type and not self.tag_ids and not self.search_query


class ContentState(BaseModel):
    """Snapshot of the client-side mirror.

    Attributes:
        contents (Tuple[ContentItem, ...]): The full collection, newest additions first.
        filtered_contents (Tuple[ContentItem, ...]): `contents` narrowed by `filters`.
        tags (Tuple[Dict[str, Any], ...]): The user's tags as returned by the API.
        filters (ActiveFilters): Current filter selection.
        is_loading (bool): A collection fetch is in flight.
        error (Optional[str]): Message of the last failed fetch.
    """

    model_config = ConfigDict(frozen=True)

    contents: Tuple[ContentItem, ...] = ()
    filtered_contents: Tuple[ContentItem, ...] = ()
    tags: Tuple[Dict[str, Any], ...] = ()
    filters: ActiveFilters = Field(default_factory=ActiveFilters)
    is_loading: bool = False
    error: Optional[str] = None


class ActionType(str, Enum):
    FETCH_START = "FETCH_START"
    FETCH_SUCCESS = "FETCH_SUCCESS"
    FETCH_TAGS_SUCCESS = "FETCH_TAGS_SUCCESS"
    FETCH_FAILURE = "FETCH_FAILURE"
    ADD_CONTENT_SUCCESS = "ADD_CONTENT_SUCCESS"
    DELETE_CONTENT_SUCCESS = "DELETE_CONTENT_SUCCESS"
    ADD_TAG_SUCCESS = "ADD_TAG_SUCCESS"
    FILTER_BY_TYPE = "FILTER_BY_TYPE"
    FILTER_BY_TAGS = "FILTER_BY_TAGS"
    SEARCH_CONTENTS = "SEARCH_CONTENTS"
    APPLY_FILTERS = "APPLY_FILTERS"
    CLEAR_FILTERS = "CLEAR_FILTERS"


class Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: ActionType
    payload: Any = None


def _derive(state: ContentState, **changes: Any) -> ContentState:
    """Apply `changes` and recompute the filtered view from the resulting collection and filters."""
    contents = changes.get("contents", state.contents)
    filters: ActiveFilters = changes.get("filters", state.filters)
    changes["filtered_contents"] = tuple(
        apply_filters(contents, filters.content_type, filters.tag_ids, filters.search_query)
    )
    return state.model_copy(update=changes)


def reduce(state: ContentState, action: Action) -> ContentState:
    """Return the state that results from applying `action` to `state`."""
    kind = action.type
    payload = action.payload

    if kind == ActionType.FETCH_START:
        return state.model_copy(update={"is_loading": True, "error": None})

    if kind == ActionType.FETCH_SUCCESS:
        return _derive(state, contents=tuple(payload or ()), is_loading=False, error=None)

    if kind == ActionType.FETCH_TAGS_SUCCESS:
        return state.model_copy(update={"tags": tuple(payload or ())})

    if kind == ActionType.FETCH_FAILURE:
        return state.model_copy(update={"is_loading": False, "error": payload})

    if kind == ActionType.ADD_CONTENT_SUCCESS:
        return _derive(state, contents=(payload,) + state.contents)

    if kind == ActionType.DELETE_CONTENT_SUCCESS:
        remaining = tuple(content for content in state.contents if content.get("_id") != payload)
        return _derive(state, contents=remaining)

    if kind == ActionType.ADD_TAG_SUCCESS:
        return state.model_copy(update={"tags": state.tags + (payload,)})

    if kind == ActionType.FILTER_BY_TYPE:
        content_type = getattr(payload, "value", payload) or None
        return _derive(state, filters=state.filters.model_copy(update={"content_type": content_type}))

    if kind == ActionType.FILTER_BY_TAGS:
        # A bare string is one id, not a sequence of characters
        tag_ids = frozenset([payload] if isinstance(payload, str) else payload or ())
        return _derive(state, filters=state.filters.model_copy(update={"tag_ids": tag_ids}))

    if kind == ActionType.SEARCH_CONTENTS:
        return _derive(state, filters=state.filters.model_copy(update={"search_query": payload or ""}))

    if kind == ActionType.APPLY_FILTERS:
        return _derive(state)

    if kind == ActionType.CLEAR_FILTERS:
        return state.model_copy(update={"filters": ActiveFilters(), "filtered_contents": state.contents})

    raise ValueError(f"Unknown action type: {kind}")
