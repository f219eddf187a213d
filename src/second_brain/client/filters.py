"""
# Filter/Search Engine

Pure functions that derive the visible subset of an already-fetched collection. Content items
are the JSON objects returned by `GET /api/content`.

Stages run in a fixed order and compose conjunctively:

1. **Type**: keep items whose `type` equals the selected type. Skipped when no type is selected.
2. **Tags**: keep items carrying at least one of the selected tag ids (OR within the stage).
   Skipped when no tag is selected.
3. **Search**: keep items whose title or body contains the query, compared case-insensitively.
   Skipped when the query is empty.

Consequences worth relying on:

- the result is always a subset of the input, in input order;
- with neutral filters the result equals the input;
- selecting more tags never hides an item that was already visible.

Items may carry tags either as bare ids or as expanded `{"_id": ..., "title": ...}` objects.
"""

from typing import Any, Dict, Iterable, List, Optional, Set

ContentItem = Dict[str, Any]


def tag_ids_of(content: ContentItem) -> Set[str]:
    """Collect the tag ids of an item, accepting bare ids and expanded tag objects."""
    ids = set()
    for tag in content.get("tags") or []:
        if isinstance(tag, dict):
            tag_id = tag.get("_id")
            if tag_id is not None:
                ids.add(str(tag_id))
        elif tag is not None:
            ids.add(str(tag))
    return ids


def filter_by_type(contents: Iterable[ContentItem], content_type: Optional[str]) -> List[ContentItem]:
    if not content_type:
        return list(contents)
    wanted = getattr(content_type, "value", content_type)
    return [content for content in contents if content.get("type") == wanted]


def filter_by_tags(contents: Iterable[ContentItem], tag_ids: Iterable[str]) -> List[ContentItem]:
    wanted = set(tag_ids)
    if not wanted:
        return list(contents)
    return [content for content in contents if tag_ids_of(content) & wanted]


def matches_query(content: ContentItem, query: str) -> bool:
    needle = query.casefold()
    title = content.get("title") or ""
    body = content.get("body") or ""
    return needle in title.casefold() or needle in body.casefold()


def filter_by_search(contents: Iterable[ContentItem], query: Optional[str]) -> List[ContentItem]:
    if not query:
        return list(contents)
    return [content for content in contents if matches_query(content, query)]


def apply_filters(
    contents: Iterable[ContentItem],
    content_type: Optional[str] = None,
    tag_ids: Iterable[str] = (),
    search_query: Optional[str] = "",
) -> List[ContentItem]:
    """Run the type, tag and search stages in order and return the surviving items."""
    filtered = filter_by_type(contents, content_type)
    filtered = filter_by_tags(filtered, tag_ids)
    return filter_by_search(filtered, search_query)
