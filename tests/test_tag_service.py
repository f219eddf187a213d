"""Tests for user-scoped tag storage."""

import pytest

from second_brain.exceptions import Conflict, NotFound, ValidationError
from second_brain.models.content_models import ContentCreate
from second_brain.services.content_service import content_service
from second_brain.services.tag_service import tag_service

USER = "user-1"
OTHER = "user-2"


@pytest.mark.asyncio
async def test_create_and_list(db):
    ideas = await tag_service.create_tag(USER, "  Ideas ")
    reading = await tag_service.create_tag(USER, "reading")
    await tag_service.create_tag(OTHER, "elsewhere")

    tags = await tag_service.list_tags(USER)
    assert [tag.title for tag in tags] == ["Ideas", "reading"]
    assert [tag.id for tag in tags] == [ideas.id, reading.id]
    assert all(tag.user_id == USER for tag in tags)


@pytest.mark.asyncio
async def test_blank_title_is_rejected(db):
    with pytest.raises(ValidationError, match="Title is required"):
        await tag_service.create_tag(USER, "   ")


@pytest.mark.asyncio
async def test_titles_are_unique_per_user_ignoring_case(db):
    await tag_service.create_tag(USER, "Python")

    with pytest.raises(Conflict) as exc_info:
        await tag_service.create_tag(USER, "python")
    assert exc_info.value.status_code == 409

    # Same title for another user is fine
    await tag_service.create_tag(OTHER, "python")


@pytest.mark.asyncio
async def test_delete_detaches_tag_from_contents(db):
    keep = await tag_service.create_tag(USER, "keep")
    drop = await tag_service.create_tag(USER, "drop")
    content = await content_service.create_content(USER, ContentCreate(title="tagged", tags=[keep.id, drop.id]))

    await tag_service.delete_tag(USER, drop.id)

    assert [tag.id for tag in await tag_service.list_tags(USER)] == [keep.id]
    assert (await content_service.get_content(USER, content.id)).tags == [keep.id]


@pytest.mark.asyncio
async def test_delete_unknown_or_foreign_tag_is_not_found(db):
    theirs = await tag_service.create_tag(OTHER, "theirs")

    with pytest.raises(NotFound):
        await tag_service.delete_tag(USER, "missing")
    with pytest.raises(NotFound):
        await tag_service.delete_tag(USER, theirs.id)


@pytest.mark.asyncio
async def test_find_unknown_tag_ids_keeps_input_order(db):
    mine = await tag_service.create_tag(USER, "mine")

    assert await tag_service.find_unknown_tag_ids(USER, []) == []
    assert await tag_service.find_unknown_tag_ids(USER, ["b", mine.id, "a"]) == ["b", "a"]
