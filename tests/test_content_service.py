"""Tests for content persistence and validation against an in-memory database."""

import pytest

from second_brain.exceptions import NotFound, ValidationError
from second_brain.models.content_models import ContentCreate, ContentType, ContentUpdate, TweetMetadata
from second_brain.services.content_service import content_service
from second_brain.services.tag_service import tag_service

USER = "user-1"
OTHER = "user-2"


@pytest.mark.asyncio
async def test_create_assigns_id_timestamps_and_trims(db):
    content = await content_service.create_content(USER, ContentCreate(title="  Reading list  "))

    assert content.id
    assert content.title == "Reading list"
    assert content.type == ContentType.TEXT
    assert content.created_at == content.updated_at
    stored = await db["contents"].find_one({"_id": content.id})
    assert stored["userId"] == USER
    assert stored["type"] == "text"


@pytest.mark.asyncio
async def test_list_is_scoped_and_in_creation_order(db):
    first = await content_service.create_content(USER, ContentCreate(title="first"))
    await content_service.create_content(OTHER, ContentCreate(title="not mine"))
    second = await content_service.create_content(USER, ContentCreate(title="second"))

    contents = await content_service.list_contents(USER)
    assert [c.id for c in contents] == [first.id, second.id]


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", "   "])
async def test_blank_title_is_rejected(db, title):
    with pytest.raises(ValidationError, match="Title is required"):
        await content_service.create_content(USER, ContentCreate(title=title))


@pytest.mark.asyncio
@pytest.mark.parametrize("content_type", ["link", "tweet", "video"])
async def test_link_like_types_require_a_link(db, content_type):
    with pytest.raises(ValidationError, match="Link is required"):
        await content_service.create_content(USER, ContentCreate(title="x", type=content_type))


@pytest.mark.asyncio
async def test_metadata_must_match_type(db):
    tweet_metadata = TweetMetadata(html="<blockquote/>")
    with pytest.raises(ValidationError, match="Tweet metadata"):
        await content_service.create_content(
            USER, ContentCreate(title="x", type="link", link="https://a.b", tweetMetadata=tweet_metadata)
        )

    created = await content_service.create_content(
        USER, ContentCreate(title="x", type="tweet", link="https://a.b", tweetMetadata=tweet_metadata)
    )
    assert created.tweet_metadata.html == "<blockquote/>"
    assert created.video_metadata is None


@pytest.mark.asyncio
async def test_tags_must_belong_to_the_user(db):
    mine = await tag_service.create_tag(USER, "ideas")
    theirs = await tag_service.create_tag(OTHER, "ideas")

    created = await content_service.create_content(USER, ContentCreate(title="x", tags=[mine.id, mine.id]))
    assert created.tags == [mine.id]

    with pytest.raises(ValidationError) as exc_info:
        await content_service.create_content(USER, ContentCreate(title="x", tags=[mine.id, theirs.id]))
    assert exc_info.value.details == {"tags": [theirs.id]}


@pytest.mark.asyncio
async def test_get_hides_other_users_content(db):
    content = await content_service.create_content(USER, ContentCreate(title="private"))

    assert (await content_service.get_content(USER, content.id)).title == "private"
    with pytest.raises(NotFound):
        await content_service.get_content(OTHER, content.id)


@pytest.mark.asyncio
async def test_update_replaces_only_provided_fields(db):
    content = await content_service.create_content(USER, ContentCreate(title="draft", body="keep me"))
    stored = await content_service.get_content(USER, content.id)

    updated = await content_service.update_content(USER, content.id, ContentUpdate(title="final"))

    assert updated.title == "final"
    assert updated.body == "keep me"
    assert updated.id == content.id
    assert updated.created_at == stored.created_at
    assert updated.updated_at >= content.updated_at
    assert (await content_service.get_content(USER, content.id)).title == "final"


@pytest.mark.asyncio
async def test_update_revalidates_merged_document(db):
    content = await content_service.create_content(USER, ContentCreate(title="note"))

    with pytest.raises(ValidationError, match="Link is required"):
        await content_service.update_content(USER, content.id, ContentUpdate(type="video"))
    assert (await content_service.get_content(USER, content.id)).type == ContentType.TEXT


@pytest.mark.asyncio
async def test_update_unknown_id_is_not_found(db):
    with pytest.raises(NotFound):
        await content_service.update_content(USER, "missing", ContentUpdate(title="x"))


@pytest.mark.asyncio
async def test_delete_removes_exactly_one(db):
    keep = await content_service.create_content(USER, ContentCreate(title="keep"))
    drop = await content_service.create_content(USER, ContentCreate(title="drop"))

    await content_service.delete_content(USER, drop.id)

    assert [c.id for c in await content_service.list_contents(USER)] == [keep.id]


@pytest.mark.asyncio
async def test_delete_unknown_or_foreign_id_is_not_found(db):
    content = await content_service.create_content(USER, ContentCreate(title="mine"))

    with pytest.raises(NotFound, match="Content not found"):
        await content_service.delete_content(USER, "missing")
    with pytest.raises(NotFound):
        await content_service.delete_content(OTHER, content.id)
    assert len(await content_service.list_contents(USER)) == 1
