"""Tests for share link minting, resolution and revocation."""

from datetime import timedelta
from unittest.mock import patch

import pytest
import pytest_asyncio

from second_brain.exceptions import NotFound
from second_brain.models.content_models import ContentCreate, utc_now
from second_brain.services.content_service import content_service
from second_brain.services.share_service import share_service

USER = "user-1"
OTHER = "user-2"


@pytest_asyncio.fixture
async def users(db):
    await db["users"].insert_many(
        [
            {"_id": USER, "username": "ada", "hashed_password": "x"},
            {"_id": OTHER, "username": "grace", "hashed_password": "y"},
        ]
    )


@pytest.mark.asyncio
async def test_create_link_is_idempotent_per_user(db, users):
    first = await share_service.create_link(USER)
    again = await share_service.create_link(USER)
    other = await share_service.create_link(OTHER)

    assert first.hash == again.hash
    assert other.hash != first.hash
    assert len(first.hash) >= 16
    assert first.expires_at is None


@pytest.mark.asyncio
async def test_resolve_returns_owner_snapshot_without_user_ids(db, users):
    await content_service.create_content(USER, ContentCreate(title="public note"))
    await content_service.create_content(OTHER, ContentCreate(title="somebody else"))
    link = await share_service.create_link(USER)

    shared = await share_service.resolve(link.hash)

    assert shared.username == "ada"
    assert [item["title"] for item in shared.contents] == ["public note"]
    assert all("userId" not in item for item in shared.contents)


@pytest.mark.asyncio
async def test_unknown_hash_is_not_found(db, users):
    with pytest.raises(NotFound):
        await share_service.resolve("no-such-hash")


@pytest.mark.asyncio
async def test_revoke_invalidates_link_and_next_create_mints_new_one(db, users):
    link = await share_service.create_link(USER)

    assert await share_service.revoke(USER) == 1
    with pytest.raises(NotFound):
        await share_service.resolve(link.hash)
    with pytest.raises(NotFound):
        await share_service.revoke(USER)

    fresh = await share_service.create_link(USER)
    assert fresh.hash != link.hash


@pytest.mark.asyncio
async def test_expired_link_is_not_found(db, users):
    with patch("second_brain.services.share_service.settings") as mock_settings:
        mock_settings.SHARE_LINK_EXPIRE_DAYS = 1
        link = await share_service.create_link(USER)

    assert link.expires_at is not None
    assert link.is_active()
    assert not link.is_active(now=utc_now() + timedelta(days=2))

    await db["share_links"].update_one({"hash": link.hash}, {"$set": {"expiresAt": utc_now() - timedelta(seconds=1)}})
    with pytest.raises(NotFound):
        await share_service.resolve(link.hash)
