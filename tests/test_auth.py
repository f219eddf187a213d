"""Tests for signup, signin and token verification."""

from datetime import timedelta

import pytest
from jose import jwt

from second_brain.config import settings
from second_brain.exceptions import Conflict, Unauthorized, ValidationError
from second_brain.models.content_models import utc_now
from second_brain.routes.auth import services


@pytest.mark.asyncio
async def test_password_minimum_length(db):
    with pytest.raises(ValidationError, match="at least 6 characters"):
        await services.signup("ada", "12345")

    result = await services.signup("ada", "123456")
    assert result.user.username == "ada"
    assert result.token


@pytest.mark.asyncio
@pytest.mark.parametrize("username, password", [("", "secret1"), ("ada", ""), ("   ", "secret1")])
async def test_missing_credentials_are_rejected(db, username, password):
    with pytest.raises(ValidationError, match="required"):
        await services.signup(username, password)


@pytest.mark.asyncio
async def test_duplicate_username_is_conflict_400(db):
    await services.signup("ada", "lovelace")
    with pytest.raises(Conflict, match="Username already exists") as exc_info:
        await services.signup("ada", "another")
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_password_is_stored_hashed(db):
    result = await services.signup("ada", "lovelace")
    stored = await db["users"].find_one({"_id": result.user.id})
    assert "password" not in stored
    assert stored["hashed_password"] != "lovelace"
    assert services.verify_password("lovelace", stored["hashed_password"])


@pytest.mark.asyncio
async def test_signin_and_verify_round_trip(db):
    registered = await services.signup("ada", "lovelace")

    signed_in = await services.signin("ada", "lovelace")
    user = await services.verify(signed_in.token)

    assert user.id == registered.user.id
    assert user.username == "ada"


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_user_share_a_message(db):
    await services.signup("ada", "lovelace")

    with pytest.raises(Unauthorized) as wrong_password:
        await services.signin("ada", "babbage")
    with pytest.raises(Unauthorized) as unknown_user:
        await services.signin("grace", "lovelace")
    assert wrong_password.value.message == unknown_user.value.message == "Invalid credentials"


def test_token_payload_carries_only_the_user_id():
    token = services.create_access_token("user-1")
    payload = jwt.get_unverified_claims(token)

    assert set(payload) == {"userId", "iat", "exp"}
    assert payload["exp"] - payload["iat"] == settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 3600


@pytest.mark.asyncio
async def test_expired_and_forged_tokens_are_rejected(db):
    registered = await services.signup("ada", "lovelace")
    secret = settings.SECRET_KEY.get_secret_value()
    past = utc_now() - timedelta(days=1)

    expired = jwt.encode({"userId": registered.user.id, "exp": int(past.timestamp())}, secret, algorithm="HS256")
    forged = jwt.encode({"userId": registered.user.id}, "some-other-secret", algorithm="HS256")

    with pytest.raises(Unauthorized, match="expired"):
        await services.verify(expired)
    with pytest.raises(Unauthorized):
        await services.verify(forged)
    with pytest.raises(Unauthorized):
        await services.verify("not-a-jwt")


@pytest.mark.asyncio
async def test_token_for_deleted_user_is_rejected(db):
    registered = await services.signup("ada", "lovelace")
    await db["users"].delete_one({"_id": registered.user.id})

    with pytest.raises(Unauthorized):
        await services.verify(registered.token)


@pytest.mark.asyncio
@pytest.mark.parametrize("password", ["x" * 80, "\U0001F600" * 20])
async def test_passwords_longer_than_72_bytes_are_accepted(db, password):
    assert len(password.encode("utf-8")) > 72

    registered = await services.signup("longpw", password)
    signed_in = await services.signin("longpw", password)

    assert signed_in.user.id == registered.user.id


@pytest.mark.asyncio
async def test_long_passwords_differing_after_72_bytes_are_distinct(db):
    await services.signup("ada", "x" * 72 + "a")

    with pytest.raises(Unauthorized):
        await services.signin("ada", "x" * 72 + "b")


@pytest.mark.asyncio
async def test_long_password_signup_over_http(client):
    response = await client.post("/api/auth/signup", json={"username": "longpw", "password": "x" * 80})
    assert response.status_code == 201

    response = await client.post("/api/auth/signin", json={"username": "longpw", "password": "x" * 80})
    assert response.status_code == 200
