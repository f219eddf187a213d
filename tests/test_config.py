"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from second_brain.config import Settings

VALID = {"MONGODB_URL": "mongodb://localhost:27017", "SECRET_KEY": "a-real-signing-key"}


def make_settings(**overrides):
    return Settings(_env_file=None, **{**VALID, **overrides})


def test_defaults():
    settings = make_settings()
    assert settings.API_PREFIX == "/api"
    assert settings.ACCESS_TOKEN_EXPIRE_DAYS == 7
    assert settings.PASSWORD_MIN_LENGTH == 6
    assert settings.SHARE_LINK_EXPIRE_DAYS == 0
    assert settings.TWEET_OEMBED_URL == "https://publish.twitter.com/oembed"
    assert settings.VIDEO_OEMBED_URL == "https://noembed.com/embed"


@pytest.mark.parametrize("secret", ["", "   ", "change-me", "00000000"])
def test_placeholder_secret_is_rejected(secret):
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        make_settings(SECRET_KEY=secret)


def test_empty_mongodb_url_is_rejected():
    with pytest.raises(ValidationError, match="MONGODB_URL"):
        make_settings(MONGODB_URL=" ")


@pytest.mark.parametrize(
    "field, value",
    [("ACCESS_TOKEN_EXPIRE_DAYS", 0), ("PASSWORD_MIN_LENGTH", -1), ("SHARE_LINK_EXPIRE_DAYS", -1), ("METADATA_FETCH_TIMEOUT", 0)],
)
def test_numeric_bounds(field, value):
    with pytest.raises(ValidationError):
        make_settings(**{field: value})


def test_cors_origins_list_strips_and_drops_empty_entries():
    settings = make_settings(CORS_ORIGINS=" http://a.test , ,http://b.test")
    assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
