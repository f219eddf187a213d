"""
Shared fixtures.

Settings are validated on import, so the required environment is set here before anything from
`second_brain` is imported.
"""

import os

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("SECRET_KEY", "pytest-signing-key-not-for-production")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

from second_brain.database import db_manager  # noqa: E402
from second_brain.services.metadata_resolver import MetadataResolver, get_metadata_resolver  # noqa: E402

TWEET_OEMBED = {
    "html": '<blockquote class="twitter-tweet"><p>Hello</p></blockquote>',
    "author_name": "Ada",
    "author_url": "https://twitter.com/ada",
    "provider_name": "Twitter",
    "provider_url": "https://twitter.com",
    "cache_age": "3153600000",
    "type": "rich",
}

VIDEO_OEMBED = {
    "html": '<iframe src="https://www.youtube.com/embed/abc"></iframe>',
    "title": "Analytical Engines",
    "author_name": "Ada",
    "author_url": "https://www.youtube.com/@ada",
    "provider_name": "YouTube",
    "provider_url": "https://www.youtube.com/",
    "thumbnail_url": "https://i.ytimg.com/vi/abc/hqdefault.jpg",
}


def oembed_handler(request: httpx.Request) -> httpx.Response:
    """Stand-in for both oEmbed providers. URLs containing "missing" fail like the real ones."""
    target = request.url.params.get("url", "")
    if request.url.host == "publish.twitter.com":
        if "missing" in target:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(200, json=TWEET_OEMBED)
    if request.url.host == "noembed.com":
        if "missing" in target:
            return httpx.Response(200, json={"error": "no matching providers found", "url": target})
        return httpx.Response(200, json=VIDEO_OEMBED)
    return httpx.Response(500)


@pytest_asyncio.fixture
async def db():
    """An in-memory Motor-compatible database installed on the global manager."""
    client = AsyncMongoMockClient()
    database = client["second_brain_test"]
    previous = db_manager.database
    db_manager.database = database
    await db_manager.create_indexes()
    yield database
    db_manager.database = previous


@pytest.fixture
def resolver():
    return MetadataResolver(transport=httpx.MockTransport(oembed_handler))


@pytest_asyncio.fixture
async def app(db, resolver):
    from second_brain.main import app as fastapi_app

    fastapi_app.dependency_overrides[get_metadata_resolver] = lambda: resolver
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


async def register(client: httpx.AsyncClient, username: str = "ada", password: str = "lovelace") -> dict:
    """Sign a user up and return the bearer header for them."""
    response = await client.post("/api/auth/signup", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest_asyncio.fixture
async def auth_headers(client):
    return await register(client)


@pytest.fixture
def register_user(client):
    """Factory fixture: `headers = await register_user("grace")`."""

    async def _register(username: str = "ada", password: str = "lovelace") -> dict:
        return await register(client, username, password)

    return _register
