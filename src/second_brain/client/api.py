"""
# Second Brain API Client

Async **httpx** client mirroring the REST surface. Signup and signin remember the returned token
and every later request carries it as `Authorization: Bearer <token>`.

Error responses are raised as the server-side taxonomy, using the server's `message`:

| Status | Raised |
|---|---|
| 400 | `ValidationError` |
| 401 | `Unauthorized` |
| 404 | `NotFound` |
| 409 | `Conflict` |
| 5xx on metadata lookups | `UpstreamFetchError` |
| anything else | `SecondBrainError` carrying the status |

Transport failures propagate as `httpx.HTTPError`.

## Usage

```python
async with SecondBrainAPI("http://localhost:5000/api") as api:
    await api.signin("ada", "lovelace")
    contents = await api.list_contents()
```

Pass `transport=httpx.ASGITransport(app=app)` to talk to an in-process application.
"""

from typing import Any, Dict, List, Optional

import httpx

from second_brain.exceptions import (
    Conflict,
    NotFound,
    SecondBrainError,
    Unauthorized,
    UpstreamFetchError,
    ValidationError,
)
from second_brain.managers.logging_manager import get_logger
from second_brain.models.content_models import ContentCreate, ContentUpdate

logger = get_logger(prefix="[API Client]")

DEFAULT_BASE_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT = 10.0

_STATUS_ERRORS = {
    400: ValidationError,
    401: Unauthorized,
    404: NotFound,
}


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("message") or body.get("detail")
    return None


def error_from_response(response: httpx.Response, upstream: bool = False) -> SecondBrainError:
    """Build the domain error matching an error response."""
    message = _error_message(response)
    status_code = response.status_code
    if status_code == 409:
        return Conflict(message, status_code=409)
    if status_code in _STATUS_ERRORS:
        return _STATUS_ERRORS[status_code](message)
    if upstream and status_code >= 500:
        return UpstreamFetchError(message)
    error = SecondBrainError(message)
    error.status_code = status_code
    return error


class SecondBrainAPI:
    """Thin async wrapper over the Second Brain REST API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            transport=transport,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "SecondBrainAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, upstream: bool = False, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self._client.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            error = error_from_response(response, upstream=upstream)
            logger.debug("%s %s failed with %d: %s", method, path, response.status_code, error.message)
            raise error
        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body (status %d)", method, path, response.status_code)
            raise SecondBrainError("Unexpected response from server") from e

    # Auth
    async def signup(self, username: str, password: str) -> Dict[str, Any]:
        data = await self._request("POST", "/auth/signup", json={"username": username, "password": password})
        self.token = data["token"]
        return data

    async def signin(self, username: str, password: str) -> Dict[str, Any]:
        data = await self._request("POST", "/auth/signin", json={"username": username, "password": password})
        self.token = data["token"]
        return data

    async def me(self) -> Dict[str, Any]:
        return await self._request("GET", "/auth/me")

    # Content
    async def list_contents(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/content")

    async def get_content(self, content_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/content/{content_id}")

    async def create_content(self, draft: ContentCreate) -> Dict[str, Any]:
        body = draft.model_dump(mode="json", by_alias=True, exclude_none=True)
        return await self._request("POST", "/content", json=body)

    async def update_content(self, content_id: str, patch: ContentUpdate) -> Dict[str, Any]:
        body = patch.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return await self._request("PUT", f"/content/{content_id}", json=body)

    async def delete_content(self, content_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/content/{content_id}")

    # Tags
    async def list_tags(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/tags")
        return data["tags"]

    async def create_tag(self, title: str) -> Dict[str, Any]:
        data = await self._request("POST", "/tags", json={"title": title})
        return data["tag"]

    async def delete_tag(self, tag_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/tags/{tag_id}")

    # Embed metadata
    async def get_tweet_metadata(self, url: str) -> Dict[str, Any]:
        return await self._request("GET", "/tweet-metadata", upstream=True, params={"url": url})

    async def get_video_metadata(self, url: str) -> Dict[str, Any]:
        return await self._request("GET", "/video-metadata", upstream=True, params={"url": url})

    # Share
    async def create_share_link(self) -> Dict[str, Any]:
        return await self._request("POST", "/share")

    async def revoke_share_link(self) -> Dict[str, Any]:
        return await self._request("DELETE", "/share")

    async def get_shared_content(self, share_hash: str) -> Dict[str, Any]:
        return await self._request("GET", f"/share/{share_hash}")
