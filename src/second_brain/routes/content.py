"""
# Content Routes

This module provides the **REST API endpoints** for a user's knowledge items. All endpoints
require a bearer token and only ever see the caller's own items.

## API Endpoints

- `GET /content` - List the caller's items in creation order (bare JSON array)
- `POST /content` - Create an item (201)
- `GET /content/{id}` - Fetch one item
- `PUT /content/{id}` - Replace the provided fields
- `DELETE /content/{id}` - Remove an item, answers `{"message": "Content deleted"}`

## Usage Examples

```python
response = await client.post(
    "/api/content",
    json={"title": "Ship it", "type": "link", "link": "https://example.com", "tags": []},
    headers={"Authorization": f"Bearer {token}"},
)
content_id = response.json()["_id"]
```

Attributes:
    router (APIRouter): FastAPI router with `/content` prefix
"""

from typing import List

from fastapi import APIRouter, Depends, status

from second_brain.models.content_models import Content, ContentCreate, ContentUpdate, DeleteResponse
from second_brain.routes.auth.dependencies import get_current_user_dep
from second_brain.routes.auth.models import UserOut
from second_brain.services.content_service import content_service

router = APIRouter(prefix="/content", tags=["Content"])


@router.get("", response_model=List[Content])
async def list_contents(current_user: UserOut = Depends(get_current_user_dep)):
    """List all of the caller's content."""
    return await content_service.list_contents(current_user.id)


@router.post("", response_model=Content, status_code=status.HTTP_201_CREATED)
async def create_content(draft: ContentCreate, current_user: UserOut = Depends(get_current_user_dep)):
    """Create a content item."""
    return await content_service.create_content(current_user.id, draft)


@router.get("/{content_id}", response_model=Content)
async def get_content(content_id: str, current_user: UserOut = Depends(get_current_user_dep)):
    """Get a specific content item."""
    return await content_service.get_content(current_user.id, content_id)


@router.put("/{content_id}", response_model=Content)
async def update_content(
    content_id: str, patch: ContentUpdate, current_user: UserOut = Depends(get_current_user_dep)
):
    """Replace the fields present in the body."""
    return await content_service.update_content(current_user.id, content_id, patch)


@router.delete("/{content_id}", response_model=DeleteResponse)
async def delete_content(content_id: str, current_user: UserOut = Depends(get_current_user_dep)):
    """Delete a content item."""
    await content_service.delete_content(current_user.id, content_id)
    return DeleteResponse(message="Content deleted")
