"""
# Tag Routes

- `GET /tags` - `{"tags": [...]}` for the caller
- `POST /tags` - `{"title": "..."}`; 201 `{"message": "Tag created", "tag": {...}}`
- `DELETE /tags/{id}` - remove the tag and detach it from the caller's content

Attributes:
    router (APIRouter): FastAPI router with `/tags` prefix
"""

from fastapi import APIRouter, Depends, status

from second_brain.models.tag_models import TagCreate, TagCreated, TagList
from second_brain.routes.auth.dependencies import get_current_user_dep
from second_brain.routes.auth.models import UserOut
from second_brain.services.tag_service import tag_service

router = APIRouter(prefix="/tags", tags=["Tags"])


@router.get("", response_model=TagList)
async def list_tags(current_user: UserOut = Depends(get_current_user_dep)):
    return TagList(tags=await tag_service.list_tags(current_user.id))


@router.post("", response_model=TagCreated, status_code=status.HTTP_201_CREATED)
async def create_tag(request: TagCreate, current_user: UserOut = Depends(get_current_user_dep)):
    tag = await tag_service.create_tag(current_user.id, request.title)
    return TagCreated(tag=tag)


@router.delete("/{tag_id}")
async def delete_tag(tag_id: str, current_user: UserOut = Depends(get_current_user_dep)):
    await tag_service.delete_tag(current_user.id, tag_id)
    return {"message": "Tag deleted"}
