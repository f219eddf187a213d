"""
# Share Routes

- `POST /share` - return the caller's active share token, minting one if needed
- `DELETE /share` - revoke the caller's share token
- `GET /share/{hash}` - public, read-only `{username, contents}` view

Attributes:
    router (APIRouter): FastAPI router with `/share` prefix
"""

from fastapi import APIRouter, Depends, status

from second_brain.models.share_models import SharedBrain, ShareLinkResponse
from second_brain.routes.auth.dependencies import get_current_user_dep
from second_brain.routes.auth.models import UserOut
from second_brain.services.share_service import share_service

router = APIRouter(prefix="/share", tags=["Share"])


@router.post("", response_model=ShareLinkResponse, status_code=status.HTTP_201_CREATED)
async def create_share_link(current_user: UserOut = Depends(get_current_user_dep)):
    link = await share_service.create_link(current_user.id)
    return ShareLinkResponse(hash=link.hash, created_at=link.created_at, expires_at=link.expires_at)


@router.delete("")
async def revoke_share_link(current_user: UserOut = Depends(get_current_user_dep)):
    revoked = await share_service.revoke(current_user.id)
    return {"message": "Share link revoked", "revoked": revoked}


@router.get("/{share_hash}", response_model=SharedBrain)
async def get_shared_content(share_hash: str):
    """Resolve a share token. No authentication required."""
    return await share_service.resolve(share_hash)
