"""
# Share Models

A share link is an opaque, URL-safe token bound to one user. Anyone holding the token can read a
snapshot of that user's contents until the link is revoked or expires.

## Usage Examples

```python
link = ShareLink(hash=secrets.token_urlsafe(16), user_id=user_id)
link.is_active()          # True until revoked or past expires_at
```
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from second_brain.models.content_models import utc_now


class ShareLink(BaseModel):
    """A stored share link.

    Attributes:
        id (str): UUID4 string, serialized as `_id`.
        hash (str): The public token.
        user_id (str): Owner whose contents the token exposes.
        created_at (datetime): Creation time (UTC).
        expires_at (Optional[datetime]): `None` means the link never expires.
        revoked (bool): Set once the owner revokes the link.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()), alias="_id")
    hash: str
    user_id: str = Field(..., alias="userId")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    expires_at: Optional[datetime] = Field(None, alias="expiresAt")
    revoked: bool = False

    def is_active(self, now: Optional[datetime] = None) -> bool:
        if self.revoked:
            return False
        if self.expires_at is None:
            return True
        now = now or utc_now()
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            # Some drivers hand datetimes back naive; they are stored as UTC
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at > now


class ShareLinkResponse(BaseModel):
    """Body returned by `POST /share`."""

    model_config = ConfigDict(populate_by_name=True)

    hash: str
    created_at: datetime = Field(..., alias="createdAt")
    expires_at: Optional[datetime] = Field(None, alias="expiresAt")


class SharedBrain(BaseModel):
    """Public read-only view resolved from a share token."""

    username: str
    contents: List[Dict[str, Any]]
