"""
# Authentication Models

Request and response bodies for the `/auth` endpoints, plus the stored user document.

## Wire Format

```json
POST /api/auth/signup   {"username": "ada", "password": "lovelace"}
201                     {"user": {"_id": "…", "username": "ada"}, "token": "<jwt>"}
```

Request fields default to empty strings so that missing credentials reach the auth service and
are reported with the same `{"message": ...}` body as every other validation failure.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from second_brain.models.content_models import utc_now


class SignupRequest(BaseModel):
    """Request body for creating an account."""

    model_config = ConfigDict(json_schema_extra={"example": {"username": "ada", "password": "lovelace"}})

    username: str = Field("", description="Unique username")
    password: str = Field("", description="Plain-text password, at least 6 characters")


class SigninRequest(BaseModel):
    """Request body for obtaining a token."""

    username: str = Field("", description="Registered username")
    password: str = Field("", description="Account password")


class UserInDB(BaseModel):
    """Stored user document. `hashed_password` never leaves the service layer."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()), alias="_id")
    username: str
    hashed_password: str
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")


class UserOut(BaseModel):
    """Public view of a user."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    username: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class AuthResponse(BaseModel):
    """Returned by signup and signin."""

    user: UserOut
    token: str
