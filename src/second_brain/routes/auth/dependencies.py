"""
# Authentication Dependencies

FastAPI dependencies that turn the `Authorization: Bearer <token>` header into the current user.

```python
@router.get("/content")
async def list_contents(current_user: UserOut = Depends(get_current_user_dep)):
    ...
```

A missing header, a bad or expired token, and a token for a deleted user all raise
`Unauthorized`, which the application answers with 401 `{"message": ...}`.

Attributes:
    oauth2_scheme (OAuth2PasswordBearer): Extracts the bearer token without failing on its own.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from second_brain.exceptions import Unauthorized
from second_brain.managers.logging_manager import get_logger
from second_brain.routes.auth import services
from second_brain.routes.auth.models import UserOut

logger = get_logger(prefix="[Security Dependencies]")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/signin", auto_error=False)


async def get_current_user_dep(token: Optional[str] = Depends(oauth2_scheme)) -> UserOut:
    """Return the authenticated user or raise `Unauthorized`."""
    if not token:
        raise Unauthorized("No token provided")
    user = await services.verify(token)
    logger.debug(f"Authenticated request for user {user.id}")
    return user
