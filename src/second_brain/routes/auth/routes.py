"""
# Authentication Routes

| Method & Path | Body | Success |
|---|---|---|
| `POST /auth/signup` | `{username, password}` | 201 `{user, token}` |
| `POST /auth/signin` | `{username, password}` | 200 `{user, token}` |
| `GET /auth/me` | bearer token | 200 user without password |

Attributes:
    router (APIRouter): FastAPI router with `/auth` prefix
"""

from fastapi import APIRouter, Depends, status

from second_brain.routes.auth import services
from second_brain.routes.auth.dependencies import get_current_user_dep
from second_brain.routes.auth.models import AuthResponse, SigninRequest, SignupRequest, UserOut

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest):
    """Create an account and return a token for it."""
    return await services.signup(request.username, request.password)


@router.post("/signin", response_model=AuthResponse)
async def signin(request: SigninRequest):
    """Exchange username and password for a token."""
    return await services.signin(request.username, request.password)


@router.get("/me", response_model=UserOut)
async def me(current_user: UserOut = Depends(get_current_user_dep)):
    """Return the user the bearer token belongs to."""
    return current_user
