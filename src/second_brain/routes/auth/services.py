"""
# Authentication Services

Account creation, credential checks and bearer token handling.

## Tokens

Tokens are **HS256 JWTs** signed with `settings.SECRET_KEY` (python-jose). The payload carries
only the user id plus the standard claims:

```json
{"userId": "…", "iat": 1700000000, "exp": 1700604800}
```

Lifetime is `settings.ACCESS_TOKEN_EXPIRE_DAYS` (7 days by default). There is no refresh flow;
clients sign in again once a token expires.

## Passwords

Passwords are hashed with **bcrypt**. bcrypt only accepts 72 bytes, so the UTF-8 password is first
reduced to the base64 form of its SHA-256 digest (44 bytes); passwords have no upper length
limit. Signin failures use the same message for an unknown username and a wrong password.
"""

import base64
import hashlib
from datetime import timedelta
from typing import Any, Dict

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pymongo.errors import DuplicateKeyError

from second_brain.config import settings
from second_brain.database import db_manager
from second_brain.exceptions import Conflict, Unauthorized, ValidationError
from second_brain.managers.logging_manager import get_logger
from second_brain.models.content_models import utc_now
from second_brain.routes.auth.models import AuthResponse, UserInDB, UserOut

logger = get_logger(prefix="[Auth Service]")

INVALID_CREDENTIALS = "Invalid credentials"


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_prehash(password), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(user_id: str) -> str:
    """Sign a token for the given user id."""
    now = utc_now()
    payload = {
        "userId": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Validate a token and return the user id it carries.

    Raises:
        Unauthorized: If the token is malformed, has a bad signature, is expired, or carries no
            user id.
    """
    try:
        payload: Dict[str, Any] = jwt.decode(
            token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM]
        )
    except ExpiredSignatureError as e:
        raise Unauthorized("Token expired") from e
    except JWTError as e:
        raise Unauthorized("Invalid token") from e

    user_id = payload.get("userId")
    if not user_id:
        raise Unauthorized("Invalid token")
    return str(user_id)


def _auth_response(user: UserInDB) -> AuthResponse:
    return AuthResponse(user=UserOut(_id=user.id, username=user.username), token=create_access_token(user.id))


async def signup(username: str, password: str) -> AuthResponse:
    """
    Create an account and sign it in.

    Raises:
        ValidationError: Missing username/password, or password shorter than the minimum.
        Conflict: Username already taken (HTTP 400).
    """
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Username and password are required")
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long")

    users = db_manager.get_collection(settings.USERS_COLLECTION)
    if await users.find_one({"username": username}, {"_id": 1}):
        raise Conflict("Username already exists")

    user = UserInDB(username=username, hashed_password=hash_password(password))
    try:
        await users.insert_one(user.model_dump(by_alias=True))
    except DuplicateKeyError as e:
        raise Conflict("Username already exists") from e

    logger.info(f"Registered user {username} ({user.id})")
    return _auth_response(user)


async def signin(username: str, password: str) -> AuthResponse:
    """
    Check credentials and issue a token.

    Raises:
        ValidationError: Missing username/password.
        Unauthorized: Unknown username or wrong password.
    """
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("Username and password are required")

    users = db_manager.get_collection(settings.USERS_COLLECTION)
    document = await users.find_one({"username": username})
    if not document:
        logger.info(f"Signin failed for unknown user {username}")
        raise Unauthorized(INVALID_CREDENTIALS)

    user = UserInDB(**document)
    if not verify_password(password, user.hashed_password):
        logger.info(f"Signin failed for user {username}: wrong password")
        raise Unauthorized(INVALID_CREDENTIALS)

    logger.info(f"User {username} signed in")
    return _auth_response(user)


async def verify(token: str) -> UserOut:
    """
    Resolve a bearer token to the user it was issued for.

    Raises:
        Unauthorized: Invalid or expired token, or the user no longer exists.
    """
    user_id = decode_access_token(token)
    users = db_manager.get_collection(settings.USERS_COLLECTION)
    document = await users.find_one({"_id": user_id}, {"hashed_password": 0})
    if not document:
        raise Unauthorized("User not found")
    return UserOut(**document)
