"""
# Error Taxonomy

Domain errors raised by services and the client package. Routes never build `HTTPException`
for these cases themselves; the handlers registered in `main.py` translate any
`SecondBrainError` into a `{"message": ...}` JSON body with the error's `status_code`.

| Error | Status | Raised when |
|---|---|---|
| `ValidationError` | 400 | required input missing or malformed |
| `Unauthorized` | 401 | bad credentials, missing/invalid/expired token |
| `NotFound` | 404 | unknown identifier (or one owned by another user) |
| `Conflict` | 400 / 409 | duplicate username / duplicate tag title |
| `UpstreamFetchError` | 500 | oEmbed provider unreachable or failing |
"""

from typing import Any, Dict, Optional


class SecondBrainError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    default_message: str = "Something went wrong!"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(SecondBrainError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(SecondBrainError):
    status_code = 401
    default_message = "Invalid credentials"


class NotFound(SecondBrainError):
    status_code = 404
    default_message = "Not found"


class Conflict(SecondBrainError):
    # Duplicate usernames are reported as 400, matching the existing clients
    status_code = 400
    default_message = "Resource already exists"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None, status_code: int = 400):
        super().__init__(message, details)
        self.status_code = status_code


class UpstreamFetchError(SecondBrainError):
    status_code = 500
    default_message = "Failed to fetch metadata"
