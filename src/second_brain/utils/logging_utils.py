"""
# Logging Utilities

Helpers that give the API structured, consistent log output:

- **`RequestLoggingMiddleware`**: one line per request with method, path, status and duration.
- **`log_application_lifecycle()`**: startup/shutdown milestones with a details mapping.
- **`log_error_with_context()`**: error logging with the operation context attached.
- **`log_performance()`**: decorator timing sync or async callables.

## Usage

```python
from second_brain.utils.logging_utils import log_performance

@log_performance("resolve_tweet_metadata")
async def resolve(...):
    ...
```
"""

import functools
import inspect
import time
import uuid
from typing import Any, Callable, Dict, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from second_brain.managers.logging_manager import get_logger

logger = get_logger()
request_logger = get_logger(prefix="[REQUEST]")
lifecycle_logger = get_logger(prefix="[LIFECYCLE]")
perf_logger = get_logger(prefix="[PERFORMANCE]")

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_OPERATION_THRESHOLD = 1.0  # seconds


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every HTTP request with its outcome and latency.

    A request id is taken from the incoming `X-Request-ID` header when present, otherwise
    generated, and echoed back on the response so client and server logs can be correlated.
    Unhandled exceptions are logged and re-raised for the exception handlers.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            request_logger.error(
                "%s %s failed after %.3fs (request_id=%s, client=%s): %s",
                request.method,
                request.url.path,
                duration,
                request_id,
                client_host,
                e,
            )
            raise

        duration = time.time() - start_time
        log = request_logger.warning if response.status_code >= 500 else request_logger.info
        log(
            "%s %s -> %d in %.3fs (request_id=%s, client=%s)",
            request.method,
            request.url.path,
            response.status_code,
            duration,
            request_id,
            client_host,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def log_application_lifecycle(event: str, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Log an application lifecycle milestone.

    Args:
        event (str): Short event name such as `"startup_initiated"` or `"database_connected"`.
        details (Optional[Dict[str, Any]]): Extra key/value pairs rendered after the event name.
    """
    if details:
        rendered = ", ".join(f"{key}={value}" for key, value in details.items())
        lifecycle_logger.info("%s | %s", event, rendered)
    else:
        lifecycle_logger.info("%s", event)


def log_error_with_context(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception together with the operation context it occurred in."""
    context = context or {}
    operation = context.get("operation", "unknown")
    rendered = ", ".join(f"{key}={value}" for key, value in context.items() if key != "operation")
    logger.error(
        "Error during %s: %s: %s%s",
        operation,
        type(error).__name__,
        error,
        f" ({rendered})" if rendered else "",
        exc_info=error,
    )


def log_performance(operation: str, threshold: float = SLOW_OPERATION_THRESHOLD):
    """
    Decorator that times a callable and logs its duration.

    Works for both plain functions and coroutine functions. Calls slower than `threshold`
    seconds are logged at WARNING, everything else at DEBUG.
    """

    def decorator(func: Callable) -> Callable:
        def _report(start_time: float, failed: bool) -> None:
            duration = time.time() - start_time
            if failed:
                perf_logger.warning("%s failed after %.3fs", operation, duration)
            elif duration > threshold:
                perf_logger.warning("%s was slow: %.3fs", operation, duration)
            else:
                perf_logger.debug("%s completed in %.3fs", operation, duration)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    _report(start_time, failed=True)
                    raise
                _report(start_time, failed=False)
                return result

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception:
                _report(start_time, failed=True)
                raise
            _report(start_time, failed=False)
            return result

        return sync_wrapper

    return decorator
