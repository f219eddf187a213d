"""
# Second Brain - Main Application Module

This module is the **entry point** and **lifecycle orchestrator** of the Second Brain API. It
builds the FastAPI application, wires middleware, exception handlers and routers, and owns the
startup and shutdown sequence.

## Lifespan

The `lifespan()` context manager runs the startup sequence before the first request:

1. **Logging**: a `startup_initiated` lifecycle event with version and environment.
2. **Database**: `db_manager.connect()` (retries with exponential backoff).
3. **Indexes**: `db_manager.create_indexes()`.

On shutdown the database client is closed. A failure during startup is logged with context and
re-raised so the process exits instead of serving requests without a database.

## Routing

Every domain router is mounted under `settings.API_PREFIX` (`/api`):

| Router | Paths |
|---|---|
| auth | `/api/auth/signup`, `/api/auth/signin`, `/api/auth/me` |
| content | `/api/content`, `/api/content/{id}` |
| tags | `/api/tags`, `/api/tags/{id}` |
| metadata | `/api/tweet-metadata`, `/api/video-metadata` |
| share | `/api/share`, `/api/share/{hash}` |

`/health` and `/metrics` stay at the root for probes and scrapers.

## Error Responses

Every error body has the shape `{"message": "..."}`:

- `SecondBrainError` subclasses answer with their own `status_code`.
- Request validation failures answer 400 with the first problem described.
- Anything else answers 500; the exception text is only echoed when `DEBUG` is on.

## Running

```bash
second-brain                     # console script
python -m second_brain           # same thing
uvicorn second_brain.main:app --reload --port 5000
```
"""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from second_brain import __version__
from second_brain.config import settings
from second_brain.database import db_manager
from second_brain.exceptions import SecondBrainError
from second_brain.managers.logging_manager import get_logger
from second_brain.routes.auth import router as auth_router
from second_brain.routes.content import router as content_router
from second_brain.routes.main import router as main_router
from second_brain.routes.metadata import router as metadata_router
from second_brain.routes.share import router as share_router
from second_brain.routes.tags import router as tags_router
from second_brain.utils.logging_utils import (
    RequestLoggingMiddleware,
    log_application_lifecycle,
    log_error_with_context,
)

logger = get_logger()

GENERIC_ERROR_MESSAGE = "Something went wrong!"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Connect to MongoDB and ensure indexes before serving; disconnect on shutdown.

    Args:
        _app (FastAPI): The FastAPI application instance.

    Yields:
        None: Control is yielded to the application to start serving requests.
    """
    startup_start_time = time.time()
    log_application_lifecycle(
        "startup_initiated",
        {
            "app_name": "Second Brain API",
            "version": __version__,
            "environment": "production" if settings.is_production else "development",
            "debug_mode": settings.DEBUG,
        },
    )

    try:
        db_connect_start = time.time()
        logger.info("Initiating database connection...")
        await db_manager.connect()
        log_application_lifecycle(
            "database_connected",
            {
                "connection_duration": f"{time.time() - db_connect_start:.3f}s",
                "database_name": settings.MONGODB_DATABASE,
                "connection_url": (
                    settings.MONGODB_URL.split("@")[-1] if "@" in settings.MONGODB_URL else settings.MONGODB_URL
                ),
            },
        )

        indexes_start = time.time()
        logger.info("Creating/verifying database indexes...")
        await db_manager.create_indexes()
        log_application_lifecycle("database_indexes_ready", {"indexes_duration": f"{time.time() - indexes_start:.3f}s"})
    except Exception as e:
        log_error_with_context(e, {"operation": "application_startup"})
        raise

    log_application_lifecycle("startup_completed", {"startup_duration": f"{time.time() - startup_start_time:.3f}s"})

    yield

    shutdown_start_time = time.time()
    log_application_lifecycle("shutdown_initiated")
    try:
        await db_manager.disconnect()
    except Exception as e:
        log_error_with_context(e, {"operation": "database_disconnection"})
    log_application_lifecycle(
        "shutdown_completed", {"total_shutdown_duration": f"{time.time() - shutdown_start_time:.3f}s"}
    )


app = FastAPI(
    title="Second Brain API",
    description="Save notes, links, tweets and videos, tag them, and share a read-only view of your collection.",
    version=__version__,
    lifespan=lifespan,
    redirect_slashes=False,
    openapi_tags=[
        {"name": "Auth", "description": "Signup, signin and token verification"},
        {"name": "Content", "description": "Knowledge items owned by the caller"},
        {"name": "Tags", "description": "User-defined labels for content"},
        {"name": "Metadata", "description": "oEmbed lookups for tweets and videos"},
        {"name": "Share", "description": "Public read-only views of a collection"},
        {"name": "Main", "description": "Health checks"},
    ],
)


# Exception handlers
@app.exception_handler(SecondBrainError)
async def second_brain_error_handler(request: Request, exc: SecondBrainError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    logger.info("%s %s rejected (400): %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log_error_with_context(exc, {"operation": "request", "method": request.method, "path": request.url.path})
    message = (str(exc) or GENERIC_ERROR_MESSAGE) if settings.DEBUG else GENERIC_ERROR_MESSAGE
    return JSONResponse(status_code=500, content={"message": message})


# Middleware
cors_origins = settings.cors_origins_list
logger.info(f"Configuring CORS with origins: {cors_origins}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)
app.add_middleware(RequestLoggingMiddleware)
log_application_lifecycle(
    "middleware_configured",
    {"middleware": ["CORSMiddleware", "RequestLoggingMiddleware"], "cors_origins": cors_origins},
)

# Routers
routers_config = [
    ("auth", auth_router, settings.API_PREFIX),
    ("content", content_router, settings.API_PREFIX),
    ("tags", tags_router, settings.API_PREFIX),
    ("metadata", metadata_router, settings.API_PREFIX),
    ("share", share_router, settings.API_PREFIX),
    ("main", main_router, ""),
]

for router_name, router, prefix in routers_config:
    app.include_router(router, prefix=prefix)
    logger.debug(f"Included {router_name} router under '{prefix or '/'}'")

log_application_lifecycle(
    "routers_configured", {"total_routers": len(routers_config), "api_prefix": settings.API_PREFIX}
)

# Prometheus metrics
try:
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=False,
        should_instrument_requests_inprogress=True,
    )
    instrumentator.instrument(app).expose(app, include_in_schema=False, endpoint="/metrics")
    log_application_lifecycle("prometheus_configured", {"metrics_endpoint": "/metrics"})
except Exception as e:
    # Continue without metrics rather than failing startup
    log_error_with_context(e, {"operation": "prometheus_setup"})


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "second_brain.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
