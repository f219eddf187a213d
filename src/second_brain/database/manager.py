"""
# Database Management Module

This module provides the **MongoDB infrastructure** for the Second Brain API. The
`DatabaseManager` class owns the **Motor** async client and is the single gateway through which
services reach their collections.

## Collections

| Collection | Documents | Key indexes |
|---|---|---|
| `users` | accounts with bcrypt password hashes | `username` (unique) |
| `contents` | saved knowledge items | `(userId, createdAt)` |
| `tags` | user-defined labels | `(userId, title_lower)` (unique) |
| `share_links` | public read-only tokens | `hash` (unique), `(userId, revoked)` |

## Usage

```python
from second_brain.database import db_manager

# In the FastAPI lifespan
await db_manager.connect()
await db_manager.create_indexes()

contents = db_manager.get_collection("contents")
item = await contents.find_one({"_id": content_id, "userId": user_id})

await db_manager.disconnect()
```

## Thread Safety

The manager is designed for **asyncio** and is **not thread-safe**. All methods must be called
from the same event loop.

## Module Attributes

Attributes:
    db_logger (Logger): Logger for database operations (`[DATABASE]`).
    perf_logger (Logger): Logger for timing information (`[DB_PERFORMANCE]`).
    health_logger (Logger): Logger for health checks (`[DB_HEALTH]`).
    db_manager (DatabaseManager): Global singleton used throughout the application.
"""

import asyncio
import time
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from second_brain.config import settings
from second_brain.managers.logging_manager import get_logger

db_logger = get_logger(prefix="[DATABASE]")
perf_logger = get_logger(prefix="[DB_PERFORMANCE]")
health_logger = get_logger(prefix="[DB_HEALTH]")

MAX_POOL_SIZE = 50
MIN_POOL_SIZE = 5

SENSITIVE_FIELDS = {
    "password",
    "hashed_password",
    "token",
    "secret",
    "hash",
}


class DatabaseManager:
    """
    Manages MongoDB connections, collections, and index creation.

    **Lifecycle:**
    1. **Instantiation**: no I/O, `client` and `database` are `None`
    2. **Connection**: `connect()` builds the client and pings the server
    3. **Operations**: `get_collection()` hands out Motor collections
    4. **Shutdown**: `disconnect()` closes the pool

    Tests may assign `database` directly (for example to an in-memory Motor-compatible
    database) without calling `connect()`.

    Attributes:
        client (`Optional[AsyncIOMotorClient]`): The Motor client, `None` until connected.
        database (`Optional[AsyncIOMotorDatabase]`): The selected database, `None` until connected.
    """

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._connection_retries = 3

    def _build_connection_string(self) -> str:
        if settings.MONGODB_USERNAME and settings.MONGODB_PASSWORD:
            password = settings.MONGODB_PASSWORD.get_secret_value()
            db_logger.debug("Using authenticated connection to MongoDB")
            return f"mongodb://{settings.MONGODB_USERNAME}:{password}@{settings.MONGODB_URL.replace('mongodb://', '')}"
        db_logger.debug("Using unauthenticated connection to MongoDB")
        return settings.MONGODB_URL

    async def connect(self):
        """
        Establish the MongoDB connection with exponential backoff retry.

        Up to three attempts are made, waiting 1s then 2s between them. Each attempt creates the
        Motor client and pings the server; the database handle is only kept once the ping succeeds.

        Raises:
            `ServerSelectionTimeoutError`: If MongoDB is unreachable after all attempts.
            `ConnectionFailure`: If authentication fails or the connection is refused.
        """
        start_time = time.time()
        db_logger.info("Starting MongoDB connection process")

        for attempt in range(self._connection_retries):
            attempt_start = time.time()
            try:
                db_logger.info("Connection attempt %d/%d to MongoDB", attempt + 1, self._connection_retries)

                connection_string = self._build_connection_string()
                db_logger.info(
                    "MongoDB connection config - Database: %s, MaxPool: %d, MinPool: %d, ServerTimeout: %dms, ConnTimeout: %dms",
                    settings.MONGODB_DATABASE,
                    MAX_POOL_SIZE,
                    MIN_POOL_SIZE,
                    settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    settings.MONGODB_CONNECTION_TIMEOUT,
                )

                self.client = AsyncIOMotorClient(
                    connection_string,
                    serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    connectTimeoutMS=settings.MONGODB_CONNECTION_TIMEOUT,
                    maxPoolSize=MAX_POOL_SIZE,
                    minPoolSize=MIN_POOL_SIZE,
                    tz_aware=True,
                )

                ping_start = time.time()
                await self.client.admin.command("ping")
                ping_duration = time.time() - ping_start

                self.database = self.client[settings.MONGODB_DATABASE]

                total_duration = time.time() - start_time
                perf_logger.info(
                    "MongoDB connection established successfully in %.3fs (ping: %.3fs)", total_duration, ping_duration
                )
                db_logger.info("Successfully connected to MongoDB database: %s", settings.MONGODB_DATABASE)
                return

            except (ServerSelectionTimeoutError, ConnectionFailure) as e:
                attempt_duration = time.time() - attempt_start
                perf_logger.warning("Connection attempt %d failed after %.3fs", attempt + 1, attempt_duration)
                db_logger.warning(
                    "Failed to connect to MongoDB (attempt %d/%d): %s", attempt + 1, self._connection_retries, e
                )
                if self.client is not None:
                    self.client.close()
                    self.client = None
                if attempt == self._connection_retries - 1:
                    db_logger.error("All connection attempts failed after %.3fs", time.time() - start_time)
                    raise

                backoff_time = 2**attempt
                db_logger.info("Waiting %.1fs before retry (exponential backoff)", backoff_time)
                await asyncio.sleep(backoff_time)

    async def disconnect(self):
        """
        Close the Motor client and release every pooled connection.

        Safe to call when not connected (logs a warning and returns).
        """
        start_time = time.time()
        db_logger.info("Starting MongoDB disconnection process")

        if self.client is None:
            db_logger.warning("Disconnect called but no active MongoDB connection found")
            return

        self.client.close()
        self.client = None
        self.database = None
        perf_logger.info("MongoDB disconnection completed in %.3fs", time.time() - start_time)
        db_logger.info("Successfully disconnected from MongoDB")

    async def health_check(self) -> bool:
        """
        Verify MongoDB connectivity with a `ping`.

        Returns:
            `bool`: `True` if the server answered, `False` otherwise. Never raises.
        """
        start_time = time.time()
        health_logger.debug("Starting database health check")

        if self.client is None:
            health_logger.warning("Health check failed: No database client available")
            return False

        try:
            await self.client.admin.command("ping")
        except (ServerSelectionTimeoutError, ConnectionFailure) as e:
            perf_logger.warning("Database health check failed after %.3fs", time.time() - start_time)
            health_logger.error("Database health check failed: %s", e)
            return False

        perf_logger.debug("Database health check completed successfully in %.3fs", time.time() - start_time)
        return True

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Retrieve a collection from the connected database.

        Args:
            collection_name (`str`): e.g. `"contents"`, `"tags"`.

        Returns:
            `AsyncIOMotorCollection`: Motor collection for async operations.

        Raises:
            `ConnectionError`: If no database is available yet.
        """
        if self.database is None:
            db_logger.error("Attempted to get collection '%s' without database connection", collection_name)
            raise ConnectionError("Database not connected. Call connect() first.")

        db_logger.debug("Retrieving collection: %s", collection_name)
        return self.database[collection_name]

    async def create_indexes(self):
        """Create the indexes every collection relies on."""
        start_time = time.time()
        db_logger.info("Starting database index creation process")

        users = self.get_collection(settings.USERS_COLLECTION)
        await self._create_index_if_not_exists(users, "username", {"unique": True})

        contents = self.get_collection(settings.CONTENTS_COLLECTION)
        await self._create_index_if_not_exists(contents, [("userId", ASCENDING), ("createdAt", ASCENDING)], {})
        await self._create_index_if_not_exists(contents, [("userId", ASCENDING), ("tags", ASCENDING)], {})

        tags = self.get_collection(settings.TAGS_COLLECTION)
        await self._create_index_if_not_exists(
            tags, [("userId", ASCENDING), ("title_lower", ASCENDING)], {"unique": True}
        )

        share_links = self.get_collection(settings.SHARE_LINKS_COLLECTION)
        await self._create_index_if_not_exists(share_links, "hash", {"unique": True})
        await self._create_index_if_not_exists(share_links, [("userId", ASCENDING), ("revoked", ASCENDING)], {})

        perf_logger.info("Database index creation completed successfully in %.3fs", time.time() - start_time)
        db_logger.info("Database indexes created successfully")

    async def _create_index_if_not_exists(
        self, collection: AsyncIOMotorCollection, field_spec: Any, options: Dict[str, Any]
    ):
        """Create an index if it doesn't already exist"""
        start_time = time.time()
        await collection.create_index(field_spec, **options)
        perf_logger.debug("Created/ensured index '%s' in %.3fs", field_spec, time.time() - start_time)

    # Database operation logging utilities
    def log_query_start(self, collection_name: str, operation: str, query: Optional[Dict] = None) -> float:
        """Log the start of a database query and return start time for performance tracking"""
        start_time = time.time()
        safe_query = self._sanitize_query_for_logging(query) if query else {}
        db_logger.debug("Starting %s operation on collection '%s' - Query: %s", operation, collection_name, safe_query)
        return start_time

    def log_query_success(
        self, collection_name: str, operation: str, start_time: float, result_count: Optional[int] = None
    ):
        """Log successful completion of a database query with performance metrics"""
        duration = time.time() - start_time
        if result_count is not None:
            perf_logger.info(
                "%s on '%s' completed successfully in %.3fs - %d records",
                operation,
                collection_name,
                duration,
                result_count,
            )
        else:
            perf_logger.info("%s on '%s' completed successfully in %.3fs", operation, collection_name, duration)

    def log_query_error(
        self, collection_name: str, operation: str, start_time: float, error: Exception, query: Optional[Dict] = None
    ):
        """Log database query errors with context and performance metrics"""
        duration = time.time() - start_time
        safe_query = self._sanitize_query_for_logging(query) if query else {}
        perf_logger.error("%s on '%s' failed after %.3fs", operation, collection_name, duration)
        db_logger.error(
            "%s operation failed on collection '%s' after %.3fs - Error: %s, Query: %s",
            operation,
            collection_name,
            duration,
            error,
            safe_query,
        )

    def _sanitize_query_for_logging(self, query: Dict[str, Any]) -> Dict[str, Any]:
        """Sanitize database queries for safe logging by removing sensitive data"""
        if not isinstance(query, dict):
            return {}

        sanitized: Dict[str, Any] = {}
        for key, value in query.items():
            if any(sensitive_field in key.lower() for sensitive_field in SENSITIVE_FIELDS):
                sanitized[key] = "[REDACTED]"
            elif isinstance(value, dict):
                sanitized[key] = self._sanitize_query_for_logging(value)
            elif isinstance(value, list):
                sanitized[key] = [
                    self._sanitize_query_for_logging(item) if isinstance(item, dict) else item for item in value
                ]
            else:
                sanitized[key] = value

        return sanitized


# Global database manager instance
db_manager = DatabaseManager()
