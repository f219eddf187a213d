"""
# Configuration Management Module

This module provides the **configuration system** for the Second Brain API. It is built on
**Pydantic Settings**, so every field can be supplied through the environment or a config file
and is validated once, at import time.

## Loading Hierarchy

Higher layers override lower layers:

1. **Environment Variables** (highest priority)
2. **`SECOND_BRAIN_CONFIG_PATH`**: explicit path to a config file
3. **`.sbd` file** in the project root
4. **`.env` file** in the project root
5. **Defaults** declared on `Settings` (lowest priority)

## Required Settings

Two values have no usable default and must be provided before the process starts:

- `MONGODB_URL`: connection string for the document store
- `SECRET_KEY`: signing secret for bearer tokens

If either is empty (or an obvious placeholder), `Settings()` raises a `ValidationError`
while the module is imported, so the server refuses to start instead of running half-configured.

## Usage

```python
from second_brain.config import settings

mongodb_url = settings.MONGODB_URL
secret_key = settings.SECRET_KEY.get_secret_value()
```

## Generating a Secret

```bash
python -c "import secrets; print(secrets.token_urlsafe(32))"
```
"""

import os
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
SBD_FILENAME: str = ".sbd"
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "SECOND_BRAIN_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the configuration file path based on a predefined precedence order.

    This function checks for the existence of configuration files in the following order:
    1.  **Environment Variable**: `SECOND_BRAIN_CONFIG_PATH` (if set and file exists).
    2.  **SBD Config**: `.sbd` file in the project root directory.
    3.  **Dotenv Config**: `.env` file in the project root directory.
    4.  **Fallback**: Returns `None` if no file is found, triggering environment-variable-only mode.

    Returns:
        Optional[str]: The absolute path to the configuration file, or `None` if not found.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    sbd_path: Path = PROJECT_ROOT / SBD_FILENAME
    if sbd_path.exists():
        return str(sbd_path)
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    # Environment variables already set win over the file
    load_dotenv(dotenv_path=CONFIG_PATH, override=False)


class Settings(BaseSettings):
    """
    Application configuration settings model.

    **Configuration Groups:**
    *   **Server**: Host, port, debug mode, API prefix, CORS.
    *   **Database**: MongoDB connection details.
    *   **Security**: JWT signing secret, algorithm, expiry, password policy.
    *   **Metadata**: oEmbed provider endpoints and fetch timeout.
    *   **Sharing**: Share link lifetime.
    *   **Logging**: Log level.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Server configuration
    HOST: str = "127.0.0.1"
    PORT: int = 5000
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # JWT configuration
    SECRET_KEY: SecretStr = SecretStr("")  # Must be set in .sbd or environment
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Account policy
    PASSWORD_MIN_LENGTH: int = 6

    # MongoDB configuration
    MONGODB_URL: str = ""  # Must be set in .sbd or environment
    MONGODB_DATABASE: str = "second_brain"
    MONGODB_CONNECTION_TIMEOUT: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT: int = 5000
    MONGODB_USERNAME: Optional[str] = None
    MONGODB_PASSWORD: Optional[SecretStr] = None

    # Collection names
    USERS_COLLECTION: str = "users"
    CONTENTS_COLLECTION: str = "contents"
    TAGS_COLLECTION: str = "tags"
    SHARE_LINKS_COLLECTION: str = "share_links"

    # Embed metadata providers
    TWEET_OEMBED_URL: str = "https://publish.twitter.com/oembed"
    VIDEO_OEMBED_URL: str = "https://noembed.com/embed"
    METADATA_FETCH_TIMEOUT: float = 5.0

    # Share links (0 = never expire)
    SHARE_LINK_EXPIRE_DAYS: int = 0

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("SECRET_KEY", mode="before")
    @classmethod
    def no_hardcoded_secrets(cls, v: Any, info: Any) -> Any:
        """
        Validates that the signing secret is neither empty nor a placeholder.

        Checks for placeholder text like "change" or "0000" as well as empty/whitespace values.

        Raises:
            ValueError: If the value is empty, hardcoded, or insecure.
        """
        if not v or "change" in str(v).lower() or "0000" in str(v) or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .sbd and not hardcoded!")
        return v

    @field_validator("MONGODB_URL", mode="before")
    @classmethod
    def no_empty_urls(cls, v: Any, info: Any) -> Any:
        """
        Validates that the MongoDB URL is not empty.

        Raises:
            ValueError: If the URL is empty or whitespace.
        """
        if not v or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .sbd and not empty!")
        return v

    @field_validator("ACCESS_TOKEN_EXPIRE_DAYS", "PASSWORD_MIN_LENGTH", mode="before")
    @classmethod
    def validate_positive_integers(cls, v: Any, info: Any) -> int:
        """Validates that numeric settings are positive integers."""
        value = int(v)
        if value <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return value

    @field_validator("SHARE_LINK_EXPIRE_DAYS", mode="before")
    @classmethod
    def validate_non_negative(cls, v: Any, info: Any) -> int:
        value = int(v)
        if value < 0:
            raise ValueError(f"{info.field_name} must be zero or a positive integer")
        return value

    @field_validator("METADATA_FETCH_TIMEOUT", mode="before")
    @classmethod
    def validate_timeout_values(cls, v: Any, info: Any) -> float:
        """
        Validates that the metadata fetch timeout is within a reasonable range (0-120 seconds).

        Raises:
            ValueError: If the timeout is out of range.
        """
        timeout = float(v)
        if timeout <= 0 or timeout > 120:
            raise ValueError(f"{info.field_name} must be between 0 and 120 seconds")
        return timeout

    @property
    def is_production(self) -> bool:
        """`True` when running with `DEBUG=False`."""
        return not self.DEBUG

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse the comma-separated `CORS_ORIGINS` setting.

        Returns:
            `List[str]`: Origins with surrounding whitespace removed; empty entries dropped.
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings: Settings = Settings()
