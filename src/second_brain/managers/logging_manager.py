"""
# Logging Manager

Central factory for the application's loggers. Every module obtains its logger through
`get_logger()` so that formatting and levels are configured in exactly one place.

## Prefixed Loggers

Subsystems tag their records with a short bracketed prefix, which keeps a single log stream
easy to grep:

```python
from second_brain.managers.logging_manager import get_logger

logger = get_logger()                                  # plain application logger
db_logger = get_logger(prefix="[DATABASE]")            # "[DATABASE] Connected ..."
content_logger = get_logger(prefix="[Content Service]")
```

The first call configures the `second_brain` logger hierarchy from the `LOG_LEVEL` environment
variable (also loaded from the config file by `second_brain.config`);
later calls reuse that configuration.
"""

import logging
import os
import sys
from typing import Any, MutableMapping, Optional, Tuple

ROOT_LOGGER_NAME = "second_brain"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


class PrefixedLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that prepends a fixed prefix to every message."""

    def __init__(self, logger: logging.Logger, prefix: str):
        super().__init__(logger, {"prefix": prefix})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"{self.prefix} {msg}", kwargs


def _configure_root_logger() -> None:
    global _configured
    if _configured:
        return

    # Environment only; the client package must not import the server settings
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    root.setLevel(level if isinstance(level, int) else logging.INFO)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    root.propagate = True
    _configured = True


def get_logger(name: str = ROOT_LOGGER_NAME, prefix: Optional[str] = None):
    """
    Return a configured application logger.

    Args:
        name (str): Logger name. Names outside the `second_brain` hierarchy are nested under it.
        prefix (Optional[str]): Bracketed tag prepended to every message, e.g. `"[DATABASE]"`.

    Returns:
        `logging.Logger` when no prefix is given, otherwise a `PrefixedLoggerAdapter`.
        Both expose the usual `debug/info/warning/error/exception` API.
    """
    _configure_root_logger()

    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)

    if prefix:
        return PrefixedLoggerAdapter(logger, prefix)
    return logger
