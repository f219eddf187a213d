"""
# Database Package

The persistence layer of the application, built on **Motor** (async MongoDB driver).

The `db_manager` instance is a **module-level singleton**: it is created on import without any
I/O and connected during application startup via `db_manager.connect()`.

```python
from second_brain.database import db_manager

await db_manager.connect()
tags = db_manager.get_collection("tags")
await db_manager.disconnect()
```
"""

from second_brain.database.manager import DatabaseManager, db_manager

__all__ = ["DatabaseManager", "db_manager"]
