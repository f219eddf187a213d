"""
# Client Package

Everything a front end needs to work with a Second Brain server:

- `SecondBrainAPI`: async HTTP client for the REST API.
- `ContentController`: session state owner with serialized dispatch and notifications.
- `ContentState` / `reduce`: the immutable state container and its pure transitions.
- `apply_filters`: the client-side type, tag and search filtering.

Importing this package does not require the server configuration.
"""

from second_brain.client.api import SecondBrainAPI
from second_brain.client.controller import ContentController, Notification, validate_draft
from second_brain.client.filters import apply_filters
from second_brain.client.store import Action, ActionType, ActiveFilters, ContentState, reduce

__all__ = [
    "Action",
    "ActionType",
    "ActiveFilters",
    "ContentController",
    "ContentState",
    "Notification",
    "SecondBrainAPI",
    "apply_filters",
    "reduce",
    "validate_draft",
]
