"""
# Second Brain

Personal knowledge-management service: save notes, links, tweets and videos, tag them, filter
them, and publish a read-only shared view.

- `second_brain.main` builds the FastAPI application served under `/api`.
- `second_brain.client` is the async client and in-memory state container used by front ends.
"""

__version__ = "1.0.0"
