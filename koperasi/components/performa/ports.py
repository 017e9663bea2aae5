"""
Performa component port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from .models import ApiEnvelope


class HttpClientPort(Protocol):
    """
    Backend HTTP collaborator.

    Paths are relative to the API base URL. Implementations raise
    NotFoundError for 404 responses and RemoteFailureError for any other
    HTTP or transport failure.
    """

    async def get(self, path: str) -> ApiEnvelope:
        """GET a resource."""
        ...

    async def post(self, path: str, body: dict[str, Any]) -> ApiEnvelope:
        """POST a JSON body."""
        ...

    async def put(self, path: str, body: dict[str, Any]) -> ApiEnvelope:
        """PUT a JSON body."""
        ...

    async def delete(self, path: str) -> ApiEnvelope:
        """DELETE a resource."""
        ...


class ViewCachePort(Protocol):
    """Read cache for period lists and period records."""

    def get(self, key: str) -> Any | None:
        """Cached value, or None when absent or stale."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a value."""
        ...

    def invalidate(self, key: str) -> None:
        """Drop one key."""
        ...

    def invalidate_prefix(self, prefix: str) -> None:
        """Drop every key starting with prefix."""
        ...
