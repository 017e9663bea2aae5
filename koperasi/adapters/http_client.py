"""
HTTP adapter for the koperasi backend.

Implements HttpClientPort on top of httpx.AsyncClient. Every endpoint answers
with a {success, message, data, pagination?} envelope; failures are mapped to
NotFoundError (404) and RemoteFailureError (everything else), keeping the
backend's message whenever it sent one.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from koperasi.components.performa import (
    ApiEnvelope,
    NotFoundError,
    Pagination,
    RemoteFailureError,
)

logger = logging.getLogger(__name__)

MSG_UNREACHABLE = "Tidak dapat terhubung ke server"
MSG_BAD_RESPONSE = "Respons server tidak valid"


# --- Wire Schemas ---


class PaginationSchema(BaseModel):
    current_page: int
    per_page: int
    total: int
    last_page: int


class ApiEnvelopeSchema(BaseModel):
    success: bool | None = None
    message: str | None = None
    data: Any = None
    pagination: PaginationSchema | None = None
    errors: dict[str, list[str]] | None = None


def _first_error(errors: dict[str, list[str]] | None) -> str | None:
    for messages in (errors or {}).values():
        if messages:
            return messages[0]
    return None


def parse_envelope(response: httpx.Response) -> ApiEnvelope | None:
    """Parse a response body into an ApiEnvelope, or None if it is not one."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None

    try:
        schema = ApiEnvelopeSchema.model_validate(payload)
    except ValidationError:
        logger.warning("Unexpected envelope shape from %s", response.request.url)
        return None

    pagination = None
    if schema.pagination is not None:
        pagination = Pagination(**schema.pagination.model_dump())

    return ApiEnvelope(
        success=schema.success if schema.success is not None else response.is_success,
        message=schema.message or _first_error(schema.errors) or "",
        data=schema.data,
        pagination=pagination,
        errors=schema.errors or {},
    )


class HttpxApiClient:
    """
    Async backend client.

    Args:
        base_url: API root, e.g. "http://localhost:8000".
        timeout_seconds: Per-request timeout.
        token: Optional bearer token.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 30.0,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> HttpxApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self, method: str, path: str, body: dict[str, Any] | None = None
    ) -> ApiEnvelope:
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, json=body)
        except httpx.RequestError as e:
            logger.warning("Network error calling %s %s: %s", method, path, e)
            raise RemoteFailureError(None, fallback=MSG_UNREACHABLE) from e

        envelope = parse_envelope(response)
        backend_message = envelope.message if envelope is not None else None

        if response.status_code == 404:
            raise NotFoundError(path, backend_message)

        if response.is_error:
            logger.warning("%s %s returned HTTP %s", method, path, response.status_code)
            raise RemoteFailureError(backend_message, status_code=response.status_code)

        if envelope is None and response.is_success and not response.content.strip():
            # 204 No Content and other bodiless successes
            return ApiEnvelope(success=True)

        if envelope is None:
            raise RemoteFailureError(
                None, fallback=MSG_BAD_RESPONSE, status_code=response.status_code
            )
        return envelope

    async def get(self, path: str) -> ApiEnvelope:
        return await self._request("GET", path)

    async def post(self, path: str, body: dict[str, Any]) -> ApiEnvelope:
        return await self._request("POST", path, body)

    async def put(self, path: str, body: dict[str, Any]) -> ApiEnvelope:
        return await self._request("PUT", path, body)

    async def delete(self, path: str) -> ApiEnvelope:
        return await self._request("DELETE", path)
