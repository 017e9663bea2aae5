"""
Tests for the httpx backend adapter.
"""

from __future__ import annotations

import json

import httpx
import pytest

from koperasi.adapters.http_client import (
    MSG_BAD_RESPONSE,
    MSG_UNREACHABLE,
    HttpxApiClient,
    parse_envelope,
)
from koperasi.components.performa import NotFoundError, Pagination, RemoteFailureError


def _client(handler, token: str | None = None) -> HttpxApiClient:
    return HttpxApiClient(
        "http://backend.test", token=token, transport=httpx.MockTransport(handler)
    )


class TestParseEnvelope:
    """Test envelope parsing from raw responses."""

    def test_full_envelope(self) -> None:
        response = httpx.Response(
            200,
            json={
                "success": True,
                "message": "OK",
                "data": [1, 2],
                "pagination": {"current_page": 1, "per_page": 10, "total": 2, "last_page": 1},
            },
            request=httpx.Request("GET", "http://backend.test/x"),
        )
        envelope = parse_envelope(response)

        assert envelope is not None
        assert envelope.success is True
        assert envelope.data == [1, 2]
        assert envelope.pagination == Pagination(1, 10, 2, 1)

    def test_success_defaults_to_status(self) -> None:
        response = httpx.Response(
            201, json={"data": {"id": 1}}, request=httpx.Request("POST", "http://backend.test/x")
        )
        envelope = parse_envelope(response)
        assert envelope is not None
        assert envelope.success is True

    def test_message_from_first_error(self) -> None:
        response = httpx.Response(
            422,
            json={"success": False, "errors": {"periode": ["Periode wajib diisi"]}},
            request=httpx.Request("POST", "http://backend.test/x"),
        )
        envelope = parse_envelope(response)
        assert envelope is not None
        assert envelope.message == "Periode wajib diisi"

    def test_non_json_body(self) -> None:
        response = httpx.Response(
            502, text="<html>Bad gateway</html>", request=httpx.Request("GET", "http://backend.test/x")
        )
        assert parse_envelope(response) is None

    def test_json_list_is_not_envelope(self) -> None:
        response = httpx.Response(
            200, json=[1, 2], request=httpx.Request("GET", "http://backend.test/x")
        )
        assert parse_envelope(response) is None


@pytest.mark.anyio
class TestHttpxApiClient:
    """Test request dispatch and failure mapping."""

    async def test_get_returns_envelope(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/organizations/1/performa/2024-05"
            return httpx.Response(200, json={"success": True, "data": {"id": 3}})

        async with _client(handler) as client:
            envelope = await client.get("/organizations/1/performa/2024-05")

        assert envelope.data == {"id": 3}

    async def test_post_sends_json(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"success": True, "data": {"id": 9}})

        async with _client(handler) as client:
            await client.post("/organizations/1/performa", {"periode": "2024-05"})

        assert seen == {"method": "POST", "body": {"periode": "2024-05"}}

    async def test_bearer_token(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer s3cret"
            return httpx.Response(200, json={"success": True})

        async with _client(handler, token="s3cret") as client:
            await client.delete("/organizations/1/performa/4")

    async def test_404_is_not_found(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"success": False, "message": "Performa not found"})

        async with _client(handler) as client:
            with pytest.raises(NotFoundError) as exc:
                await client.get("/organizations/1/performa/2024-05")

        assert exc.value.backend_message == "Performa not found"
        assert exc.value.path == "/organizations/1/performa/2024-05"

    async def test_server_error_keeps_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"success": False, "message": "Database down"})

        async with _client(handler) as client:
            with pytest.raises(RemoteFailureError) as exc:
                await client.put("/organizations/1/performa/4/bisnis", {})

        assert exc.value.message == "Database down"
        assert exc.value.status_code == 500

    async def test_validation_error_uses_first_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                422, json={"success": False, "errors": {"cdi": ["CDI harus angka"]}}
            )

        async with _client(handler) as client:
            with pytest.raises(RemoteFailureError) as exc:
                await client.post("/organizations/1/performa", {"cdi": "x"})

        assert exc.value.message == "CDI harus angka"
        assert exc.value.status_code == 422

    async def test_error_without_body_has_no_backend_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with _client(handler) as client:
            with pytest.raises(RemoteFailureError) as exc:
                await client.get("/organizations/1/performa/periods")

        assert exc.value.backend_message is None

    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(RemoteFailureError) as exc:
                await client.get("/organizations/1/performa/periods")

        assert exc.value.message == MSG_UNREACHABLE

    async def test_no_content_is_success(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(204)

        async with _client(handler) as client:
            envelope = await client.delete("/organizations/1/performa/4")

        assert envelope.success is True
        assert envelope.data is None

    async def test_empty_ok_body_on_put(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"")

        async with _client(handler) as client:
            envelope = await client.put("/organizations/1/performa/4/bisnis", {})

        assert envelope.success is True

    async def test_non_envelope_success(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="ok")

        async with _client(handler) as client:
            with pytest.raises(RemoteFailureError) as exc:
                await client.get("/organizations/1/performa/periods")

        assert exc.value.message == MSG_BAD_RESPONSE
