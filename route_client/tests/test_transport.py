"""
Unit tests for the httpx transport adapter.
"""

import httpx
import pytest

from route_client.app.adapters.transport import HttpxTransport, TransportResponse
from shared.errors import TransportError


class TestHttpxTransport:
    """Test cases for HttpxTransport."""

    @pytest.mark.asyncio
    async def test_execute_returns_payload_status_and_headers(self):
        """Test a successful exchange."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"hello", headers={"etag": '"abc"'})

        transport = HttpxTransport(transport=httpx.MockTransport(handler))
        try:
            response = await transport.execute(httpx.Request("GET", "https://api.example.com/items"))
        finally:
            await transport.aclose()

        assert response.payload == b"hello"
        assert response.status_code == 200
        assert response.etag == '"abc"'
        assert str(seen[0].url) == "https://api.example.com/items"

    @pytest.mark.asyncio
    async def test_error_status_is_a_response_not_an_exception(self):
        """Test that non-2xx statuses are returned for the caller to judge."""
        transport = HttpxTransport(transport=httpx.MockTransport(lambda request: httpx.Response(503, content=b"busy")))

        response = await transport.execute(httpx.Request("GET", "https://api.example.com/items"))
        await transport.aclose()

        assert response.status_code == 503
        assert response.payload == b"busy"
        assert response.etag is None

    @pytest.mark.asyncio
    async def test_network_failure_raises_transport_error(self):
        """Test that httpx errors are wrapped."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(transport=httpx.MockTransport(handler))

        with pytest.raises(TransportError) as exc_info:
            await transport.execute(httpx.Request("GET", "https://api.example.com/items"))
        await transport.aclose()

        assert exc_info.value.code == "TRANSPORT_ERROR"
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert exc_info.value.details["error_type"] == "ConnectError"

    @pytest.mark.asyncio
    async def test_does_not_close_borrowed_client(self):
        """Test that a caller-provided client stays open."""
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
        transport = HttpxTransport(client)

        await transport.aclose()

        assert not client.is_closed
        await client.aclose()

    def test_etag_lookup_is_case_insensitive(self):
        response = TransportResponse(b"", 200, httpx.Headers({"eTaG": "W/\"1\""}))

        assert response.etag == 'W/"1"'
