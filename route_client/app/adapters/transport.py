"""
HTTP transport adapter for the route client.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

import httpx

from shared.errors import TransportError
from shared.logging import get_logger


@dataclass(frozen=True)
class TransportResponse:
    """Raw outcome of one transmission."""

    payload: bytes
    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    @property
    def etag(self) -> Optional[str]:
        # httpx.Headers lookups are case-insensitive
        return self.headers.get("ETag")


class Transport(ABC):
    """Issue one request and return its raw response."""

    @abstractmethod
    async def execute(self, request: httpx.Request) -> TransportResponse:
        """Send ``request``; raise ``TransportError`` when no HTTP exchange completes."""

    async def aclose(self) -> None:
        """Release transport resources."""


class HttpxTransport(Transport):
    """Transport backed by one shared ``httpx.AsyncClient``.

    httpx keeps no HTTP cache of its own, so conditional requests built by
    the orchestrator reach the network untouched.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: float = 30.0,
        follow_redirects: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=follow_redirects,
            transport=transport
        )
        self.logger = get_logger("route_client.transport")

    async def execute(self, request: httpx.Request) -> TransportResponse:
        response: Optional[httpx.Response] = None
        try:
            response = await self.client.send(request)
            payload = await response.aread()
        except httpx.HTTPError as exc:
            self.logger.error(
                "Transport request failed",
                method=request.method,
                url=str(request.url),
                error=str(exc)
            )
            raise TransportError(exc, response=response) from exc
        finally:
            if response is not None:
                await response.aclose()

        return TransportResponse(
            payload=payload,
            status_code=response.status_code,
            headers=response.headers
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
