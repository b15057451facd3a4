"""
Network event hooks around each transmission.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import httpx

from shared.logging import get_logger

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..adapters.transport import TransportResponse


class NetworkEventMonitor(ABC):
    """Observe the final request and its outcome.

    ``request_did_start`` receives the request exactly as it is sent, after
    interception. ``request_did_finish`` is called only when the transport
    produced a response.
    """

    @abstractmethod
    def request_did_start(self, request: httpx.Request) -> None:
        ...

    @abstractmethod
    def request_did_finish(self, request: httpx.Request, response: Optional["TransportResponse"]) -> None:
        ...


class LoggingEventMonitor(NetworkEventMonitor):
    """Log every transmission at debug level."""

    def __init__(self, name: str = "route_client.network"):
        self.logger = get_logger(name)

    def request_did_start(self, request: httpx.Request) -> None:
        self.logger.debug(
            "Request started",
            method=request.method,
            url=str(request.url),
            conditional="If-None-Match" in request.headers
        )

    def request_did_finish(self, request: httpx.Request, response: Optional["TransportResponse"]) -> None:
        if response is None:
            self.logger.debug("Request finished without response", method=request.method, url=str(request.url))
            return
        self.logger.debug(
            "Request finished",
            method=request.method,
            url=str(request.url),
            status_code=response.status_code,
            size=len(response.payload)
        )
