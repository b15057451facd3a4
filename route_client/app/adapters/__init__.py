"""
Adapters package for the route client.

Contains the transport wrapper that actually talks HTTP. Adapters own
connection handling and map library failures to shared errors; caching,
retries and request mutation stay in the routing package.
"""

from .transport import HttpxTransport, Transport, TransportResponse

__all__ = [
    "HttpxTransport",
    "Transport",
    "TransportResponse",
]
