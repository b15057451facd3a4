"""
Execution modes for an orchestrated request.
"""

from dataclasses import dataclass
from enum import Enum


class RequestKind(str, Enum):
    REMOTE = "remote"
    CACHE = "cache"
    STUB = "stub"
    DELAYED_STUB = "delayed_stub"


@dataclass(frozen=True)
class RequestType:
    """How ``RouteOrchestrator.request`` serves a route.

    - remote: go to the network, revalidating through the ETag cache when the
      route enables it.
    - cache: answer from the cache only, never the network.
    - stub: answer with the route's ``sample_data``.
    - delayed_stub: as stub, after sleeping ``delay`` seconds.
    """

    kind: RequestKind
    delay: float = 0.0

    def __post_init__(self):
        if self.delay < 0:
            raise ValueError("delay must be non-negative")

    @classmethod
    def remote(cls) -> "RequestType":
        return cls(RequestKind.REMOTE)

    @classmethod
    def cache(cls) -> "RequestType":
        return cls(RequestKind.CACHE)

    @classmethod
    def stub(cls) -> "RequestType":
        return cls(RequestKind.STUB)

    @classmethod
    def delayed_stub(cls, seconds: float) -> "RequestType":
        return cls(RequestKind.DELAYED_STUB, seconds)

    @property
    def is_stub(self) -> bool:
        return self.kind in (RequestKind.STUB, RequestKind.DELAYED_STUB)

    def __str__(self) -> str:
        if self.kind is RequestKind.DELAYED_STUB:
            return f"{self.kind.value}({self.delay})"
        return self.kind.value
