"""
Route value type.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from .methods import HttpMethod
from .tasks import PlainTask, RouteTask


@dataclass(frozen=True, eq=False)
class Route:
    """Caller-defined description of one HTTP resource or operation.

    Routes are immutable and hashable; equality covers everything except the
    stub payload. Cache identity is not the route itself but the resolved
    request URL built from it.
    """

    base_url: str
    path: str = ""
    method: HttpMethod = field(default_factory=HttpMethod.get)
    task: RouteTask = field(default_factory=PlainTask)
    headers: Optional[Mapping[str, str]] = None
    sample_data: bytes = b""

    def __post_init__(self):
        if self.headers is not None:
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def _identity(self) -> Tuple[Any, ...]:
        headers = tuple(sorted(self.headers.items())) if self.headers else ()
        return (self.base_url, self.path, self.method, self.task.fingerprint(), headers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def describe(self) -> str:
        """Short human-readable form for logs."""
        path = f"/{self.path.lstrip('/')}" if self.path else ""
        return f"{self.method} {self.base_url.rstrip('/')}{path}"
