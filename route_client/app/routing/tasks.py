"""
Request task variants describing how a route carries its data.
"""

import hashlib
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Tuple


class ParameterPlacement(str, Enum):
    """Where ``ParametersTask`` puts its parameters."""

    BODY = "body"
    QUERY = "query"


def _stable_repr(value: Any) -> str:
    try:
        return json.dumps(value, sort_keys=True, default=repr)
    except (TypeError, ValueError):
        return repr(value)


class RouteTask:
    """Base class for task variants."""

    def fingerprint(self) -> str:
        """Stable text identity used for route hashing."""
        raise NotImplementedError


@dataclass(frozen=True, eq=False)
class PlainTask(RouteTask):
    """No body, no parameters."""

    def fingerprint(self) -> str:
        return "plain"


@dataclass(frozen=True, eq=False)
class JSONBodyTask(RouteTask):
    """JSON body from a serializable value or a pydantic model.

    ``encoder`` is any object with an ``encode(obj)`` method returning
    ``str`` or ``bytes``, e.g. a configured ``json.JSONEncoder``.
    """

    body: Any
    encoder: Optional[Any] = None

    def fingerprint(self) -> str:
        body = self.body.model_dump(mode="json") if hasattr(self.body, "model_dump") else self.body
        encoder = type(self.encoder).__name__ if self.encoder is not None else ""
        return f"json:{encoder}:{_stable_repr(body)}"


@dataclass(frozen=True, eq=False)
class ParametersTask(RouteTask):
    """Key/value parameters sent as a JSON body or in the query string."""

    parameters: Mapping[str, Any]
    placement: ParameterPlacement = ParameterPlacement.BODY

    def fingerprint(self) -> str:
        return f"parameters:{self.placement.value}:{_stable_repr(dict(self.parameters))}"


@dataclass(frozen=True)
class MultipartPart:
    """One section of a multipart/form-data body."""

    data: bytes
    name: str
    mime_type: str
    filename: Optional[str] = None


@dataclass(frozen=True, eq=False)
class MultipartTask(RouteTask):
    """multipart/form-data body; a boundary is generated when not given."""

    parts: Sequence[MultipartPart] = field(default_factory=tuple)
    boundary: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "parts", tuple(self.parts))

    def fingerprint(self) -> str:
        parts: Tuple[Tuple[str, Optional[str], str, str], ...] = tuple(
            (part.name, part.filename, part.mime_type, hashlib.sha256(part.data).hexdigest()) for part in self.parts
        )
        return f"multipart:{self.boundary}:{parts!r}"
