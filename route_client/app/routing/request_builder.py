"""
Build transport requests from routes.
"""

import json
import uuid
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

import httpx

from shared.errors import InvalidURLError, RequestBuildError
from .route import Route
from .tasks import JSONBodyTask, MultipartTask, ParameterPlacement, ParametersTask, PlainTask

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def encode_pairs(parameters: Mapping[str, Any]) -> str:
    """Percent-encode ``key=value`` pairs joined by ``&``, in insertion order."""
    return "&".join(
        f"{quote(str(key), safe='')}={quote(str(value), safe='')}"
        for key, value in parameters.items()
    )


class RequestBuilder:
    """Turn a ``Route`` into an ``httpx.Request``.

    The resolved URL, query string included, is also the cache key for the
    route, so ``resolve_url`` and ``build`` always agree on it.
    """

    def resolve_url(self, route: Route) -> httpx.URL:
        """Absolute request URL for ``route``."""
        raw = route.base_url
        if route.path:
            raw = f"{route.base_url.rstrip('/')}/{route.path.lstrip('/')}"

        task = route.task
        if (
            isinstance(task, ParametersTask)
            and task.placement is ParameterPlacement.QUERY
            and route.method.name != "POST"
        ):
            scheme, netloc, path, _, fragment = urlsplit(raw)
            raw = urlunsplit((scheme, netloc, path, encode_pairs(task.parameters), fragment))

        try:
            url = httpx.URL(raw)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise InvalidURLError(raw, details={"error": str(exc)}) from exc

        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURLError(raw, "URL must be absolute http(s)")
        return url

    def build(self, route: Route) -> httpx.Request:
        """Build the request with headers and body for ``route``."""
        url = self.resolve_url(route)
        headers: Dict[str, str] = dict(route.headers or {})
        content, content_type = self._encode_body(route)

        if content_type is not None:
            headers["Content-Type"] = content_type

        return httpx.Request(route.method.name, url, headers=headers, content=content)

    def _encode_body(self, route: Route) -> Tuple[Optional[bytes], Optional[str]]:
        task = route.task

        if isinstance(task, PlainTask):
            return None, None

        if isinstance(task, JSONBodyTask):
            return self._encode_json(task), JSON_CONTENT_TYPE

        if isinstance(task, ParametersTask):
            if task.placement is ParameterPlacement.BODY:
                return self._dump_json(dict(task.parameters)), JSON_CONTENT_TYPE
            if route.method.name == "POST":
                # POST carries query-placed parameters as a form body
                return encode_pairs(task.parameters).encode("utf-8"), FORM_CONTENT_TYPE
            return None, None

        if isinstance(task, MultipartTask):
            boundary = task.boundary or uuid.uuid4().hex
            return self._encode_multipart(task, boundary), f"multipart/form-data; boundary={boundary}"

        raise RequestBuildError(
            f"Unsupported task type: {type(task).__name__}",
            details={"task": type(task).__name__}
        )

    def _encode_json(self, task: JSONBodyTask) -> bytes:
        if task.encoder is not None:
            try:
                encoded = task.encoder.encode(task.body)
            except Exception as exc:
                raise RequestBuildError(f"Custom encoder failed: {exc}", details={"error": str(exc)}) from exc
            return encoded.encode("utf-8") if isinstance(encoded, str) else bytes(encoded)

        if hasattr(task.body, "model_dump_json"):
            try:
                return task.body.model_dump_json().encode("utf-8")
            except Exception as exc:
                raise RequestBuildError(f"Model serialization failed: {exc}", details={"error": str(exc)}) from exc

        return self._dump_json(task.body)

    @staticmethod
    def _dump_json(value: Any) -> bytes:
        try:
            return json.dumps(value).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise RequestBuildError(f"JSON encoding failed: {exc}", details={"error": str(exc)}) from exc

    @staticmethod
    def _encode_multipart(task: MultipartTask, boundary: str) -> bytes:
        body = bytearray()
        for part in task.parts:
            disposition = f'Content-Disposition: form-data; name="{part.name}"'
            if part.filename is not None:
                disposition += f'; filename="{part.filename}"'

            body += f"--{boundary}\r\n".encode("utf-8")
            body += f"{disposition}\r\n".encode("utf-8")
            body += f"Content-Type: {part.mime_type}\r\n\r\n".encode("utf-8")
            body += part.data
            body += b"\r\n"

        body += f"--{boundary}--\r\n".encode("utf-8")
        return bytes(body)
