"""
Shared error handling for the route client.

Every failure raised by the client is a ``RouteClientError`` carrying a
machine-readable ``code``, a message and a ``details`` mapping. Cache-layer
errors are usually recovered locally and only logged; request-layer errors
reach the caller.
"""

from typing import Dict, Any, List, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class RouteClientError(Exception):
    """Base exception for route client failures."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


# Request building

class InvalidURLError(RouteClientError):
    """The route does not resolve to a usable absolute URL."""

    def __init__(self, url: str, message: str = "Invalid URL", details: Optional[Dict[str, Any]] = None):
        self.url = url
        super().__init__("INVALID_URL", f"{message}: {url}", {"url": url, **(details or {})})


class RequestBuildError(RouteClientError):
    """The request body could not be encoded."""

    def __init__(self, message: str = "Failed to build request", details: Optional[Dict[str, Any]] = None):
        super().__init__("REQUEST_BUILD_ERROR", message, details)


class UnsupportedRequestTypeError(RouteClientError):
    """A request path was invoked with a request type it cannot serve."""

    def __init__(self, request_type: str, message: str = "Unsupported request type"):
        self.request_type = request_type
        super().__init__("UNSUPPORTED_REQUEST_TYPE", f"{message}: {request_type}", {"request_type": request_type})


# Transmission

class InterceptorError(RouteClientError):
    """The interceptor refused or failed to prepare the request."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__("INTERCEPTOR_ERROR", f"Interceptor failed: {cause}", {"error": str(cause)})


class TransportError(RouteClientError):
    """The transport failed before a usable HTTP response was produced."""

    def __init__(self, cause: BaseException, response: Optional[Any] = None):
        self.cause = cause
        self.response = response
        details: Dict[str, Any] = {"error": str(cause), "error_type": type(cause).__name__}
        if response is not None and getattr(response, "status_code", None) is not None:
            details["status_code"] = response.status_code
        super().__init__("TRANSPORT_ERROR", f"Transport error: {cause}", details)


class NoResponseError(RouteClientError):
    """The transport completed without producing an HTTP response."""

    def __init__(self, message: str = "No HTTP response received"):
        super().__init__("NO_RESPONSE", message)


class BadResponseError(RouteClientError):
    """The response status is outside 2xx and is not a usable 304."""

    def __init__(self, status_code: int, body: bytes = b"", url: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(
            "BAD_RESPONSE",
            f"Unexpected status {status_code}",
            {"status_code": status_code, "url": url}
        )


# Caching

class CacheMissError(RouteClientError):
    """No entry is cached for the key."""

    def __init__(self, key: str, code: str = "CACHE_MISS", message: str = "Cache miss",
                 details: Optional[Dict[str, Any]] = None):
        self.key = key
        super().__init__(code, f"{message}: {key}", {"key": key, **(details or {})})


class MemoryCacheMissError(CacheMissError):
    """No entry in the memory tier."""

    def __init__(self, key: str):
        super().__init__(key, "MEMORY_CACHE_MISS", "Memory cache miss")


class DiskCacheMissError(CacheMissError):
    """No entry in the disk tier."""

    def __init__(self, key: str, path: Optional[str] = None):
        self.path = path
        super().__init__(key, "DISK_CACHE_MISS", "Disk cache miss", {"path": path})


class CacheDecodeError(CacheMissError):
    """A stored record could not be decoded; treated as a miss."""

    def __init__(self, key: str, cause: BaseException):
        self.cause = cause
        super().__init__(key, "CACHE_DECODE_ERROR", "Failed to decode cache entry", {"error": str(cause)})


class CacheEncodeError(RouteClientError):
    """A cache entry could not be serialized."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__("CACHE_ENCODE_ERROR", f"Failed to encode cache entry: {cause}", {"error": str(cause)})


class DiskWriteError(RouteClientError):
    """A cache entry could not be written to disk."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__("DISK_WRITE_ERROR", f"Failed to write disk cache: {cause}", {"path": path, "error": str(cause)})


class DiskClearError(RouteClientError):
    """The disk cache directory could not be removed."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__("DISK_CLEAR_ERROR", f"Failed to clear disk cache: {cause}", {"path": path, "error": str(cause)})


class CacheClearError(RouteClientError):
    """One or more cache tiers failed to clear."""

    def __init__(self, errors: List[BaseException]):
        self.errors = errors
        super().__init__(
            "CACHE_CLEAR_ERROR",
            f"{len(errors)} cache tier(s) failed to clear",
            {"errors": [str(error) for error in errors]}
        )
