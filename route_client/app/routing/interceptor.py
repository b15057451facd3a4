"""
Request interceptors.
"""

from abc import ABC, abstractmethod
from typing import Mapping

import httpx


class Interceptor(ABC):
    """Mutate a request immediately before it is transmitted.

    Called once per attempt, after the body, headers and conditional header
    are in place. Raising aborts the attempt with ``InterceptorError``.
    """

    @abstractmethod
    async def intercept(self, request: httpx.Request) -> httpx.Request:
        """Return the request to send."""


class DefaultInterceptor(Interceptor):
    """Leaves the request untouched."""

    async def intercept(self, request: httpx.Request) -> httpx.Request:
        return request


class HeaderInterceptor(Interceptor):
    """Set a fixed group of headers, e.g. an Authorization token."""

    def __init__(self, headers: Mapping[str, str]):
        self.headers = dict(headers)

    async def intercept(self, request: httpx.Request) -> httpx.Request:
        request.headers.update(self.headers)
        return request
