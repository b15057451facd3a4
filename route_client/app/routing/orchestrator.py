"""
Route orchestrator: the request/cache engine.

A remote request moves through Building -> CacheLookup -> Transmitting ->
Evaluating and then finishes, fails, or goes back to Transmitting when the
retrier authorizes another attempt. For a single call the cache lookup
always precedes transmission, which always precedes the cache write-back.
Concurrent calls for the same resource are not serialized; the last write
wins.
"""

import asyncio
import time
from typing import Optional, Set

import httpx

from shared.config import RouteClientConfig, get_config
from shared.errors import (
    BadResponseError,
    InterceptorError,
    NoResponseError,
    RouteClientError,
    TransportError,
    UnsupportedRequestTypeError,
)
from shared.logging import get_logger, request_context
from shared.metrics import MetricsCollector, get_metrics_collector
from ..adapters.transport import HttpxTransport, Transport, TransportResponse
from ..caching import CacheCoordinator, CacheEntry, DiskTier, MemoryTier
from .event_monitor import NetworkEventMonitor
from .interceptor import DefaultInterceptor, Interceptor
from .request_builder import RequestBuilder
from .request_type import RequestKind, RequestType
from .retrier import AttemptCounter, DefaultRetrier, Retrier
from .route import Route

CONDITIONAL_HEADER = "If-None-Match"


class RouteOrchestrator:
    """Execute routes against the network, the two-tier cache, or their stubs."""

    def __init__(
        self,
        transport: Optional[Transport] = None,
        coordinator: Optional[CacheCoordinator] = None,
        interceptor: Optional[Interceptor] = None,
        retrier: Optional[Retrier] = None,
        event_monitor: Optional[NetworkEventMonitor] = None,
        request_type: Optional[RequestType] = None,
        *,
        metrics: Optional[MetricsCollector] = None,
        config: Optional[RouteClientConfig] = None,
    ):
        self.config = config or get_config()
        if metrics is None and self.config.enable_metrics:
            metrics = get_metrics_collector(self.config.service_name)
        self.metrics = metrics
        self.logger = get_logger("route_client.orchestrator")

        self._owns_transport = transport is None
        self.transport = transport or HttpxTransport(
            timeout=self.config.request_timeout,
            follow_redirects=self.config.follow_redirects
        )
        self.coordinator = coordinator or CacheCoordinator(
            MemoryTier(
                max_entries=self.config.memory_cache_max_entries,
                max_bytes=self.config.memory_cache_max_bytes
            ),
            DiskTier(
                self.config.disk_cache_path,
                self.config.disk_cache_max_bytes,
                metrics=metrics
            ),
            metrics=metrics
        )
        self.interceptor = interceptor or DefaultInterceptor()
        self.retrier = retrier or DefaultRetrier()
        self.event_monitor = event_monitor
        self.request_type = request_type or RequestType.remote()

        self.builder = RequestBuilder()
        self.attempts = AttemptCounter()
        self._background: Set[asyncio.Task] = set()

    async def __aenter__(self) -> "RouteOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request(self, route: Route, request_type: Optional[RequestType] = None) -> bytes:
        """Serve ``route`` using ``request_type`` or the orchestrator's default mode."""
        request_type = request_type or self.request_type
        mode = request_type.kind.value
        start = time.perf_counter()
        outcome = "error"

        with request_context(route.describe()):
            try:
                if request_type.kind is RequestKind.REMOTE:
                    payload = await self._remote_request(route)
                elif request_type.kind is RequestKind.CACHE:
                    payload = await self._cache_request(route)
                else:
                    payload = await self._stub_request(route, request_type)
                outcome = "success"
                return payload
            except asyncio.CancelledError:
                outcome = "cancelled"
                raise
            finally:
                self._record_request(mode, outcome, time.perf_counter() - start)

    async def clear_all(self) -> None:
        """Wipe the memory and disk tiers."""
        await self.coordinator.clear()

    def retry_count(self, route: Route) -> int:
        """Retries authorized for ``route`` over this orchestrator's lifetime."""
        return self.attempts.get(route)

    async def aclose(self) -> None:
        """Wait for background cache work and close the owned transport."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

        drain = getattr(self.coordinator.disk, "drain", None)
        if drain is not None:
            await drain()

        if self._owns_transport:
            await self.transport.aclose()

    # Modes

    async def _remote_request(self, route: Route) -> bytes:
        request = self.builder.build(route)
        key = str(request.url)
        etag_enabled = route.method.is_etag_enabled
        disk_enabled = route.method.is_disk_cache_enabled

        cached: Optional[CacheEntry] = None
        if etag_enabled:
            try:
                cached = await self.coordinator.get(key, disk_enabled)
            except Exception as exc:
                # Expected on the first request for a resource
                self.logger.info("No cached entry for conditional request", url=key, error=str(exc))

        retries = 0
        while True:
            try:
                return await self._attempt(request, key, cached, etag_enabled, disk_enabled)
            except RouteClientError as exc:
                if not await self.retrier.should_retry(route, exc, retries):
                    self.logger.error(
                        "Request failed",
                        url=key,
                        attempts=retries + 1,
                        code=exc.code,
                        error=str(exc)
                    )
                    raise

                retries += 1
                self.attempts.increment(route)
                self._increment("retries_total")
                self.logger.info("Retrying request", url=key, attempt=retries + 1, code=exc.code)

    async def _cache_request(self, route: Route) -> bytes:
        url = self.builder.resolve_url(route)
        entry = await self.coordinator.get(str(url), route.method.is_disk_cache_enabled)
        return entry.payload

    async def _stub_request(self, route: Route, request_type: RequestType) -> bytes:
        if not request_type.is_stub:
            raise UnsupportedRequestTypeError(str(request_type))

        if request_type.kind is RequestKind.DELAYED_STUB:
            await asyncio.sleep(request_type.delay)
        return route.sample_data

    # Attempt pipeline

    async def _attempt(
        self,
        request: httpx.Request,
        key: str,
        cached: Optional[CacheEntry],
        etag_enabled: bool,
        disk_enabled: bool,
    ) -> bytes:
        outgoing = self._copy_request(request)
        if etag_enabled and cached is not None and cached.validator:
            outgoing.headers[CONDITIONAL_HEADER] = cached.validator

        try:
            outgoing = await self.interceptor.intercept(outgoing)
        except Exception as exc:
            raise InterceptorError(exc) from exc

        response = await self._transmit(outgoing)

        if response.status_code == 304 and cached is not None:
            self._increment("not_modified_total")
            self.logger.debug("Resource not modified, serving cached payload", url=key)
            return cached.payload

        if 200 <= response.status_code < 300:
            if etag_enabled:
                await self._persist(key, CacheEntry(response.payload, response.etag), disk_enabled)
            return response.payload

        raise BadResponseError(response.status_code, response.payload, key)

    async def _transmit(self, request: httpx.Request) -> TransportResponse:
        self._notify("request_did_start", request)
        try:
            response = await self.transport.execute(request)
        except RouteClientError:
            raise
        except Exception as exc:
            raise TransportError(exc) from exc

        if response is None:
            raise NoResponseError()

        self._notify("request_did_finish", request, response)
        return response

    async def _persist(self, key: str, entry: CacheEntry, disk_enabled: bool) -> None:
        # Shielded so a cancelled caller never tears down a write in progress
        task = asyncio.ensure_future(self.coordinator.save(key, entry, disk_enabled))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

        try:
            stored = await asyncio.shield(task)
        except Exception as exc:
            self.logger.error("Failed to persist response to cache", url=key, error=str(exc))
            return

        if not stored:
            self.logger.warning("Response was not persisted to every cache tier", url=key)

    @staticmethod
    def _copy_request(request: httpx.Request) -> httpx.Request:
        return httpx.Request(
            request.method,
            request.url,
            headers=request.headers.copy(),
            content=request.content or None
        )

    # Observability

    def _notify(self, hook: str, *args) -> None:
        if self.event_monitor is None:
            return
        try:
            getattr(self.event_monitor, hook)(*args)
        except Exception as exc:
            self.logger.warning("Network event monitor failed", hook=hook, error=str(exc))

    def _record_request(self, mode: str, outcome: str, duration: float) -> None:
        if not self.metrics:
            return
        try:
            self.metrics.record_request(mode, outcome, duration)
        except Exception as exc:  # pragma: no cover - metrics failures should never break requests
            self.logger.debug("Failed to record request metrics", error=str(exc))

    def _increment(self, metric_name: str) -> None:
        if not self.metrics:
            return
        try:
            self.metrics.increment_counter(metric_name)
        except Exception as exc:  # pragma: no cover - metrics failures should never break requests
            self.logger.debug("Failed to record metrics", metric=metric_name, error=str(exc))
