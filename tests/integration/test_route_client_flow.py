"""
End-to-end tests for the route client over an in-process HTTP server.
"""

import hashlib
import json

import httpx
import pytest
from prometheus_client import CollectorRegistry

from route_client import (
    BackoffRetrier,
    HeaderInterceptor,
    HttpMethod,
    HttpxTransport,
    JSONBodyTask,
    LoggingEventMonitor,
    ParameterPlacement,
    ParametersTask,
    RequestType,
    Route,
    RouteOrchestrator,
)
from shared.config import RouteClientConfig
from shared.errors import BadResponseError, CacheMissError
from shared.logging import configure_logging
from shared.metrics import MetricsCollector
from shared.retry import RetryConfig


class FakeCatalogServer:
    """Serves a mutable catalog with strong ETags and conditional GETs."""

    def __init__(self):
        self.items = {"widgets": ["a", "b"]}
        self.requests = []
        self.failures_remaining = 0

    def etag(self, body: bytes) -> str:
        return '"%s"' % hashlib.sha256(body).hexdigest()[:16]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("Authorization") != "Bearer secret":
            return httpx.Response(401, content=b"unauthorized")

        if self.failures_remaining:
            self.failures_remaining -= 1
            return httpx.Response(503, content=f"try again {self.failures_remaining}".encode())

        if request.method == "GET":
            name = request.url.path.rsplit("/", 1)[-1]
            body = json.dumps({"name": name, "items": self.items.get(name, [])}).encode()
            tag = self.etag(body)
            if request.headers.get("If-None-Match") == tag:
                return httpx.Response(304, headers={"ETag": tag})
            return httpx.Response(200, content=body, headers={"ETag": tag})

        if request.method == "POST":
            name = request.url.path.rsplit("/", 1)[-1]
            payload = json.loads(request.content)
            self.items.setdefault(name, []).append(payload["item"])
            return httpx.Response(201, content=b'{"ok": true}')

        return httpx.Response(405)


class TestRouteClientFlow:
    """End-to-end flow through transport, interceptor, retrier and both cache tiers."""

    @pytest.fixture
    def server(self):
        return FakeCatalogServer()

    @pytest.fixture
    def config(self, tmp_path):
        configure_logging("route_client_test", "debug")
        return RouteClientConfig(cache_dir=tmp_path, cache_namespace="catalog")

    @pytest.fixture
    def registry(self):
        return CollectorRegistry()

    def make_orchestrator(self, server, config, registry):
        return RouteOrchestrator(
            HttpxTransport(transport=httpx.MockTransport(server.handler)),
            interceptor=HeaderInterceptor({"Authorization": "Bearer secret"}),
            retrier=BackoffRetrier(RetryConfig(max_attempts=3, base_delay=0, jitter=False)),
            event_monitor=LoggingEventMonitor(),
            metrics=MetricsCollector(registry=registry),
            config=config
        )

    @pytest.fixture
    def widgets(self):
        return Route("https://catalog.example.com", "v1/catalog/widgets", HttpMethod.get(etag_enabled=True))

    @pytest.mark.asyncio
    async def test_revalidation_update_and_restart(self, server, config, registry, widgets):
        """Test conditional revalidation across a change and a process restart."""
        orchestrator = self.make_orchestrator(server, config, registry)

        first = json.loads(await orchestrator.request(widgets))
        second = json.loads(await orchestrator.request(widgets))

        assert first == second == {"name": "widgets", "items": ["a", "b"]}
        assert server.requests[1].headers["If-None-Match"] == server.etag(json.dumps(first).encode())
        assert registry.get_sample_value("not_modified_total") == 1.0

        add_item = Route(
            "https://catalog.example.com",
            "v1/catalog/widgets",
            HttpMethod.post(),
            JSONBodyTask({"item": "c"})
        )
        await orchestrator.request(add_item)

        third = json.loads(await orchestrator.request(widgets))
        assert third["items"] == ["a", "b", "c"]
        await orchestrator.aclose()

        restarted = self.make_orchestrator(server, config, CollectorRegistry())
        offline = json.loads(await restarted.request(widgets, RequestType.cache()))
        assert offline["items"] == ["a", "b", "c"]

        revalidated = json.loads(await restarted.request(widgets))
        assert revalidated == offline
        assert server.requests[-1].headers["If-None-Match"] is not None
        await restarted.aclose()

    @pytest.mark.asyncio
    async def test_transient_failures_are_retried(self, server, config, registry, widgets):
        server.failures_remaining = 2
        orchestrator = self.make_orchestrator(server, config, registry)

        payload = json.loads(await orchestrator.request(widgets))

        assert payload["name"] == "widgets"
        assert len(server.requests) == 3
        assert orchestrator.retry_count(widgets) == 2
        assert registry.get_sample_value("retries_total") == 2.0
        await orchestrator.aclose()

    @pytest.mark.asyncio
    async def test_persistent_failure_surfaces_last_error(self, server, config, registry, widgets):
        server.failures_remaining = 10
        orchestrator = self.make_orchestrator(server, config, registry)

        with pytest.raises(BadResponseError) as exc_info:
            await orchestrator.request(widgets)

        assert exc_info.value.status_code == 503
        assert exc_info.value.body == b"try again 7"
        assert len(server.requests) == 3
        with pytest.raises(CacheMissError):
            await orchestrator.request(widgets, RequestType.cache())
        await orchestrator.aclose()

    @pytest.mark.asyncio
    async def test_query_parameters_are_part_of_cache_key(self, server, config, registry):
        orchestrator = self.make_orchestrator(server, config, registry)
        page_one = Route(
            "https://catalog.example.com",
            "v1/catalog/widgets",
            HttpMethod.get(etag_enabled=True),
            ParametersTask({"page": 1}, ParameterPlacement.QUERY)
        )
        page_two = Route(
            "https://catalog.example.com",
            "v1/catalog/widgets",
            HttpMethod.get(etag_enabled=True),
            ParametersTask({"page": 2}, ParameterPlacement.QUERY)
        )

        await orchestrator.request(page_one)
        await orchestrator.request(page_two)

        assert "If-None-Match" not in server.requests[1].headers
        assert str(server.requests[1].url) == "https://catalog.example.com/v1/catalog/widgets?page=2"

        await orchestrator.clear_all()
        with pytest.raises(CacheMissError):
            await orchestrator.request(page_one, RequestType.cache())
        await orchestrator.aclose()
