"""
Unit tests for the route client entry point.
"""

from unittest.mock import patch

import pytest

from route_client import create_orchestrator
from route_client.app.routing.orchestrator import RouteOrchestrator
from route_client.app.routing.request_type import RequestType
from route_client.app.routing.route import Route
from shared.config import RouteClientConfig
from shared.metrics import get_metrics_collector


class TestCreateOrchestrator:
    """Test cases for create_orchestrator."""

    @pytest.mark.asyncio
    async def test_configures_logging_from_config(self, tmp_path):
        config = RouteClientConfig(cache_dir=tmp_path, service_name="catalog_client", log_level="warning")

        with patch("route_client.app.main.configure_logging") as mock_configure:
            orchestrator = create_orchestrator(config)

        mock_configure.assert_called_once_with("catalog_client", "warning")
        assert isinstance(orchestrator, RouteOrchestrator)
        assert orchestrator.config is config
        assert orchestrator.metrics is None
        await orchestrator.aclose()

    @pytest.mark.asyncio
    async def test_passes_components_and_enables_metrics(self, tmp_path):
        config = RouteClientConfig(cache_dir=tmp_path, enable_metrics=True)

        with patch("route_client.app.main.configure_logging"):
            orchestrator = create_orchestrator(config, request_type=RequestType.stub())

        payload = await orchestrator.request(Route("https://api.example.com", sample_data=b"sample"))

        assert payload == b"sample"
        assert orchestrator.metrics is get_metrics_collector()
        await orchestrator.aclose()

    @pytest.mark.asyncio
    async def test_reads_environment_when_no_config_given(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ROUTE_CLIENT_CACHE_DIR", str(tmp_path))
        monkeypatch.setenv("ROUTE_CLIENT_LOG_LEVEL", "error")

        with patch("route_client.app.main.configure_logging") as mock_configure:
            orchestrator = create_orchestrator()

        mock_configure.assert_called_once_with("route_client", "error")
        assert orchestrator.coordinator.disk.directory == tmp_path
        await orchestrator.aclose()
