"""
Route client entry point.
"""

from typing import Optional

from shared.config import RouteClientConfig, get_config
from shared.logging import configure_logging, get_logger
from .routing.orchestrator import RouteOrchestrator


def create_orchestrator(config: Optional[RouteClientConfig] = None, **components) -> RouteOrchestrator:
    """Configure logging from ``config`` and build an orchestrator.

    ``components`` are passed through to ``RouteOrchestrator`` (transport,
    coordinator, interceptor, retrier, event_monitor, request_type, metrics).
    Metrics are collected when ``config.enable_metrics`` is set and no
    collector is given.
    """
    config = config or get_config()
    configure_logging(config.service_name, config.log_level)

    orchestrator = RouteOrchestrator(config=config, **components)
    get_logger("route_client.main").info(
        "Route orchestrator created",
        cache_dir=str(config.disk_cache_path),
        disk_cache_max_bytes=config.disk_cache_max_bytes,
        metrics_enabled=orchestrator.metrics is not None
    )
    return orchestrator
