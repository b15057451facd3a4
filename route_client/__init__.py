"""
Route client: HTTP request orchestration with conditional caching.
"""

from .app.adapters import HttpxTransport, Transport, TransportResponse
from .app.caching import CacheCoordinator, CacheEntry, DiskTier, MemoryTier
from .app.main import create_orchestrator
from .app.routing import (
    BackoffRetrier,
    DefaultInterceptor,
    DefaultRetrier,
    HeaderInterceptor,
    HttpMethod,
    Interceptor,
    JSONBodyTask,
    LoggingEventMonitor,
    MultipartPart,
    MultipartTask,
    NetworkEventMonitor,
    ParameterPlacement,
    ParametersTask,
    PlainTask,
    RequestType,
    Retrier,
    Route,
    RouteOrchestrator,
)

__all__ = [
    "BackoffRetrier",
    "CacheCoordinator",
    "CacheEntry",
    "DefaultInterceptor",
    "DefaultRetrier",
    "DiskTier",
    "HeaderInterceptor",
    "HttpMethod",
    "HttpxTransport",
    "Interceptor",
    "JSONBodyTask",
    "LoggingEventMonitor",
    "MemoryTier",
    "MultipartPart",
    "MultipartTask",
    "NetworkEventMonitor",
    "ParameterPlacement",
    "ParametersTask",
    "PlainTask",
    "RequestType",
    "Retrier",
    "Route",
    "RouteOrchestrator",
    "Transport",
    "TransportResponse",
    "create_orchestrator",
]
