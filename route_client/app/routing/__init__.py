"""
Routing package for the route client.

Turns caller-defined routes into transport requests and drives them
through the cache, interceptor and retry policies.
"""

from .event_monitor import LoggingEventMonitor, NetworkEventMonitor
from .interceptor import DefaultInterceptor, HeaderInterceptor, Interceptor
from .methods import HttpMethod
from .orchestrator import RouteOrchestrator
from .request_builder import RequestBuilder
from .request_type import RequestKind, RequestType
from .retrier import AttemptCounter, BackoffRetrier, DefaultRetrier, Retrier
from .route import Route
from .tasks import (
    JSONBodyTask,
    MultipartPart,
    MultipartTask,
    ParameterPlacement,
    ParametersTask,
    PlainTask,
    RouteTask,
)

__all__ = [
    "AttemptCounter",
    "BackoffRetrier",
    "DefaultInterceptor",
    "DefaultRetrier",
    "HeaderInterceptor",
    "HttpMethod",
    "Interceptor",
    "JSONBodyTask",
    "LoggingEventMonitor",
    "MultipartPart",
    "MultipartTask",
    "NetworkEventMonitor",
    "ParameterPlacement",
    "ParametersTask",
    "PlainTask",
    "RequestBuilder",
    "RequestKind",
    "RequestType",
    "Retrier",
    "Route",
    "RouteOrchestrator",
    "RouteTask",
]
