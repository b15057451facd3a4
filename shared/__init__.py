"""
Shared utilities for the route client.

This package aggregates common building blocks consumed by the route client:

- config: Client configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- retry: Retry configuration and backoff calculation

Any cross-cutting logic should live here to avoid import cycles across
packages. Do not import from route_client into shared/.
"""
