"""
Route client application package.

The route client layers conditional caching, retries and request
mutation over an HTTP transport:
- Conditional (ETag) revalidation against a memory + disk cache
- Pluggable interceptors, retry policies and network event monitors
- Remote, cache-only and stub execution modes

Structure:
- app.routing: Route model, request building and the orchestrator.
- app.caching: Cache tiers, eviction and the two-tier coordinator.
- app.adapters: Transport wrapper over httpx.
"""
