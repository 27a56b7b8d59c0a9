"""HTTP layer: routers, request schemas, dependencies and error handlers."""
