"""Middleware for cross-cutting request and response concerns.

- **SecurityHeadersMiddleware**: security and cache headers
- **RequestContextMiddleware**: correlation ids and request scoped context
- **RequestLoggingMiddleware**: request logging with timing
- **error_handler**: exception handlers producing the error response shape

Starlette runs middleware in reverse order of registration; ``create_app``
registers them so security headers wrap everything else.
"""
