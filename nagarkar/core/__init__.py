"""Shared building blocks for the Nagarkar tax service.

- **config**: settings groups loaded from the environment
- **context**: correlation ID and principal tracking per request
- **exceptions**: error codes and the application exception hierarchy
- **error_context**: redaction of sensitive values before logging
- **logging**: loguru setup with cloud formatters
- **observability**: OpenTelemetry tracing
- **security**: password hashing and access tokens
- **types**: shared type aliases
"""
