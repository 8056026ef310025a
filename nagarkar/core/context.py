"""Request context management for correlation IDs and the acting principal."""

import uuid
from contextvars import ContextVar

# Context variables survive across async boundaries within one request
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_principal_var: ContextVar[str | None] = ContextVar("principal", default=None)


class RequestContext:
    """Manages request context using contextvars for async-safe storage."""

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context.

        Args:
            correlation_id: The correlation ID to store in the context.
        """
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context.

        Returns:
            str | None: The correlation ID if set, None otherwise.
        """
        return _correlation_id_var.get()

    @staticmethod
    def set_principal(principal: str) -> None:
        """Record who is acting in this request, e.g. ``admin:1``."""
        _principal_var.set(principal)

    @staticmethod
    def get_principal() -> str | None:
        """Get the acting principal, if the request is authenticated."""
        return _principal_var.get()

    @staticmethod
    def clear() -> None:
        """Clear all context variables.

        This should be called at the end of a request to ensure clean state
        for the next one.
        """
        _correlation_id_var.set(None)
        _principal_var.set(None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracking.

    Returns:
        str: A string representation of a UUID4.
    """
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a unique request ID for individual request tracking.

    Request IDs are unique per request, while correlation IDs can span
    multiple services.

    Returns:
        str: A prefixed UUID4 string in format 'req-<uuid4>'.
    """
    return f"req-{uuid.uuid4()}"
