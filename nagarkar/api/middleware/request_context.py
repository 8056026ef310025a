"""Correlation ids for every request.

The id is taken from the ``X-Correlation-ID`` header or generated, stored in
a context variable, bound to every log line of the request and echoed back
in the response headers. The acting principal, set later by the auth
dependency, is cleared together with it when the request ends.
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from nagarkar.api.constants import CORRELATION_ID_HEADER
from nagarkar.core.context import RequestContext, generate_correlation_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Manage the correlation id and request scoped context."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        )
        RequestContext.set_correlation_id(correlation_id)

        try:
            # contextualize removes the binding when the request ends
            with logger.contextualize(correlation_id=correlation_id):
                response = await call_next(request)
                response.headers[CORRELATION_ID_HEADER] = correlation_id
                return response
        finally:
            RequestContext.clear()
