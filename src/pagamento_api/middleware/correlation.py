"""Request correlation for tracing across logs.

The correlation ID is taken from ``X-Correlation-ID`` when a caller sends
one, otherwise from Mercado Pago's ``x-request-id`` on webhook deliveries,
otherwise a new UUID. It is echoed back on the response and attached to
every log record written while the request is handled.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from pagamento.utils.logging import clear_correlation_id, get_logger, set_correlation_id

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
PROVIDER_REQUEST_ID_HEADER = "x-request-id"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Sets the correlation ID and logs one line per completed request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = set_correlation_id(
            request.headers.get(CORRELATION_ID_HEADER)
            or request.headers.get(PROVIDER_REQUEST_ID_HEADER)
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            logger.info(
                "%s %s -> %d (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response
        finally:
            clear_correlation_id()
