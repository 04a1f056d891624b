"""FastAPI exception handlers for converting PaymentError to HTTP responses.

Every error response has the ErrorResponse shape:

    {"error": "<message>", "error_code": "ERR_...", "details": {...}}

The ErrorCode-to-HTTP status mapping:
- 400 Bad Request: missing/invalid request fields, malformed JSON
- 401 Unauthorized: webhook signature rejected
- 404 Not Found: unknown payment
- 500 Internal Server Error: provider, store or unexpected failures

Usage:
    from pagamento_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from pagamento.models.errors import (
    ERROR_MESSAGES,
    ErrorCode,
    ErrorResponse,
    PaymentError,
    ValidationError,
)
from pagamento.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION: HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SIGNATURE: HTTP_401_UNAUTHORIZED,
    ErrorCode.PAYMENT_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.PROVIDER_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.STORE_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.PUBLISH_ERROR: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL: HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode, defaulting to 500."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_500_INTERNAL_SERVER_ERROR)


def _error_json(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


async def payment_error_handler(request: Request, exc: PaymentError) -> JSONResponse:
    """Convert a PaymentError to a JSON error response."""
    status_code = get_http_status_for_error(exc.code)
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_json(status_code, exc.to_error_response())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation failures to 400.

    FastAPI answers 422 by default; clients of this service expect 400
    for missing or invalid fields and for malformed JSON bodies.
    """
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))

    error = ValidationError("; ".join(messages) or None)
    return _error_json(HTTP_400_BAD_REQUEST, error.to_error_response())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a generic 500 response."""
    logger.exception("Unhandled exception: %s", exc)

    # Don't expose internal details
    body = ErrorResponse(
        error=ERROR_MESSAGES[ErrorCode.INTERNAL],
        error_code=ErrorCode.INTERNAL,
    )
    return _error_json(HTTP_500_INTERNAL_SERVER_ERROR, body)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(PaymentError, payment_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
