"""Standard error codes and exceptions for the payment service.

Every failure the lifecycle engine or its collaborators surface is a
PaymentError subclass carrying an ErrorCode. The HTTP layer maps codes to
status codes in one place (pagamento_api.exceptions).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    VALIDATION = "ERR_VALIDATION"
    INVALID_SIGNATURE = "ERR_INVALID_SIGNATURE"
    PAYMENT_NOT_FOUND = "ERR_PAYMENT_NOT_FOUND"
    PROVIDER_ERROR = "ERR_PROVIDER"
    STORE_ERROR = "ERR_STORE"
    PUBLISH_ERROR = "ERR_PUBLISH"
    INTERNAL = "ERR_INTERNAL"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION: "Request validation failed",
    ErrorCode.INVALID_SIGNATURE: "invalid signature",
    ErrorCode.PAYMENT_NOT_FOUND: "Payment not found",
    ErrorCode.PROVIDER_ERROR: "Payment provider request failed",
    ErrorCode.STORE_ERROR: "Payment store operation failed",
    ErrorCode.PUBLISH_ERROR: "Failed to publish payment event",
    ErrorCode.INTERNAL: "An unexpected error occurred",
}


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint on failure."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"error": "invalid signature", "error_code": "ERR_INVALID_SIGNATURE"}
            ]
        },
    )

    error: str
    error_code: ErrorCode
    details: Optional[dict[str, str]] = None


class PaymentError(Exception):
    """Base exception for payment operations.

    Subclasses pin the error code; the message defaults to the standard
    text for that code.
    """

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, str]] = None,
    ) -> None:
        self.message = message or ERROR_MESSAGES[self.code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse body."""
        return ErrorResponse(
            error=self.message,
            error_code=self.code,
            details=self.details,
        )


class ValidationError(PaymentError):
    """Request is missing mandatory fields or carries invalid values."""

    code = ErrorCode.VALIDATION


class SignatureError(PaymentError):
    """Webhook notification failed signature verification."""

    code = ErrorCode.INVALID_SIGNATURE

    def __init__(self, reason: Optional[str] = None) -> None:
        # The client always sees the generic message; the reason is for logs.
        super().__init__(ERROR_MESSAGES[ErrorCode.INVALID_SIGNATURE])
        self.reason = reason


class PaymentNotFoundError(PaymentError):
    """No local payment record for the requested ID."""

    code = ErrorCode.PAYMENT_NOT_FOUND

    def __init__(self, payment_id: str) -> None:
        super().__init__(details={"payment_id": payment_id})
        self.payment_id = payment_id


class ProviderError(PaymentError):
    """Transport failure or non-2xx response from Mercado Pago.

    The raw provider response body is kept on the exception for
    diagnostics and is logged, never returned to API clients.
    """

    code = ErrorCode.PROVIDER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class StoreError(PaymentError):
    """Persistence failure in the payment store."""

    code = ErrorCode.STORE_ERROR


class PublishError(PaymentError):
    """Event emission to the payment topic failed."""

    code = ErrorCode.PUBLISH_ERROR
