"""Domain models for the payment service."""

from .errors import (
    ErrorCode,
    ErrorResponse,
    PaymentError,
    PaymentNotFoundError,
    ProviderError,
    PublishError,
    SignatureError,
    StoreError,
    ValidationError,
)
from .events import PAYMENT_PROCESSED_EVENT_TYPE, PaymentProcessedEvent
from .mercadopago import (
    ProviderPaymentDetails,
    QROrderRequest,
    QROrderResponse,
    WebhookData,
    WebhookNotification,
    map_provider_status,
)
from .payment import CreatePaymentRequest, Payment, PaymentStatus

__all__ = [
    # Payment
    "CreatePaymentRequest",
    "Payment",
    "PaymentStatus",
    # Mercado Pago
    "ProviderPaymentDetails",
    "QROrderRequest",
    "QROrderResponse",
    "WebhookData",
    "WebhookNotification",
    "map_provider_status",
    # Events
    "PAYMENT_PROCESSED_EVENT_TYPE",
    "PaymentProcessedEvent",
    # Errors
    "ErrorCode",
    "ErrorResponse",
    "PaymentError",
    "PaymentNotFoundError",
    "ProviderError",
    "PublishError",
    "SignatureError",
    "StoreError",
    "ValidationError",
]
