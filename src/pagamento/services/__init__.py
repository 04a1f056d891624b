"""Services for the payment lifecycle."""

from .dynamodb import DynamoDBService
from .event_publisher import SNSEventPublisher
from .interfaces import PaymentEventPublisher, PaymentProvider, PaymentStore
from .mercadopago_client import MercadoPagoClient
from .payment_repository import PaymentRepository
from .payment_service import PaymentService
from .webhook_signature import WebhookSignatureVerifier

__all__ = [
    "DynamoDBService",
    "MercadoPagoClient",
    "PaymentEventPublisher",
    "PaymentProvider",
    "PaymentRepository",
    "PaymentService",
    "PaymentStore",
    "SNSEventPublisher",
    "WebhookSignatureVerifier",
]
