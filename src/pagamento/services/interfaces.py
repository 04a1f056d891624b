"""Capability contracts the lifecycle engine depends on.

PaymentService only talks to these protocols, so it can run against the
DynamoDB/Mercado Pago/SNS implementations in production and against
in-memory substitutes in tests.
"""

from typing import Protocol

from pagamento.models import (
    CreatePaymentRequest,
    Payment,
    PaymentProcessedEvent,
    PaymentStatus,
    ProviderPaymentDetails,
)


class PaymentStore(Protocol):
    """Persistence of payment records."""

    def save(self, payment: Payment) -> None: ...

    def get_by_id(self, payment_id: str) -> Payment | None: ...

    def get_by_external_reference(self, external_reference: str) -> Payment | None: ...

    def update_status(self, payment_id: str, status: PaymentStatus) -> None: ...


class PaymentProvider(Protocol):
    """Outbound calls to the payment provider."""

    def create_qr_code_order(self, request: CreatePaymentRequest) -> str: ...

    def get_payment_details(self, provider_payment_id: str) -> ProviderPaymentDetails: ...


class PaymentEventPublisher(Protocol):
    """Emission of payment events to downstream consumers."""

    def publish_payment_processed(self, event: PaymentProcessedEvent) -> str | None: ...
