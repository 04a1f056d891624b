"""Payment lifecycle engine.

Orchestrates payment creation (Mercado Pago QR order + local record) and
webhook reconciliation (provider status -> local status -> event).

State machine for a payment:

    (none) --create--> pending
    pending --webhook(approved)--> approved
    pending --webhook(rejected|cancelled)--> rejected
    * --webhook(other)--> pending

The mapped status is always written; transitions are not forced forward,
so a late notification mapping to pending overwrites a terminal status.
"""

import datetime as dt
import logging
import uuid

from pagamento.models import (
    CreatePaymentRequest,
    Payment,
    PaymentNotFoundError,
    PaymentProcessedEvent,
    PaymentStatus,
    ProviderError,
    StoreError,
    WebhookNotification,
)
from pagamento.utils.logging import get_logger, log_payment_operation, log_webhook_event

from .interfaces import PaymentEventPublisher, PaymentProvider, PaymentStore


class PaymentService:
    """Creates payments and reconciles them from provider webhooks.

    Holds no per-payment state; the store is the only coordination point,
    so one instance is shared by all request handlers.
    """

    def __init__(
        self,
        repository: PaymentStore,
        provider: PaymentProvider,
        publisher: PaymentEventPublisher | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize payment service.

        Args:
            repository: Payment store
            provider: Payment provider client
            publisher: Event publisher; event emission is skipped when None
            logger: Logger to write to (defaults to this module's logger)
        """
        self.repository = repository
        self.provider = provider
        self.publisher = publisher
        self.logger = logger or get_logger(__name__)

    def create_payment(self, request: CreatePaymentRequest) -> Payment:
        """Create a QR payment for a service order.

        The provider order is created first; nothing is stored if it fails.
        If the store write fails afterwards the provider order is left
        orphaned (there is no compensating cancel).

        Args:
            request: Validated create-payment request

        Returns:
            Stored payment in PENDING status with its QR payload

        Raises:
            ProviderError: If Mercado Pago rejects or cannot be reached
            StoreError: If the payment record cannot be persisted
        """
        log_payment_operation(
            self.logger,
            "create_payment",
            external_reference=request.external_reference,
            amount=request.amount,
        )

        try:
            qr_code = self.provider.create_qr_code_order(request)
        except ProviderError as e:
            log_payment_operation(
                self.logger,
                "create_qr_code_order",
                external_reference=request.external_reference,
                error=str(e),
            )
            raise

        now = dt.datetime.now(dt.UTC)
        payment = Payment(
            id=str(uuid.uuid4()),
            external_reference=request.external_reference,
            amount=request.amount,
            status=PaymentStatus.PENDING,
            qr_code=qr_code,
            created_at=now,
            updated_at=now,
        )

        try:
            self.repository.save(payment)
        except StoreError as e:
            log_payment_operation(
                self.logger,
                "save_payment",
                payment_id=payment.id,
                external_reference=payment.external_reference,
                error=str(e),
                orphan_provider_order=True,
            )
            raise

        log_payment_operation(
            self.logger,
            "payment_created",
            payment_id=payment.id,
            external_reference=payment.external_reference,
            status=payment.status.value,
        )
        return payment

    def get_payment(self, payment_id: str) -> Payment:
        """Get a payment by its local ID.

        Raises:
            PaymentNotFoundError: If no record exists
            StoreError: If the store cannot be read
        """
        payment = self.repository.get_by_id(payment_id)
        if payment is None:
            raise PaymentNotFoundError(payment_id)
        return payment

    def process_webhook(self, notification: WebhookNotification) -> None:
        """Reconcile a local payment from a provider notification.

        Non-payment notifications and notifications for payments unknown
        locally are acknowledged without side effects. Event publishing
        failures are logged and swallowed: the stored status is the source
        of truth and a provider retry must not be triggered by them.

        Args:
            notification: Authenticated webhook notification

        Raises:
            ProviderError: If payment details cannot be fetched
            StoreError: If the lookup or status write fails
        """
        data_id = notification.data.id
        log_webhook_event(
            self.logger,
            notification.type,
            data_id,
            action=notification.action,
            result="received",
        )

        if not notification.is_payment:
            log_webhook_event(self.logger, notification.type, data_id, result="ignored")
            return

        try:
            details = self.provider.get_payment_details(data_id)
        except ProviderError as e:
            log_webhook_event(
                self.logger,
                notification.type,
                data_id,
                result="error",
                error=f"failed to get payment details from mercadopago: {e}",
            )
            raise

        self.logger.info(
            "Mercado Pago payment %s has status %s (external_reference=%s)",
            data_id,
            details.status,
            details.external_reference,
        )

        try:
            payment = self.repository.get_by_external_reference(details.external_reference)
        except StoreError as e:
            log_webhook_event(
                self.logger,
                notification.type,
                data_id,
                external_reference=details.external_reference,
                result="error",
                error=str(e),
            )
            raise

        if payment is None:
            log_webhook_event(
                self.logger,
                notification.type,
                data_id,
                external_reference=details.external_reference,
                result="not_found",
            )
            return

        new_status = details.local_status
        if payment.is_terminal and new_status != payment.status:
            self.logger.warning(
                "Payment %s is %s, overwriting with %s",
                payment.id,
                payment.status.value,
                new_status.value,
            )

        try:
            self.repository.update_status(payment.id, new_status)
        except StoreError as e:
            log_payment_operation(
                self.logger,
                "update_status",
                payment_id=payment.id,
                status=new_status.value,
                error=str(e),
            )
            raise

        log_webhook_event(
            self.logger,
            notification.type,
            data_id,
            payment_id=payment.id,
            external_reference=payment.external_reference,
            result="updated",
            new_status=new_status.value,
        )

        self._publish_processed(payment, new_status)

    def _publish_processed(self, payment: Payment, status: PaymentStatus) -> None:
        if self.publisher is None:
            self.logger.warning(
                "No event publisher configured, payment_processed for %s not emitted",
                payment.id,
            )
            return

        event = PaymentProcessedEvent(
            payment_id=payment.id,
            external_reference=payment.external_reference,
            status=status,
            processed_at=dt.datetime.now(dt.UTC),
        )
        try:
            self.publisher.publish_payment_processed(event)
        except Exception as e:
            log_payment_operation(
                self.logger,
                "publish_payment_processed",
                payment_id=payment.id,
                status=status.value,
                error=str(e),
            )
            return

        log_payment_operation(
            self.logger,
            "publish_payment_processed",
            payment_id=payment.id,
            status=status.value,
        )
