"""Webhook endpoints for external service integrations.

Provides endpoints for:
- Mercado Pago payment notifications

These endpoints do NOT use client authentication; notifications are
verified with the x-signature HMAC instead (skipped when no webhook
secret is configured).
"""

from fastapi import APIRouter, Depends, Header

from pagamento.models import SignatureError, WebhookNotification
from pagamento.services import PaymentService, WebhookSignatureVerifier
from pagamento.services.webhook_signature import SIGNATURE_HEADER
from pagamento.utils.logging import get_logger
from pagamento_api.dependencies import get_payment_service, get_webhook_verifier
from pagamento_api.models.common import ErrorResponse, WebhookAck

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post(
    "/webhooks/mercadopago",
    summary="Receive Mercado Pago notifications",
    description="""
Endpoint for Mercado Pago webhook notifications.

`payment` notifications are reconciled: the payment is fetched from
Mercado Pago, the local record matching its `external_reference` gets the
mapped status, and a `payment_processed` event is published.

Other notification types, and payments unknown locally, are acknowledged
without changes.
""",
    response_model=WebhookAck,
    responses={
        200: {"description": "Notification received"},
        400: {"description": "Malformed body", "model": ErrorResponse},
        401: {"description": "Invalid signature", "model": ErrorResponse},
        500: {"description": "Provider or store failure; Mercado Pago will retry", "model": ErrorResponse},
    },
)
def handle_mercadopago_webhook(
    notification: WebhookNotification,
    x_signature: str | None = Header(default=None, alias=SIGNATURE_HEADER),
    verifier: WebhookSignatureVerifier = Depends(get_webhook_verifier),
    service: PaymentService = Depends(get_payment_service),
) -> WebhookAck:
    try:
        verifier.verify(notification.data.id, x_signature)
    except SignatureError as e:
        logger.warning(
            "Invalid webhook signature detected: id=%s signature=%s reason=%s",
            notification.data.id,
            x_signature,
            e.reason,
        )
        raise

    service.process_webhook(notification)
    return WebhookAck()
