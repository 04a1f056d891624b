"""Events published to downstream consumers."""

from datetime import datetime

from pydantic import BaseModel, Field

from .payment import PaymentStatus

PAYMENT_PROCESSED_EVENT_TYPE = "payment_processed"


class PaymentProcessedEvent(BaseModel):
    """Emitted after a webhook-driven status write succeeds.

    Delivery is at-least-once and carries no deduplication key, so
    consumers must treat (payment_id, status) as idempotent.
    """

    payment_id: str
    external_reference: str
    status: PaymentStatus
    processed_at: datetime = Field(..., description="When the status was written (UTC)")
