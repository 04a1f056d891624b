"""Payment model and related request types."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Upper bound accepted for a charge; well inside the DynamoDB number range.
MAX_AMOUNT = Decimal("999999999999.99")

# Monetary values are Decimal in memory and in DynamoDB, plain numbers on the wire.
Amount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class PaymentStatus(str, Enum):
    """Local payment lifecycle status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (PaymentStatus.APPROVED, PaymentStatus.REJECTED)


class Payment(BaseModel):
    """A payment for a workshop service order.

    Created in PENDING status once Mercado Pago has issued a dynamic QR
    code, then moved to APPROVED or REJECTED by provider webhooks.
    """

    id: str = Field(..., description="Locally generated payment ID (UUID)")
    external_reference: str = Field(
        ...,
        min_length=1,
        description="Caller-supplied correlation string (service-order number)",
        examples=["ORDER-1"],
    )
    amount: Amount = Field(..., ge=0, description="Payment amount")
    status: PaymentStatus = Field(..., description="Payment status")
    qr_code: str = Field(
        default="",
        description="QR payload issued by Mercado Pago",
        examples=["00020126580014br.gov.bcb.pix..."],
    )
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last status change (UTC)")

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


class CreatePaymentRequest(BaseModel):
    """Request to create a QR payment for a service order."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "external_reference": "ORDER-1",
                    "amount": 10.5,
                    "description": "Oil change",
                }
            ]
        },
    )

    external_reference: str = Field(
        ...,
        min_length=1,
        description="Service-order reference the payment belongs to",
    )
    amount: Amount = Field(..., gt=0, le=MAX_AMOUNT, description="Amount to charge")
    description: str = Field(
        ...,
        min_length=1,
        description="Description shown to the payer",
    )
