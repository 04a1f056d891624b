"""Mercado Pago wire models.

Covers the QR order request/response used to create payments, the
payment details returned by ``GET /v1/payments/{id}`` and the webhook
notification body.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .payment import Amount, CreatePaymentRequest, PaymentStatus

PAYMENT_NOTIFICATION_TYPE = "payment"

# Provider status -> local status. Anything not listed maps to PENDING.
PROVIDER_STATUS_MAP: dict[str, PaymentStatus] = {
    "approved": PaymentStatus.APPROVED,
    "rejected": PaymentStatus.REJECTED,
    "cancelled": PaymentStatus.REJECTED,
}


def map_provider_status(provider_status: str) -> PaymentStatus:
    """Map a Mercado Pago payment status to the local status.

    Args:
        provider_status: Status string reported by Mercado Pago

    Returns:
        APPROVED for "approved", REJECTED for "rejected"/"cancelled",
        PENDING for anything else (in_process, authorized, refunded, ...).
    """
    return PROVIDER_STATUS_MAP.get(provider_status, PaymentStatus.PENDING)


def _coerce_id(value: Any) -> Any:
    # Mercado Pago sends numeric IDs in some payloads and strings in others.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# === Order creation ===


class OrderItem(BaseModel):
    title: str
    unit_price: Amount
    quantity: int = 1
    unit_measure: str = "unit"


class QRConfig(BaseModel):
    external_pos_id: str
    mode: str = "dynamic"


class OrderConfig(BaseModel):
    qr: QRConfig


class TransactionPayment(BaseModel):
    amount: Amount


class Transactions(BaseModel):
    payments: list[TransactionPayment]


class QROrderRequest(BaseModel):
    """Body of ``POST /v1/orders`` for an in-person dynamic QR order."""

    type: str = "qr"
    external_reference: str
    total_amount: Amount
    description: str
    items: list[OrderItem]
    config: OrderConfig
    transactions: Transactions

    @classmethod
    def from_payment_request(
        cls, request: CreatePaymentRequest, pos_id: str
    ) -> "QROrderRequest":
        """Build a single-item order whose line matches the total.

        Args:
            request: Incoming create-payment request
            pos_id: External POS identifier the QR is bound to

        Returns:
            Order body ready for serialization
        """
        return cls(
            external_reference=request.external_reference,
            total_amount=request.amount,
            description=request.description,
            items=[
                OrderItem(title=request.description, unit_price=request.amount),
            ],
            config=OrderConfig(qr=QRConfig(external_pos_id=pos_id)),
            transactions=Transactions(
                payments=[TransactionPayment(amount=request.amount)],
            ),
        )


class TypeResponse(BaseModel):
    qr_data: str = ""


class QROrderResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    type_response: TypeResponse = Field(default_factory=TypeResponse)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _coerce_id(value)


# === Payment details ===


class ProviderPaymentDetails(BaseModel):
    """Subset of ``GET /v1/payments/{id}`` used for reconciliation."""

    model_config = ConfigDict(extra="ignore")

    id: str
    status: str = ""
    external_reference: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _coerce_id(value)

    @field_validator("external_reference", "status", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def local_status(self) -> PaymentStatus:
        return map_provider_status(self.status)


# === Webhooks ===


class WebhookData(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Provider resource ID")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _coerce_id(value)


class WebhookNotification(BaseModel):
    """Webhook notification sent by Mercado Pago.

    Only ``type == "payment"`` notifications are reconciled; everything
    else is acknowledged and dropped.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "examples": [
                {
                    "id": 12345,
                    "live_mode": True,
                    "type": "payment",
                    "date_created": "2025-01-01T10:00:00.000-03:00",
                    "user_id": "44444",
                    "api_version": "v1",
                    "action": "payment.updated",
                    "data": {"id": "999999999"},
                }
            ]
        },
    )

    id: Any = None
    live_mode: bool = False
    type: str = Field(..., description="Notification topic, e.g. payment")
    date_created: str | None = None
    user_id: str | None = None
    api_version: str | None = None
    action: str = ""
    data: WebhookData

    @field_validator("user_id", mode="before")
    @classmethod
    def coerce_user_id(cls, value: Any) -> Any:
        return _coerce_id(value)

    @property
    def is_payment(self) -> bool:
        return self.type == PAYMENT_NOTIFICATION_TYPE
