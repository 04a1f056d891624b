"""Shared API response models.

Domain models (Payment, WebhookNotification, ...) live in pagamento.models
and are reused directly by the routes. This module holds HTTP-layer
response bodies only.
"""

from typing import Literal

from pydantic import BaseModel

# Re-export for route `responses=` declarations
from pagamento.models.errors import ErrorResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "WebhookAck",
]


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: Literal["up"] = "up"


class WebhookAck(BaseModel):
    """Acknowledgement returned to Mercado Pago.

    Any 2xx stops provider retries, so this is returned for handled,
    ignored and unknown-reference notifications alike.
    """

    status: Literal["received"] = "received"
