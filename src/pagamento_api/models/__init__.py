"""API-specific request/response models.

Modules:
- common: Error wrapper, health and webhook acknowledgement bodies
"""

from pagamento_api.models.common import ErrorResponse, HealthResponse, WebhookAck

__all__ = ["ErrorResponse", "HealthResponse", "WebhookAck"]
