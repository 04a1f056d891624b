"""API routes package.

Routers are organized by domain:

- health: Liveness probe (mounted at the root)
- payments: Payment creation and lookup (/v1)
- webhooks: Mercado Pago notifications (/v1)

All routers are registered in main.py.
"""

from pagamento_api.routes.health import router as health_router
from pagamento_api.routes.payments import router as payments_router
from pagamento_api.routes.webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "payments_router",
    "webhooks_router",
]
