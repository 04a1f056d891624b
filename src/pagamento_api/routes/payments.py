"""Payment endpoints.

Provides REST endpoints for:
- Creating a QR payment for a service order
- Getting a payment by its local ID

The create endpoint is not authenticated; it is expected to be reachable
only from the workshop's internal services.
"""

from fastapi import APIRouter, Depends
from starlette.status import HTTP_201_CREATED

from pagamento.models import CreatePaymentRequest, Payment
from pagamento.services import PaymentService
from pagamento_api.dependencies import get_payment_service
from pagamento_api.models.common import ErrorResponse

router = APIRouter(tags=["pagamentos"])


@router.post(
    "/pagamentos",
    summary="Create payment",
    description="""
Create a Mercado Pago dynamic QR order for a service order and store a
local payment record in `pending` status.

**Notes:**
- `amount` must be greater than zero
- The returned `qr_code` is the payload to render as a QR code
- If Mercado Pago fails, nothing is stored
""",
    response_model=Payment,
    status_code=HTTP_201_CREATED,
    responses={
        201: {"description": "Payment created"},
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        500: {"description": "Provider or store failure", "model": ErrorResponse},
    },
)
def create_payment(
    body: CreatePaymentRequest,
    service: PaymentService = Depends(get_payment_service),
) -> Payment:
    return service.create_payment(body)


@router.get(
    "/pagamentos/{payment_id}",
    summary="Get payment",
    response_model=Payment,
    responses={
        404: {"description": "Payment not found", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
)
def get_payment(
    payment_id: str,
    service: PaymentService = Depends(get_payment_service),
) -> Payment:
    return service.get_payment(payment_id)
