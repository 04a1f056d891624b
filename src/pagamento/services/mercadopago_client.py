"""Mercado Pago API client.

Creates in-person dynamic QR orders and fetches payment details for
webhook reconciliation. Uses a single httpx.Client, which is safe to
share across request-handling threads.
"""

import uuid
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from pagamento.models import (
    CreatePaymentRequest,
    ProviderError,
    ProviderPaymentDetails,
    QROrderRequest,
    QROrderResponse,
)
from pagamento.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.mercadopago.com"
IDEMPOTENCY_HEADER = "X-Idempotency-Key"


class MercadoPagoClient:
    """Client for the Mercado Pago REST API.

    Every call carries the bearer access token. Order creation attaches a
    fresh idempotency key so a caller may safely retry the same request;
    this client never retries on its own.

    Usage:
        client = MercadoPagoClient(access_token="APP_USR-...", pos_id="POS001")
        qr_data = client.create_qr_code_order(request)
    """

    def __init__(
        self,
        access_token: str,
        pos_id: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            access_token: Mercado Pago access token (bearer credential)
            pos_id: External POS identifier attached to QR orders
            base_url: API base URL
            timeout_seconds: Timeout applied to every request
            http_client: Preconfigured client (tests inject a MockTransport)
        """
        self._pos_id = pos_id
        self._http = http_client or httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self._http.headers["Authorization"] = f"Bearer {access_token}"

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "MercadoPagoClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def create_qr_code_order(self, request: CreatePaymentRequest) -> str:
        """Create a dynamic QR order for a payment request.

        Args:
            request: Validated create-payment request

        Returns:
            QR payload (``type_response.qr_data``) to render for the payer

        Raises:
            ProviderError: On transport failure, non-2xx response, or a
                response without QR data
        """
        order = QROrderRequest.from_payment_request(request, self._pos_id)
        idempotency_key = str(uuid.uuid4())

        response = self._send(
            "POST",
            "/v1/orders",
            json=order.model_dump(mode="json"),
            headers={IDEMPOTENCY_HEADER: idempotency_key},
        )
        order_response = self._parse(response, QROrderResponse)

        qr_data = order_response.type_response.qr_data
        if not qr_data:
            raise ProviderError(
                "mercadopago api error: order response has no qr_data",
                status_code=response.status_code,
                response_body=response.text,
            )

        logger.debug(
            "Mercado Pago order %s created for %s (idempotency key %s)",
            order_response.id,
            request.external_reference,
            idempotency_key,
        )
        return qr_data

    def get_payment_details(self, provider_payment_id: str) -> ProviderPaymentDetails:
        """Fetch a payment from Mercado Pago.

        Args:
            provider_payment_id: Mercado Pago payment ID (webhook ``data.id``)

        Returns:
            Payment ID, provider status and external reference

        Raises:
            ProviderError: On transport failure or non-2xx response
        """
        response = self._send("GET", f"/v1/payments/{provider_payment_id}")
        return self._parse(response, ProviderPaymentDetails)

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ProviderError(f"mercadopago request failed: {e}") from e

        if response.is_error:
            logger.error(
                "Mercado Pago %s %s returned %d: %s",
                method,
                url,
                response.status_code,
                response.text,
            )
            raise ProviderError(
                f"mercadopago api error: status {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    def _parse(self, response: httpx.Response, model: Any) -> Any:
        try:
            return model.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise ProviderError(
                f"mercadopago api error: unexpected response body ({e.error_count()} errors)",
                status_code=response.status_code,
                response_body=response.text,
            ) from e
