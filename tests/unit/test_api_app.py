"""Tests for the FastAPI application wiring.

Covers health, route registration, correlation IDs and error mapping.
Payment and webhook behavior is covered by the contract tests.
"""

import pytest
from fastapi.testclient import TestClient

from pagamento.models import PaymentNotFoundError, StoreError
from pagamento_api.dependencies import get_payment_service
from pagamento_api.exceptions import ERROR_CODE_TO_HTTP_STATUS, get_http_status_for_error
from pagamento_api.main import app


class _FailingService:
    def __init__(self, error: Exception) -> None:
        self.error = error

    def get_payment(self, payment_id: str):
        raise self.error


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


class TestHealthCheck:
    def test_health_returns_up(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "up"}


class TestRoutesRegistered:
    def test_routes(self):
        route_paths = {route.path for route in app.routes}

        assert "/health" in route_paths
        assert "/v1/pagamentos" in route_paths
        assert "/v1/pagamentos/{payment_id}" in route_paths
        assert "/v1/webhooks/mercadopago" in route_paths

    def test_openapi_schema_builds(self, client: TestClient):
        schema = client.get("/openapi.json").json()

        assert schema["info"]["title"] == "Pagamento API"
        assert "/v1/webhooks/mercadopago" in schema["paths"]


class TestCorrelationId:
    def test_generated_when_absent(self, client: TestClient):
        response = client.get("/health")

        assert response.headers["X-Correlation-ID"]

    def test_echoes_incoming_header(self, client: TestClient):
        response = client.get("/health", headers={"X-Correlation-ID": "req-123"})

        assert response.headers["X-Correlation-ID"] == "req-123"

    def test_falls_back_to_provider_request_id(self, client: TestClient):
        response = client.post(
            "/v1/webhooks/mercadopago",
            json={"type": "merchant_order", "data": {"id": "1"}},
            headers={"x-request-id": "mp-req-1"},
        )

        assert response.headers["X-Correlation-ID"] == "mp-req-1"


class TestErrorMapping:
    def test_every_code_has_status(self):
        from pagamento.models import ErrorCode

        assert set(ERROR_CODE_TO_HTTP_STATUS) == set(ErrorCode)

    def test_not_found_is_404(self, client: TestClient):
        app.dependency_overrides[get_payment_service] = lambda: _FailingService(
            PaymentNotFoundError("missing")
        )

        response = client.get("/v1/pagamentos/missing")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Payment not found",
            "error_code": "ERR_PAYMENT_NOT_FOUND",
            "details": {"payment_id": "missing"},
        }

    def test_store_error_is_500(self, client: TestClient):
        app.dependency_overrides[get_payment_service] = lambda: _FailingService(
            StoreError("failed to get payment")
        )

        response = client.get("/v1/pagamentos/x")

        assert response.status_code == 500
        assert response.json()["error_code"] == "ERR_STORE"

    def test_unexpected_exception_is_500(self, client: TestClient):
        app.dependency_overrides[get_payment_service] = lambda: _FailingService(
            RuntimeError("boom")
        )

        response = client.get("/v1/pagamentos/x")

        assert response.status_code == 500
        assert response.json() == {
            "error": "An unexpected error occurred",
            "error_code": "ERR_INTERNAL",
        }

    def test_unknown_code_defaults_to_500(self):
        assert get_http_status_for_error("ERR_SOMETHING") == 500  # type: ignore[arg-type]
