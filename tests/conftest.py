"""Pytest configuration and fixtures for the payment service tests.

This module provides reusable fixtures for testing:
- In-memory fakes for the store, the Mercado Pago client and the publisher
- DynamoDB mocking with moto
- Sample requests and webhook notifications
"""

import datetime as dt
import os
from collections.abc import Generator
from decimal import Decimal
from typing import Any

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("ENV", "production")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from pagamento.models import (  # noqa: E402
    CreatePaymentRequest,
    Payment,
    PaymentProcessedEvent,
    PaymentStatus,
    ProviderPaymentDetails,
    WebhookNotification,
)
from pagamento.services.payment_repository import EXTERNAL_REFERENCE_INDEX  # noqa: E402

TEST_TABLE_NAME = "test-payments"
TEST_REGION = "us-east-1"
TEST_QR_DATA = "00020101021243650016COM.MERCADOLIBRE02013063638f1192a"


# === Service cache ===


@pytest.fixture(autouse=True)
def reset_service_cache() -> Generator[None, None, None]:
    """Clear cached settings and service instances around each test."""
    from pagamento_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === In-memory fakes ===


class InMemoryPaymentStore:
    """Dict-backed PaymentStore."""

    def __init__(self) -> None:
        self.payments: dict[str, Payment] = {}
        self.error: Exception | None = None
        self.status_updates: list[tuple[str, PaymentStatus]] = []

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def save(self, payment: Payment) -> None:
        self._check()
        self.payments[payment.id] = payment

    def get_by_id(self, payment_id: str) -> Payment | None:
        self._check()
        return self.payments.get(payment_id)

    def get_by_external_reference(self, external_reference: str) -> Payment | None:
        self._check()
        for payment in self.payments.values():
            if payment.external_reference == external_reference:
                return payment
        return None

    def update_status(self, payment_id: str, status: PaymentStatus) -> None:
        self._check()
        self.status_updates.append((payment_id, status))
        payment = self.payments[payment_id]
        self.payments[payment_id] = payment.model_copy(
            update={"status": status, "updated_at": dt.datetime.now(dt.UTC)}
        )


class FakeMercadoPago:
    """PaymentProvider returning canned responses."""

    def __init__(self) -> None:
        self.qr_data = TEST_QR_DATA
        self.details: dict[str, ProviderPaymentDetails] = {}
        self.error: Exception | None = None
        self.orders: list[CreatePaymentRequest] = []
        self.detail_calls: list[str] = []

    def create_qr_code_order(self, request: CreatePaymentRequest) -> str:
        self.orders.append(request)
        if self.error is not None:
            raise self.error
        return self.qr_data

    def get_payment_details(self, provider_payment_id: str) -> ProviderPaymentDetails:
        self.detail_calls.append(provider_payment_id)
        if self.error is not None:
            raise self.error
        return self.details[provider_payment_id]

    def set_payment(self, provider_payment_id: str, status: str, external_reference: str) -> None:
        self.details[provider_payment_id] = ProviderPaymentDetails(
            id=provider_payment_id,
            status=status,
            external_reference=external_reference,
        )


class RecordingPublisher:
    """PaymentEventPublisher that keeps published events."""

    def __init__(self) -> None:
        self.events: list[PaymentProcessedEvent] = []
        self.error: Exception | None = None

    def publish_payment_processed(self, event: PaymentProcessedEvent) -> str | None:
        if self.error is not None:
            raise self.error
        self.events.append(event)
        return f"msg-{len(self.events)}"


@pytest.fixture
def store() -> InMemoryPaymentStore:
    return InMemoryPaymentStore()


@pytest.fixture
def provider() -> FakeMercadoPago:
    return FakeMercadoPago()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


# === Sample data ===


@pytest.fixture
def create_request() -> CreatePaymentRequest:
    return CreatePaymentRequest(
        external_reference="ORDER-1",
        amount=Decimal("10.50"),
        description="Oil change",
    )


@pytest.fixture
def pending_payment() -> Payment:
    now = dt.datetime(2025, 1, 1, 10, 0, tzinfo=dt.UTC)
    return Payment(
        id="b3c1f6d2-0000-4000-8000-000000000001",
        external_reference="ORDER-1",
        amount=Decimal("10.50"),
        status=PaymentStatus.PENDING,
        qr_code=TEST_QR_DATA,
        created_at=now,
        updated_at=now,
    )


def _notification_body(
    data_id: str = "999",
    notification_type: str = "payment",
    action: str = "payment.updated",
) -> dict[str, Any]:
    """Build a Mercado Pago webhook body."""
    return {
        "id": 12345,
        "live_mode": False,
        "type": notification_type,
        "date_created": "2025-01-01T10:00:00.000-03:00",
        "user_id": 44444,
        "api_version": "v1",
        "action": action,
        "data": {"id": data_id},
    }


@pytest.fixture
def notification_body() -> Any:
    """Factory for webhook bodies: notification_body(data_id="1", notification_type="payment")."""
    return _notification_body


@pytest.fixture
def payment_notification() -> WebhookNotification:
    return WebhookNotification.model_validate(_notification_body())


# === DynamoDB Fixtures ===


@pytest.fixture
def payments_table() -> Generator[Any, None, None]:
    """Create a mocked payments table with the external_reference GSI."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name=TEST_REGION)
        table = dynamodb.create_table(
            TableName=TEST_TABLE_NAME,
            KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": "id", "AttributeType": "S"},
                {"AttributeName": "external_reference", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": EXTERNAL_REFERENCE_INDEX,
                    "KeySchema": [
                        {"AttributeName": "external_reference", "KeyType": "HASH"},
                    ],
                    "Projection": {"ProjectionType": "ALL"},
                },
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        yield table
