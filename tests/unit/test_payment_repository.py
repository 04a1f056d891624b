"""Unit tests for PaymentRepository against a moto-mocked DynamoDB table."""

import datetime as dt
import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from pagamento.models import CreatePaymentRequest, PaymentStatus, StoreError
from pagamento.services import DynamoDBService, PaymentRepository, PaymentService

TEST_TABLE_NAME = "test-payments"


@pytest.fixture
def repository(payments_table) -> PaymentRepository:
    db = DynamoDBService(TEST_TABLE_NAME, region_name="us-east-1")
    return PaymentRepository(db)


class TestSaveAndGet:
    def test_round_trips_all_fields(self, repository, pending_payment):
        repository.save(pending_payment)

        loaded = repository.get_by_id(pending_payment.id)

        assert loaded == pending_payment

    def test_item_layout(self, repository, payments_table, pending_payment):
        """Amount is stored as a number and timestamps as ISO-8601 strings."""
        repository.save(pending_payment)

        item = payments_table.get_item(Key={"id": pending_payment.id})["Item"]
        assert item["amount"] == Decimal("10.50")
        assert item["status"] == "pending"
        assert item["created_at"] == "2025-01-01T10:00:00+00:00"

    def test_missing_id_returns_none(self, repository):
        assert repository.get_by_id("missing") is None


class TestGetByExternalReference:
    def test_finds_payment(self, repository, pending_payment):
        repository.save(pending_payment)

        found = repository.get_by_external_reference("ORDER-1")

        assert found is not None
        assert found.id == pending_payment.id

    def test_unknown_reference_returns_none(self, repository, pending_payment):
        repository.save(pending_payment)

        assert repository.get_by_external_reference("ORDER-2") is None

    def test_duplicates_return_one_record(self, repository, pending_payment):
        repository.save(pending_payment)
        repository.save(pending_payment.model_copy(update={"id": "second"}))

        found = repository.get_by_external_reference("ORDER-1")

        assert found is not None
        assert found.id in {pending_payment.id, "second"}


class TestUpdateStatus:
    def test_sets_status_and_updated_at(self, repository, pending_payment):
        repository.save(pending_payment)

        repository.update_status(pending_payment.id, PaymentStatus.APPROVED)

        loaded = repository.get_by_id(pending_payment.id)
        assert loaded is not None
        assert loaded.status == PaymentStatus.APPROVED
        assert loaded.updated_at > pending_payment.updated_at
        assert loaded.created_at == pending_payment.created_at
        assert loaded.qr_code == pending_payment.qr_code

    def test_overwrites_terminal_status(self, repository, pending_payment):
        repository.save(pending_payment.model_copy(update={"status": PaymentStatus.REJECTED}))

        repository.update_status(pending_payment.id, PaymentStatus.PENDING)

        loaded = repository.get_by_id(pending_payment.id)
        assert loaded is not None
        assert loaded.status == PaymentStatus.PENDING


class TestOutOfRangeAmount:
    """Numbers DynamoDB cannot hold are reported as StoreError."""

    def test_save_raises_store_error(self, repository, pending_payment):
        payment = pending_payment.model_copy(update={"amount": Decimal("1E+200")})

        with pytest.raises(StoreError):
            repository.save(payment)

        assert repository.get_by_id(payment.id) is None

    def test_create_payment_logs_orphan_order(self, repository, provider, caplog):
        service = PaymentService(
            repository=repository,
            provider=provider,
            logger=logging.getLogger("tests.payment_repository"),
        )
        # Bypasses request validation to reach the store with the raw value
        request = CreatePaymentRequest.model_construct(
            external_reference="ORDER-1",
            amount=Decimal("1E+200"),
            description="Oil change",
        )

        with caplog.at_level(logging.ERROR, logger="tests.payment_repository"):
            with pytest.raises(StoreError):
                service.create_payment(request)

        assert any("orphan_provider_order=True" in r.getMessage() for r in caplog.records)


class TestConcurrentAccess:
    def test_parallel_saves_share_one_service(self, repository, pending_payment):
        """One DynamoDBService instance serves many request threads."""
        payments = [
            pending_payment.model_copy(update={"id": f"pay-{i}", "external_reference": f"ORDER-{i}"})
            for i in range(20)
        ]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(repository.save, payments))

        for payment in payments:
            assert repository.get_by_id(payment.id) == payment


class TestStoreErrors:
    """AWS failures surface as StoreError."""

    @pytest.fixture
    def failing_repository(self) -> PaymentRepository:
        db = MagicMock(spec=DynamoDBService)
        error = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
            "Query",
        )
        db.put_item.side_effect = error
        db.get_item.side_effect = EndpointConnectionError(endpoint_url="http://localhost:4566")
        db.query_by_gsi.side_effect = error
        db.update_item.side_effect = error
        return PaymentRepository(db)

    def test_save(self, failing_repository, pending_payment):
        with pytest.raises(StoreError):
            failing_repository.save(pending_payment)

    def test_get_by_id(self, failing_repository):
        with pytest.raises(StoreError):
            failing_repository.get_by_id("x")

    def test_get_by_external_reference(self, failing_repository):
        with pytest.raises(StoreError):
            failing_repository.get_by_external_reference("ORDER-1")

    def test_update_status(self, failing_repository):
        with pytest.raises(StoreError) as exc_info:
            failing_repository.update_status("x", PaymentStatus.APPROVED)

        assert "x" in exc_info.value.message

    def test_missing_table_raises(self, payments_table):
        db = DynamoDBService("does-not-exist", region_name="us-east-1")

        with pytest.raises(StoreError):
            PaymentRepository(db).get_by_id("x")


def test_item_timestamps_parse_with_timezone(repository, pending_payment):
    repository.save(pending_payment)

    loaded = repository.get_by_id(pending_payment.id)

    assert loaded is not None
    assert loaded.created_at.tzinfo is not None
    assert loaded.created_at == dt.datetime(2025, 1, 1, 10, 0, tzinfo=dt.UTC)
