"""DynamoDB-backed payment store."""

import datetime as dt
from decimal import Decimal, DecimalException
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from pagamento.models import Payment, PaymentStatus, StoreError
from pagamento.utils.logging import get_logger

from .dynamodb import DynamoDBService

logger = get_logger(__name__)

EXTERNAL_REFERENCE_INDEX = "ExternalReferenceIndex"

# Serialization failures (number out of DynamoDB range, unsupported type)
# surface from the client wrapper alongside AWS errors.
_WRITE_ERRORS = (BotoCoreError, ClientError, DecimalException, TypeError)


class PaymentRepository:
    """Persists payments keyed by ``id`` with a GSI on ``external_reference``.

    Every method is a single point operation. "Not found" is reported as
    None; any DynamoDB or transport failure is raised as StoreError.
    """

    def __init__(self, db: DynamoDBService) -> None:
        """Initialize payment repository.

        Args:
            db: DynamoDB service bound to the payments table
        """
        self.db = db

    def save(self, payment: Payment) -> None:
        """Store a payment record, replacing any item with the same id."""
        try:
            self.db.put_item(self._payment_to_item(payment))
        except _WRITE_ERRORS as e:
            raise StoreError(f"failed to save payment {payment.id}: {e}") from e

    def get_by_id(self, payment_id: str) -> Payment | None:
        """Get a payment by its local ID."""
        try:
            item = self.db.get_item({"id": payment_id})
        except (BotoCoreError, ClientError) as e:
            raise StoreError(f"failed to get payment {payment_id}: {e}") from e
        return self._item_to_payment(item) if item else None

    def get_by_external_reference(self, external_reference: str) -> Payment | None:
        """Get the payment for a service-order reference.

        Uniqueness of ``external_reference`` is not enforced; when several
        records share a reference the first item returned by the index wins.

        Args:
            external_reference: Caller-supplied correlation string

        Returns:
            Payment or None if no record carries the reference
        """
        try:
            items = self.db.query_by_gsi(
                EXTERNAL_REFERENCE_INDEX,
                "external_reference",
                external_reference,
            )
        except (BotoCoreError, ClientError) as e:
            raise StoreError(
                f"failed to query payments by external_reference {external_reference}: {e}"
            ) from e

        if not items:
            return None
        if len(items) > 1:
            logger.warning(
                "Multiple payments share external_reference %s, using %s",
                external_reference,
                items[0].get("id"),
            )
        return self._item_to_payment(items[0])

    def update_status(self, payment_id: str, status: PaymentStatus) -> None:
        """Write a new status and refresh ``updated_at``.

        The write is unconditional: last writer wins and terminal records
        can be overwritten.
        """
        now = dt.datetime.now(dt.UTC)
        try:
            self.db.update_item(
                {"id": payment_id},
                "SET #status = :status, updated_at = :updated_at",
                {
                    ":status": status.value,
                    ":updated_at": now.isoformat(),
                },
                {"#status": "status"},  # status is a reserved word
            )
        except _WRITE_ERRORS as e:
            raise StoreError(
                f"failed to update status of payment {payment_id}: {e}"
            ) from e

    # Conversion helpers

    def _payment_to_item(self, payment: Payment) -> dict[str, Any]:
        """Convert Payment model to DynamoDB item."""
        return {
            "id": payment.id,
            "external_reference": payment.external_reference,
            "amount": Decimal(payment.amount),
            "status": payment.status.value,
            "qr_code": payment.qr_code,
            "created_at": payment.created_at.isoformat(),
            "updated_at": payment.updated_at.isoformat(),
        }

    def _item_to_payment(self, item: dict[str, Any]) -> Payment:
        """Convert DynamoDB item to Payment model."""
        return Payment(
            id=item["id"],
            external_reference=item["external_reference"],
            amount=Decimal(item["amount"]),
            status=PaymentStatus(item["status"]),
            qr_code=item.get("qr_code", ""),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=dt.datetime.fromisoformat(item["updated_at"]),
        )
