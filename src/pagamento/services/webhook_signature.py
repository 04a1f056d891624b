"""Mercado Pago webhook signature verification.

Mercado Pago signs notifications with HMAC-SHA256 and sends the result in
the ``x-signature`` header as ``ts=<unix seconds>,v1=<hex digest>``. The
signed manifest is ``id:<data.id>;ts:<ts>;``.

The timestamp is part of the MAC but its age is not checked, so a
captured notification can be replayed.
"""

import hashlib
import hmac

from pagamento.models import SignatureError
from pagamento.utils.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "x-signature"


def parse_signature_header(header: str) -> dict[str, str]:
    """Parse ``key=value`` pairs from a signature header.

    Parts that are not exactly one ``key=value`` pair are skipped. Keys and
    values are taken verbatim, so "ts=1, v1=abc" yields the key " v1".

    Args:
        header: Raw header value, e.g. "ts=1704067200,v1=abc123"

    Returns:
        Mapping of keys to values
    """
    parts: dict[str, str] = {}
    for part in header.split(","):
        kv = part.split("=")
        if len(kv) != 2:
            continue
        parts[kv[0]] = kv[1]
    return parts


def build_manifest(data_id: str, ts: str) -> str:
    return f"id:{data_id};ts:{ts};"


def compute_signature(secret: str, data_id: str, ts: str) -> str:
    """Compute the lowercase hex HMAC-SHA256 of the manifest.

    Args:
        secret: Shared webhook secret
        data_id: Notification ``data.id``
        ts: Timestamp from the signature header

    Returns:
        Hex digest
    """
    return hmac.new(
        secret.encode("utf-8"),
        build_manifest(data_id, ts).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


class WebhookSignatureVerifier:
    """Verifies signed Mercado Pago notifications.

    When no secret is configured verification is disabled and every
    notification passes. This exists for local development only.
    """

    def __init__(self, secret: str | None) -> None:
        self._secret = secret or ""
        if not self.enabled:
            logger.warning(
                "MERCADO_PAGO_WEBHOOK_SECRET is not set, webhook signatures will not be verified"
            )

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    def verify(self, data_id: str, signature_header: str | None) -> None:
        """Verify a notification signature.

        Args:
            data_id: Notification ``data.id``
            signature_header: Raw ``x-signature`` header value

        Raises:
            SignatureError: If the header is missing, incomplete, or the
                digest does not match
        """
        if not self.enabled:
            return

        if not signature_header:
            raise SignatureError("missing x-signature header")

        parts = parse_signature_header(signature_header)
        ts = parts.get("ts", "")
        received = parts.get("v1", "")
        if not ts or not received:
            raise SignatureError("x-signature header lacks ts or v1")

        expected = compute_signature(self._secret, data_id, ts)

        # compare_digest runs in time independent of where the inputs differ
        if not hmac.compare_digest(
            received.encode("utf-8"), expected.encode("utf-8")
        ):
            raise SignatureError("signature mismatch")
