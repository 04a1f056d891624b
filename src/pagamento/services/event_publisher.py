"""SNS publisher for payment events."""

from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from pagamento.models import (
    PAYMENT_PROCESSED_EVENT_TYPE,
    PaymentProcessedEvent,
    PublishError,
)
from pagamento.utils.logging import get_logger

logger = get_logger(__name__)


class SNSEventPublisher:
    """Publishes payment events to an SNS topic.

    Messages carry an ``event_type`` attribute so subscribers can filter
    on it. SNS delivery is at-least-once; no deduplication ID is sent.
    """

    def __init__(
        self,
        topic_arn: str,
        *,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        timeout_seconds: float | None = None,
        client: Any = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            topic_arn: Destination SNS topic ARN
            region_name: AWS region; falls back to the boto3 default chain
            endpoint_url: Endpoint override (LocalStack)
            timeout_seconds: Connect/read timeout for publish calls
            client: Preconfigured boto3 SNS client
        """
        self.topic_arn = topic_arn

        if client is None:
            config = None
            if timeout_seconds:
                config = Config(
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                )
            client = boto3.client(
                "sns",
                region_name=region_name,
                endpoint_url=endpoint_url or None,
                config=config,
            )
        self._client = client

    def publish_payment_processed(self, event: PaymentProcessedEvent) -> str | None:
        """Publish a payment_processed event.

        Args:
            event: Event to serialize as the message body

        Returns:
            SNS MessageId

        Raises:
            PublishError: If SNS rejects the message or is unreachable
        """
        try:
            response = self._client.publish(
                TopicArn=self.topic_arn,
                Message=event.model_dump_json(),
                MessageAttributes={
                    "event_type": {
                        "DataType": "String",
                        "StringValue": PAYMENT_PROCESSED_EVENT_TYPE,
                    },
                },
            )
        except (BotoCoreError, ClientError) as e:
            raise PublishError(
                f"failed to publish {PAYMENT_PROCESSED_EVENT_TYPE} for payment {event.payment_id}: {e}"
            ) from e

        message_id: str | None = response.get("MessageId")
        logger.debug("Published %s as %s", PAYMENT_PROCESSED_EVENT_TYPE, message_id)
        return message_id
