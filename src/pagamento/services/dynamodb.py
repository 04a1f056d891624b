"""DynamoDB service wrapper for single-table operations."""

from typing import Any

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.config import Config


class DynamoDBService:
    """Item operations on one table through a low-level boto3 client.

    boto3 clients may be shared across threads, so one instance serves
    every request handler. Items go in and come out as plain dicts;
    conversion to the DynamoDB attribute format happens here.
    """

    def __init__(
        self,
        table_name: str,
        *,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize DynamoDB service.

        Args:
            table_name: Full table name (e.g. "Payments")
            region_name: AWS region; falls back to the boto3 default chain
            endpoint_url: Endpoint override (LocalStack, DynamoDB Local)
            timeout_seconds: Connect/read timeout applied to every call
        """
        self.table_name = table_name

        config = None
        if timeout_seconds:
            config = Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 2, "mode": "standard"},
            )

        self._client = boto3.client(
            "dynamodb",
            region_name=region_name,
            endpoint_url=endpoint_url or None,
            config=config,
        )
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def _serialize(self, values: dict[str, Any]) -> dict[str, Any]:
        # Raises decimal.DecimalException for numbers DynamoDB cannot hold
        # and TypeError for unsupported types (float included).
        return {k: self._serializer.serialize(v) for k, v in values.items()}

    def _deserialize(self, item: dict[str, Any]) -> dict[str, Any]:
        return {k: self._deserializer.deserialize(v) for k, v in item.items()}

    def get_item(self, key: dict[str, Any]) -> dict[str, Any] | None:
        """Get a single item by key.

        Args:
            key: Primary key dict

        Returns:
            Item dict or None if not found
        """
        response = self._client.get_item(
            TableName=self.table_name,
            Key=self._serialize(key),
        )
        item = response.get("Item")
        return self._deserialize(item) if item else None

    def put_item(self, item: dict[str, Any]) -> None:
        """Write an item, replacing any item with the same key."""
        self._client.put_item(TableName=self.table_name, Item=self._serialize(item))

    def update_item(
        self,
        key: dict[str, Any],
        update_expression: str,
        expression_attribute_values: dict[str, Any],
        expression_attribute_names: dict[str, str] | None = None,
    ) -> None:
        """Apply an update expression to one item.

        Args:
            key: Primary key dict
            update_expression: DynamoDB update expression
            expression_attribute_values: Values for expression
            expression_attribute_names: Names for expression (for reserved words)
        """
        kwargs: dict[str, Any] = {
            "TableName": self.table_name,
            "Key": self._serialize(key),
            "UpdateExpression": update_expression,
            "ExpressionAttributeValues": self._serialize(expression_attribute_values),
        }
        if expression_attribute_names:
            kwargs["ExpressionAttributeNames"] = expression_attribute_names

        self._client.update_item(**kwargs)

    def query_by_gsi(
        self,
        index_name: str,
        partition_key_name: str,
        partition_key_value: str,
    ) -> list[dict[str, Any]]:
        """Query a GSI by partition key.

        Args:
            index_name: GSI name
            partition_key_name: Name of partition key attribute
            partition_key_value: Value to query

        Returns:
            List of items (first page)
        """
        response = self._client.query(
            TableName=self.table_name,
            IndexName=index_name,
            KeyConditionExpression="#pk = :pk",
            ExpressionAttributeNames={"#pk": partition_key_name},
            ExpressionAttributeValues=self._serialize({":pk": partition_key_value}),
        )
        return [self._deserialize(item) for item in response.get("Items", [])]
