"""Thin DynamoDB adapter wrapping boto3 table operations."""

import os
from typing import Any, Protocol, cast

import boto3

from imggen_storage.core.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_METADATA_TABLE_NAME,
)


class DynamoDBTable(Protocol):
    """Minimal DynamoDB Table protocol."""

    name: str
    meta: Any

    def put_item(self, *, Item: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def get_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def update_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def delete_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def query(self, **kwargs: Any) -> dict[str, Any]: ...
    def scan(self, **kwargs: Any) -> dict[str, Any]: ...


class DynamoDBAdapterProtocol(Protocol):
    """Minimal DynamoDB adapter protocol (repository-facing)."""

    table_name: str

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]: ...

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any]: ...

    def update_item(self, *, key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...

    def delete_item(self, *, key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...

    def query(self, **kwargs: Any) -> dict[str, Any]: ...

    def scan(self, **kwargs: Any) -> dict[str, Any]: ...

    def transact_write_items(self, *, transact_items: list[dict[str, Any]]) -> dict[str, Any]: ...


class DynamoDBAdapter:
    """Low-level DynamoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps a boto3 DynamoDB Table resource
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, table_env: str = ENV_IMAGE_METADATA_TABLE_NAME) -> None:
        """Initialize DynamoDB table from the named environment variable."""
        table_name = os.getenv(table_env)
        if not table_name:
            raise RuntimeError(f"{table_env} environment variable is not set")

        dynamodb = boto3.resource(
            "dynamodb",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )

        self.table_name = table_name
        self.table: DynamoDBTable = cast(
            DynamoDBTable,
            dynamodb.Table(table_name),
        )

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]:
        """Insert item into DynamoDB.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {"Item": item}

        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression

        return self.table.put_item(**kwargs)

    def get_item(self, *, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any]:
        """Retrieve item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.get_item(Key=key, ConsistentRead=consistent_read)

    def update_item(self, *, key: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        """Update item attributes by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.update_item(Key=key, **kwargs)

    def delete_item(self, *, key: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        """Delete item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.delete_item(Key=key, **kwargs)

    def query(self, **kwargs: Any) -> dict[str, Any]:
        """Execute DynamoDB query.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.query(**kwargs)

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        """Execute DynamoDB scan.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.scan(**kwargs)

    def transact_write_items(self, *, transact_items: list[dict[str, Any]]) -> dict[str, Any]:
        """Execute an all-or-nothing write across several items.

        Items are given in resource (native Python) form; the resource's
        client serializes them. Table names are filled in when omitted.
        Raises boto3 exceptions - caught by domain implementation.
        """
        prepared: list[dict[str, Any]] = []
        for entry in transact_items:
            ((action, params),) = entry.items()
            prepared.append({action: {"TableName": self.table_name, **params}})

        client = self.table.meta.client
        return cast(dict[str, Any], client.transact_write_items(TransactItems=prepared))
