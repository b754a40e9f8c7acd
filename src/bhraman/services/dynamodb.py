"""DynamoDB service wrapper and connection pool.

The pool is created by the application factory and owned by its lifespan;
handlers reach it through ``request.app.state``. Services receive the
connected ``DynamoDBService`` in their constructor.
"""

import time
from decimal import Decimal
from typing import Any, Callable

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from bhraman.config import Settings
from bhraman.models.errors import BhramanError, ErrorCode
from bhraman.utils.logging import get_logger

logger = get_logger(__name__)


def to_dynamodb_value(value: Any) -> Any:
    """Convert floats (recursively) to Decimal for the DynamoDB resource API."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamodb_value(v) for v in value]
    return value


def from_dynamodb_value(value: Any) -> Any:
    """Convert Decimals (recursively) back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamodb_value(v) for v in value]
    return value


class DynamoDBService:
    """Service for DynamoDB operations with prefixed table names."""

    def __init__(self, name_prefix: str, resource: Any, client: Any) -> None:
        """Initialize DynamoDB service.

        Args:
            name_prefix: Table name prefix, e.g. bhraman-dev
            resource: boto3 DynamoDB service resource
            client: boto3 DynamoDB low-level client
        """
        self.name_prefix = name_prefix
        self._dynamodb = resource
        self._client = client

    def _table_name(self, table: str) -> str:
        """Get full table name with prefix."""
        return f"{self.name_prefix}-{table}"

    def _get_table(self, table: str) -> Any:
        """Get DynamoDB table resource."""
        return self._dynamodb.Table(self._table_name(table))

    # Generic CRUD operations

    def get_item(
        self,
        table: str,
        key: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Get a single item by key.

        Args:
            table: Table name without prefix
            key: Primary key dict

        Returns:
            Item dict or None if not found
        """
        response = self._get_table(table).get_item(Key=key)
        item: dict[str, Any] | None = response.get("Item")
        return from_dynamodb_value(item) if item else None

    def put_item(
        self,
        table: str,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> bool:
        """Put an item into the table.

        Args:
            table: Table name without prefix
            item: Item to store
            condition_expression: Optional condition for write

        Returns:
            True if successful, False if condition failed
        """
        try:
            kwargs: dict[str, Any] = {"Item": to_dynamodb_value(item)}
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression

            self._get_table(table).put_item(**kwargs)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            raise

    def update_item(
        self,
        table: str,
        key: dict[str, Any],
        update_expression: str,
        expression_attribute_values: dict[str, Any],
        expression_attribute_names: dict[str, str] | None = None,
        condition_expression: str | None = None,
    ) -> dict[str, Any] | None:
        """Update an item with expressions.

        Args:
            table: Table name without prefix
            key: Primary key dict
            update_expression: DynamoDB update expression
            expression_attribute_values: Values for expression
            expression_attribute_names: Names for expression (for reserved words)
            condition_expression: Optional condition for update

        Returns:
            Updated attributes or None if condition failed
        """
        try:
            kwargs: dict[str, Any] = {
                "Key": key,
                "UpdateExpression": update_expression,
                "ExpressionAttributeValues": to_dynamodb_value(expression_attribute_values),
                "ReturnValues": "ALL_NEW",
            }
            if expression_attribute_names:
                kwargs["ExpressionAttributeNames"] = expression_attribute_names
            if condition_expression:
                kwargs["ConditionExpression"] = condition_expression

            response = self._get_table(table).update_item(**kwargs)
            attrs: dict[str, Any] | None = response.get("Attributes")
            return from_dynamodb_value(attrs) if attrs else None
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return None
            raise

    def update_fields(
        self,
        table: str,
        key: dict[str, Any],
        fields: dict[str, Any],
        condition_expression: str | None = None,
        remove: list[str] | None = None,
    ) -> dict[str, Any] | None:
        """SET the given attributes on an item, optionally REMOVE others.

        Builds placeholder names for every attribute so reserved words such as
        ``status`` need no special handling by callers.

        Args:
            table: Table name without prefix
            key: Primary key dict
            fields: Attribute name to new value
            condition_expression: Optional condition for update
            remove: Attribute names to delete from the item

        Returns:
            Updated attributes or None if condition failed
        """
        update_parts = []
        expression_values: dict[str, Any] = {}
        expression_names: dict[str, str] = {}

        for idx, (field, value) in enumerate(fields.items()):
            placeholder = f":v{idx}"
            name_placeholder = f"#n{idx}"
            update_parts.append(f"{name_placeholder} = {placeholder}")
            expression_values[placeholder] = value
            expression_names[name_placeholder] = field

        update_expression = "SET " + ", ".join(update_parts)
        if remove:
            remove_parts = []
            for idx, field in enumerate(remove):
                name_placeholder = f"#r{idx}"
                remove_parts.append(name_placeholder)
                expression_names[name_placeholder] = field
            update_expression += " REMOVE " + ", ".join(remove_parts)

        return self.update_item(
            table=table,
            key=key,
            update_expression=update_expression,
            expression_attribute_values=expression_values,
            expression_attribute_names=expression_names,
            condition_expression=condition_expression,
        )

    def delete_item(
        self,
        table: str,
        key: dict[str, Any],
    ) -> bool:
        """Delete an item by key.

        Args:
            table: Table name without prefix
            key: Primary key dict

        Returns:
            True if deleted (or didn't exist)
        """
        self._get_table(table).delete_item(Key=key)
        return True

    def query(
        self,
        table: str,
        key_condition: Any,
        index_name: str | None = None,
        filter_expression: Any | None = None,
        limit: int | None = None,
        scan_index_forward: bool = True,
    ) -> list[dict[str, Any]]:
        """Query table or GSI.

        Args:
            table: Table name without prefix
            key_condition: Boto3 Key condition
            index_name: GSI name (optional)
            filter_expression: Additional filter (optional)
            limit: Max items to return
            scan_index_forward: Sort order (True=ascending)

        Returns:
            List of items
        """
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": key_condition,
            "ScanIndexForward": scan_index_forward,
        }
        if index_name:
            kwargs["IndexName"] = index_name
        if filter_expression:
            kwargs["FilterExpression"] = filter_expression
        if limit:
            kwargs["Limit"] = limit

        response = self._get_table(table).query(**kwargs)
        items: list[dict[str, Any]] = response.get("Items", [])
        return [from_dynamodb_value(item) for item in items]

    def scan(
        self,
        table: str,
        filter_expression: Any | None = None,
    ) -> list[dict[str, Any]]:
        """Scan a whole table, following pagination.

        Used by admin listings, which filter, sort and paginate in memory.

        Args:
            table: Table name without prefix
            filter_expression: Optional boto3 Attr condition

        Returns:
            List of all matching items
        """
        kwargs: dict[str, Any] = {}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression

        items: list[dict[str, Any]] = []
        table_resource = self._get_table(table)
        while True:
            response = table_resource.scan(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return [from_dynamodb_value(item) for item in items]

    def batch_get(
        self,
        table: str,
        keys: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """Batch get items by keys.

        Args:
            table: Table name without prefix
            keys: List of primary key dicts

        Returns:
            List of found items
        """
        if not keys:
            return []

        table_name = self._table_name(table)
        items: list[dict[str, Any]] = []
        # BatchGetItem accepts at most 100 keys per request
        for start in range(0, len(keys), 100):
            response = self._dynamodb.batch_get_item(
                RequestItems={table_name: {"Keys": keys[start : start + 100]}}
            )
            items.extend(response.get("Responses", {}).get(table_name, []))
        return [from_dynamodb_value(item) for item in items]

    # Convenience methods for common patterns

    def query_by_gsi(
        self,
        table: str,
        index_name: str,
        partition_key_name: str,
        partition_key_value: str,
        sort_key_condition: Any | None = None,
    ) -> list[dict[str, Any]]:
        """Query a GSI by partition key.

        Args:
            table: Table name without prefix
            index_name: GSI name
            partition_key_name: Name of partition key attribute
            partition_key_value: Value to query
            sort_key_condition: Optional sort key condition

        Returns:
            List of items
        """
        key_condition = Key(partition_key_name).eq(partition_key_value)
        if sort_key_condition:
            key_condition = key_condition & sort_key_condition

        return self.query(table, key_condition, index_name=index_name)

    def ping(self) -> None:
        """Round-trip to DynamoDB; raises on connection failure."""
        self._client.list_tables(Limit=1)

    def close(self) -> None:
        """Close the underlying HTTP connections."""
        self._client.close()


class DatabasePool:
    """Owns the DynamoDB connection and its failure cooldown.

    ``connect()`` returns the shared service, opening it on first use. After
    ``max_attempts`` consecutive failed attempts, further attempts within
    ``cooldown_seconds`` of the last failure fail fast with
    DATABASE_UNAVAILABLE instead of hitting the database again.
    """

    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self._clock = clock
        self._service: DynamoDBService | None = None
        self.connection_attempts = 0
        self.last_error_time: float | None = None

    @property
    def is_connected(self) -> bool:
        return self._service is not None

    def _open(self) -> DynamoDBService:
        """Create boto3 handles and verify them with a round-trip."""
        session = boto3.Session(region_name=self.settings.aws_region)
        service = DynamoDBService(
            name_prefix=self.settings.table_prefix,
            resource=session.resource("dynamodb"),
            client=session.client("dynamodb"),
        )
        service.ping()
        return service

    def _cooling_down(self) -> bool:
        if self.connection_attempts < self.settings.db_max_connect_attempts:
            return False
        if self.last_error_time is None:
            return False
        elapsed = self._clock() - self.last_error_time
        return elapsed < self.settings.db_connect_cooldown_seconds

    def connect(self) -> DynamoDBService:
        """Return the connected service, opening it if needed.

        Raises:
            BhramanError: DATABASE_UNAVAILABLE if the connection fails or the
                pool is cooling down after repeated failures.
        """
        if self._service is not None:
            return self._service

        if self._cooling_down():
            logger.warning(
                "db_connect_throttled",
                extra={"connection_attempts": self.connection_attempts},
            )
            raise BhramanError(
                code=ErrorCode.DATABASE_UNAVAILABLE,
                details={"reason": "cooling down after repeated connection failures"},
            )

        self.connection_attempts += 1
        try:
            service = self._open()
        except (BotoCoreError, ClientError) as e:
            self.last_error_time = self._clock()
            logger.error(
                "db_connect_failed",
                extra={"connection_attempts": self.connection_attempts, "error": str(e)},
            )
            raise BhramanError(code=ErrorCode.DATABASE_UNAVAILABLE) from e

        self._service = service
        self.connection_attempts = 0
        self.last_error_time = None
        logger.info("db_connected", extra={"table_prefix": self.settings.table_prefix})
        return service

    def shutdown(self) -> None:
        """Release the connection. A later connect() opens a new one."""
        if self._service is not None:
            self._service.close()
            self._service = None
            logger.info("db_disconnected")
