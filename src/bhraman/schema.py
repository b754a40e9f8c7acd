"""DynamoDB table layout.

Every table name is ``{table_prefix}-{name}``. All tables use on-demand
billing and string keys.
"""

from typing import Any

from bhraman.utils.logging import get_logger

logger = get_logger(__name__)


def _gsi(attribute: str) -> dict[str, Any]:
    return {
        "IndexName": f"{attribute}-index",
        "KeySchema": [{"AttributeName": attribute, "KeyType": "HASH"}],
        "Projection": {"ProjectionType": "ALL"},
    }


def _table(key: str, *indexes: str) -> dict[str, Any]:
    definition: dict[str, Any] = {
        "KeySchema": [{"AttributeName": key, "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": name, "AttributeType": "S"} for name in (key, *indexes)
        ],
    }
    if indexes:
        definition["GlobalSecondaryIndexes"] = [_gsi(name) for name in indexes]
    return definition


TABLES: dict[str, dict[str, Any]] = {
    "users": _table("user_id", "external_id", "email"),
    "packages": _table("package_id", "slug"),
    "bookings": _table("booking_id", "user_id"),
    "home-config": _table("config_id"),
    # Pre-unification admin records, read only by the migration
    "admins": _table("admin_id"),
}


def create_tables(client: Any, table_prefix: str, *, skip_existing: bool = True) -> list[str]:
    """Create every table under the prefix.

    Args:
        client: boto3 DynamoDB client
        table_prefix: Name prefix, e.g. ``bhraman-dev``
        skip_existing: Leave tables that already exist alone

    Returns:
        Full names of the tables that were created
    """
    existing: set[str] = set()
    if skip_existing:
        paginator = client.get_paginator("list_tables")
        for page in paginator.paginate():
            existing.update(page.get("TableNames", []))

    created = []
    for name, definition in TABLES.items():
        table_name = f"{table_prefix}-{name}"
        if table_name in existing:
            logger.info("table_exists", extra={"table": table_name})
            continue
        client.create_table(TableName=table_name, BillingMode="PAY_PER_REQUEST", **definition)
        created.append(table_name)
        logger.info("table_created", extra={"table": table_name})
    return created
