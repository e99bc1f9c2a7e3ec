from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from botocore.exceptions import ClientError

from .aws_errors import map_client_error


@dataclass(frozen=True)
class TableSchema:
    table_name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    key_schema: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_description(cls, description: Mapping[str, Any]) -> TableSchema:
        table = description.get("Table", description)

        attributes = {
            str(attr.get("AttributeName", "")): str(attr.get("AttributeType", ""))
            for attr in table.get("AttributeDefinitions") or []
        }
        keys = {
            str(elem.get("AttributeName", "")): str(elem.get("KeyType", ""))
            for elem in table.get("KeySchema") or []
        }

        return cls(
            table_name=str(table.get("TableName", "")),
            attributes={name: attributes[name] for name in sorted(attributes)},
            key_schema={name: keys[name] for name in sorted(keys)},
        )


def describe_table(client: Any, table_name: str) -> TableSchema:
    try:
        resp = client.describe_table(TableName=table_name)
    except ClientError as err:
        raise map_client_error(err) from err
    return TableSchema.from_description(resp)


def format_table_debug(schema: TableSchema) -> str:
    # Only declared attributes (keys and index keys) appear in a description.
    return (
        f"DynamoDB table [{schema.table_name}] debug\n"
        f"FIELDS: {dict(schema.attributes)}\n"
        f"KEY-FIELDS: {dict(schema.key_schema)}"
    )
