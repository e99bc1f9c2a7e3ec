from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from botocore.exceptions import ClientError

from .mocks import ANY, FakeDynamoDBClient


def client_error(code: str, message: str = "", *, operation: str = "Query") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def validation_error(message: str = "invalid expression", *, operation: str = "Query") -> ClientError:
    return client_error("ValidationException", message, operation=operation)


def items_page(
    items: Sequence[Mapping[str, Any]],
    *,
    last_key: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    resp: dict[str, Any] = {"Items": [dict(item) for item in items], "Count": len(items)}
    if last_key is not None:
        resp["LastEvaluatedKey"] = dict(last_key)
    return resp


def table_description(
    table_name: str,
    *,
    attributes: Mapping[str, str],
    keys: Mapping[str, str],
) -> dict[str, Any]:
    return {
        "Table": {
            "TableName": table_name,
            "AttributeDefinitions": [
                {"AttributeName": name, "AttributeType": kind} for name, kind in attributes.items()
            ],
            "KeySchema": [{"AttributeName": name, "KeyType": role} for name, role in keys.items()],
        }
    }


__all__ = [
    "ANY",
    "FakeDynamoDBClient",
    "client_error",
    "items_page",
    "table_description",
    "validation_error",
]
