from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Literal

from boto3.dynamodb.types import TypeSerializer

from .errors import ValidationError

type ReadMode = Literal["query", "scan"]


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    if mapping is None:
        return None
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class QueryParameters:
    """Expression strings and placeholder maps for one query or scan.

    A key condition expression selects a conditional query; without one the
    whole table (or index) is scanned. Expressions are sent to DynamoDB as-is
    and validated remotely.
    """

    name_map: Mapping[str, str] | None = None
    value_map: Mapping[str, Any] | None = None
    filter_expression: str | None = None
    projection_expression: str | None = None
    key_condition_expression: str | None = None
    index_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name_map", _freeze(self.name_map))
        object.__setattr__(self, "value_map", _freeze(self.value_map))

    @property
    def is_query(self) -> bool:
        return self.key_condition_expression is not None

    @property
    def mode(self) -> ReadMode:
        return "query" if self.is_query else "scan"

    def describe(self) -> str:
        name_map = dict(self.name_map) if self.name_map is not None else None
        value_map = dict(self.value_map) if self.value_map is not None else None
        lines = [
            f"mode: {self.mode}",
            f"key_condition_expression: {self.key_condition_expression!r}",
            f"filter_expression: {self.filter_expression!r}",
            f"projection_expression: {self.projection_expression!r}",
            f"name_map: {name_map!r}",
            f"value_map: {value_map!r}",
            f"index_name: {self.index_name!r}",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


_serializer = TypeSerializer()


def _serialize_values(value_map: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for placeholder, value in value_map.items():
        try:
            out[placeholder] = _serializer.serialize(value)
        except TypeError as err:
            raise ValidationError(f"value_map[{placeholder!r}]: {err}") from err
    return out


def _attach_common(req: dict[str, Any], params: QueryParameters) -> dict[str, Any]:
    if params.index_name is not None:
        req["IndexName"] = params.index_name
    if params.projection_expression is not None:
        req["ProjectionExpression"] = params.projection_expression
    if params.filter_expression is not None:
        req["FilterExpression"] = params.filter_expression
    if params.name_map is not None:
        req["ExpressionAttributeNames"] = dict(params.name_map)
    if params.value_map is not None:
        req["ExpressionAttributeValues"] = _serialize_values(params.value_map)
    return req


def build_query_request(params: QueryParameters, table_name: str) -> dict[str, Any]:
    if params.key_condition_expression is None:
        raise ValidationError("key_condition_expression is required for a query")

    req: dict[str, Any] = {
        "TableName": table_name,
        "KeyConditionExpression": params.key_condition_expression,
    }
    return _attach_common(req, params)


def build_scan_request(params: QueryParameters, table_name: str) -> dict[str, Any]:
    return _attach_common({"TableName": table_name}, params)


def build_request(params: QueryParameters, table_name: str) -> tuple[ReadMode, dict[str, Any]]:
    if params.is_query:
        return "query", build_query_request(params, table_name)
    return "scan", build_scan_request(params, table_name)
