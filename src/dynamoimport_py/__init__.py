from __future__ import annotations

import json
import re
from importlib.resources import files
from typing import TYPE_CHECKING, Any

from .decoding import FIELD_TYPES, FieldType, Row, RowValue, decode_item, decode_value, normalize_field_types
from .errors import AwsError, DynamoImportError, NotFoundError, ValidationError
from .query import QueryParameters, build_query_request, build_request, build_scan_request

if TYPE_CHECKING:
    from .iterator import DynamoDBClient, DynamoResultIterator
    from .runtime import create_boto3_config, create_dynamodb_client
    from .schema import TableSchema, describe_table, format_table_debug
    from .validation import validate_index_name, validate_table_name


def _read_repo_version() -> str:
    try:
        data = json.loads(files(__package__).joinpath("version.json").read_text(encoding="utf-8"))
    except Exception:
        return "0.0.0"

    version = data.get("version")
    return version if isinstance(version, str) and version else "0.0.0"


def _normalize_repo_version(repo_version: str) -> str:
    match = re.match(r"^(\d+\.\d+\.\d+)-rc\.?([0-9]+)$", repo_version)
    if match:
        return f"{match.group(1)}rc{match.group(2)}"
    return repo_version


__repo_version__ = _read_repo_version()
__version__ = _normalize_repo_version(__repo_version__)


def __getattr__(name: str) -> Any:
    if name in {"DynamoDBClient", "DynamoResultIterator"}:
        from . import iterator

        return getattr(iterator, name)
    if name in {"TableSchema", "describe_table", "format_table_debug"}:
        from . import schema

        return getattr(schema, name)
    if name in {"create_boto3_config", "create_dynamodb_client"}:
        from . import runtime

        return getattr(runtime, name)
    if name in {"validate_index_name", "validate_table_name"}:
        from . import validation

        return getattr(validation, name)
    raise AttributeError(name)


__all__ = [
    "AwsError",
    "build_query_request",
    "build_request",
    "build_scan_request",
    "create_boto3_config",
    "create_dynamodb_client",
    "decode_item",
    "decode_value",
    "describe_table",
    "DynamoDBClient",
    "DynamoImportError",
    "DynamoResultIterator",
    "FIELD_TYPES",
    "FieldType",
    "format_table_debug",
    "normalize_field_types",
    "NotFoundError",
    "QueryParameters",
    "Row",
    "RowValue",
    "TableSchema",
    "validate_index_name",
    "validate_table_name",
    "ValidationError",
    "__repo_version__",
    "__version__",
]
