from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from botocore.exceptions import ClientError

from .aws_errors import VALIDATION_EXCEPTION, client_error_message, is_validation_error
from .decoding import Row, decode_item, normalize_field_types
from .query import QueryParameters, ReadMode, build_request
from .runtime import create_dynamodb_client
from .schema import describe_table, format_table_debug
from .validation import validate_index_name, validate_table_name


class DynamoDBClient(Protocol):
    def query(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def scan(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def describe_table(self, **kwargs: Any) -> Mapping[str, Any]: ...


class _PageReader:
    def __init__(
        self,
        fetch: Callable[..., Mapping[str, Any]],
        request: Mapping[str, Any],
        *,
        logger: logging.Logger,
    ) -> None:
        self._fetch = fetch
        self._request = dict(request)
        self._log = logger
        self._buffer: deque[Mapping[str, Any]] = deque()
        self._last_key: Mapping[str, Any] | None = None
        self._done = False
        self.pages = 0

    def fetch_page(self) -> None:
        req = dict(self._request)
        if self._last_key is not None:
            req["ExclusiveStartKey"] = self._last_key

        resp = self._fetch(**req)
        items = resp.get("Items") or []
        self.pages += 1
        self._buffer.extend(items)
        self._last_key = resp.get("LastEvaluatedKey") or None
        self._done = self._last_key is None
        self._log.debug(
            "fetched page %d of %s (%d items, more=%s)",
            self.pages,
            self._request.get("TableName"),
            len(items),
            not self._done,
        )

    def has_next(self) -> bool:
        while not self._buffer and not self._done:
            self.fetch_page()
        return bool(self._buffer)

    def next(self) -> Mapping[str, Any]:
        if not self.has_next():
            raise StopIteration
        return self._buffer.popleft()


class DynamoResultIterator:
    """Single-pass iterator over the rows of a DynamoDB query or scan.

    The first page is requested on construction, so a missing table, bad
    credentials or a malformed expression fail here. Later pages are fetched on
    demand by has_next() and next(). Whenever DynamoDB rejects a page request
    with a ValidationException, the query parameters and the table's key schema
    are logged as one warning and the same ClientError is re-raised. Other
    client errors propagate without diagnostics.
    """

    def __init__(
        self,
        client: DynamoDBClient,
        table_name: str,
        params: QueryParameters,
        field_types: Mapping[str, Any] | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        validate_table_name(table_name)
        validate_index_name(params.index_name)

        self._client = client
        self._table_name = table_name
        self._params = params
        self._field_types = normalize_field_types(field_types)
        self._log = logger or logging.getLogger(__name__)

        self._mode, self._request = build_request(params, table_name)
        if self._mode == "query":
            self._log.debug("using conditional query on %s", table_name)
            fetch = client.query
        else:
            self._log.debug("using full table scan on %s", table_name)
            fetch = client.scan

        self._pages = _PageReader(fetch, self._request, logger=self._log)
        try:
            self._pages.fetch_page()
        except ClientError as err:
            self._report_validation_error(err, include_message=True)
            raise

    @classmethod
    def from_environment(
        cls,
        table_name: str,
        params: QueryParameters,
        field_types: Mapping[str, Any] | None = None,
        *,
        logger: logging.Logger | None = None,
        **client_kwargs: Any,
    ) -> DynamoResultIterator:
        client = create_dynamodb_client(**client_kwargs)
        return cls(client, table_name, params, field_types, logger=logger)

    @property
    def mode(self) -> ReadMode:
        return self._mode

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def params(self) -> QueryParameters:
        return self._params

    @property
    def field_types(self) -> Mapping[str, str]:
        return dict(self._field_types)

    @property
    def request(self) -> dict[str, Any]:
        return dict(self._request)

    def __iter__(self) -> DynamoResultIterator:
        return self

    def __next__(self) -> Row:
        return self.next()

    def has_next(self) -> bool:
        try:
            return self._pages.has_next()
        except ClientError as err:
            self._report_validation_error(err)
            raise

    def next(self) -> Row:
        try:
            item = self._pages.next()
        except ClientError as err:
            self._report_validation_error(err, include_message=True)
            raise
        return self.decode_row(item)

    def remove(self) -> None:
        """Unsupported; the iterator never writes to the table."""
        return None

    def decode_row(self, item: Mapping[str, Any]) -> Row:
        return decode_item(item, self._field_types, logger=self._log)

    def table_debug(self) -> str:
        try:
            schema = describe_table(self._client, self._table_name)
        except Exception as err:
            return f"TABLE DESC UNAVAILABLE: {err}"
        return format_table_debug(schema)

    def _report_validation_error(self, err: ClientError, *, include_message: bool = False) -> None:
        if not is_validation_error(err):
            return

        detail = f" - {client_error_message(err)}" if include_message else ""
        self._log.warning(
            "DynamoDB error %s%s\nquery debug:\n%s\n%s",
            VALIDATION_EXCEPTION,
            detail,
            self._params.describe(),
            self.table_debug(),
        )
