from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

type RequestCheck = Mapping[str, Any] | Callable[[Mapping[str, Any]], None]


class _Wildcard:
    def __repr__(self) -> str:  # pragma: no cover
        return "ANY"


ANY: Any = _Wildcard()


def _request_mismatch(expected: Any, actual: Any, path: str) -> str | None:
    """Return a description of the first difference, or None when actual satisfies expected.

    Dicts match partially (extra keys in actual are fine), lists match
    element-wise and ANY matches anything.
    """
    if expected is ANY:
        return None
    if isinstance(expected, Mapping):
        if not isinstance(actual, Mapping):
            return f"{path}: expected dict, got {type(actual).__name__}"
        for key, want in expected.items():
            if key not in actual:
                return f"{path}: missing key {key!r}"
            found = _request_mismatch(want, actual[key], f"{path}.{key}")
            if found:
                return found
        return None
    if isinstance(expected, list):
        if not isinstance(actual, list):
            return f"{path}: expected list, got {type(actual).__name__}"
        if len(expected) != len(actual):
            return f"{path}: expected {len(expected)} items, got {len(actual)}"
        for i, (want, got) in enumerate(zip(expected, actual, strict=True)):
            found = _request_mismatch(want, got, f"{path}[{i}]")
            if found:
                return found
        return None
    if expected != actual:
        return f"{path}: expected {expected!r}, got {actual!r}"
    return None


@dataclass(frozen=True)
class ScriptedCall:
    method: str
    check: RequestCheck | None = None
    response: Mapping[str, Any] | None = None
    error: Exception | None = None


class FakeDynamoDBClient:
    """Scripted stand-in for the query/scan/describe_table surface of a boto3 client.

    Calls must arrive in the order they were scripted. Each request is checked
    against its expectation (a partial dict or a callable) and answered with
    the scripted response, or the scripted error is raised. expect_pages()
    scripts a whole paginated read in one go.
    """

    def __init__(self) -> None:
        self._script: deque[ScriptedCall] = deque()
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def expect(
        self,
        method: str,
        check: RequestCheck | None = None,
        *,
        response: Mapping[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._script.append(ScriptedCall(method, check, response, error))

    def expect_pages(
        self,
        method: str,
        pages: Sequence[Mapping[str, Any]],
        *,
        request: Mapping[str, Any] | None = None,
    ) -> None:
        """Script consecutive query or scan pages.

        The first request must not carry ExclusiveStartKey. Each later request
        must carry exactly the LastEvaluatedKey of the page before it. request,
        if given, is matched partially against every call.
        """
        start_key: Mapping[str, Any] | None = None
        for number, page in enumerate(pages, start=1):
            self.expect(method, _paging_check(method, number, start_key, request), response=page)
            start_key = page.get("LastEvaluatedKey")

    def assert_no_pending(self) -> None:
        if self._script:
            raise AssertionError(f"pending expected calls: {list(self._script)!r}")

    def call_names(self) -> list[str]:
        return [method for method, _ in self.calls]

    def requests(self, method: str) -> list[dict[str, Any]]:
        return [req for name, req in self.calls if name == method]

    def _answer(self, method: str, req: dict[str, Any]) -> Mapping[str, Any]:
        self.calls.append((method, dict(req)))
        if not self._script:
            raise AssertionError(f"unexpected call: {method}")

        step = self._script.popleft()
        if step.method != method:
            raise AssertionError(f"expected {step.method}, got {method}")

        if callable(step.check):
            step.check(req)
        elif step.check is not None:
            problem = _request_mismatch(step.check, req, method)
            if problem:
                raise AssertionError(problem)

        if step.error is not None:
            raise step.error
        return dict(step.response or {})

    def query(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._answer("query", kwargs)

    def scan(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._answer("scan", kwargs)

    def describe_table(self, **kwargs: Any) -> Mapping[str, Any]:
        return self._answer("describe_table", kwargs)


def _paging_check(
    method: str,
    number: int,
    start_key: Mapping[str, Any] | None,
    request: Mapping[str, Any] | None,
) -> Callable[[Mapping[str, Any]], None]:
    def check(req: Mapping[str, Any]) -> None:
        if request is not None:
            problem = _request_mismatch(request, req, f"{method} page {number}")
            if problem:
                raise AssertionError(problem)
        got = req.get("ExclusiveStartKey")
        if start_key is None and got is not None:
            raise AssertionError(f"{method} page {number}: unexpected ExclusiveStartKey {got!r}")
        if start_key is not None and got != start_key:
            raise AssertionError(
                f"{method} page {number}: expected ExclusiveStartKey {dict(start_key)!r}, got {got!r}"
            )

    return check
