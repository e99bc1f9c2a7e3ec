from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

from boto3.dynamodb.types import Binary, TypeDeserializer

from .errors import ValidationError

type FieldType = Literal["s", "n", "l", "bool", "b", "ss", "ns", "bs", "m", "null"]

type PassThroughValue = Binary | set[str] | set[Decimal] | set[Binary] | list[Any]

type RowValue = (
    str
    | Decimal
    | int
    | bool
    | bytes
    | list[str]
    | list[Decimal]
    | list[bytes]
    | dict[str, Any]
    | PassThroughValue
    | None
)

type Row = dict[str, RowValue]

FIELD_TYPES: frozenset[str] = frozenset({"s", "n", "l", "bool", "b", "ss", "ns", "bs", "m", "null"})

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1

_deserializer = TypeDeserializer()
_log = logging.getLogger(__name__)


def normalize_field_types(field_types: Mapping[str, Any] | None) -> dict[str, str]:
    if not field_types:
        return {}
    out: dict[str, str] = {}
    for name, code in field_types.items():
        out[str(name)] = "null" if code is None else str(code).strip().lower()
    return out


def _split_av(field: str, av: Any) -> tuple[str, Any]:
    if not isinstance(av, dict) or len(av) != 1:
        raise ValidationError(f"field {field}: attribute value must be a single-key map")
    (kind, value), *_ = av.items()
    return str(kind), value


def _mismatch(field: str, kind: str, declared: str) -> ValidationError:
    return ValidationError(f"field {field}: cannot decode {kind} value as {declared!r}")


def _unwrap_binary(value: Any) -> Any:
    if isinstance(value, Binary):
        return bytes(value.value)
    if isinstance(value, dict):
        return {k: _unwrap_binary(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_unwrap_binary(v) for v in value]
    if isinstance(value, set):
        return {_unwrap_binary(v) for v in value}
    return value


def _as_str(field: str, kind: str, raw: Any) -> str:
    if kind in {"S", "N"}:
        return str(raw)
    if kind == "BOOL":
        return "true" if raw else "false"
    raise _mismatch(field, kind, "s")


def _as_number(field: str, kind: str, raw: Any) -> Decimal:
    if kind not in {"N", "S"}:
        raise _mismatch(field, kind, "n")
    try:
        number = Decimal(str(raw).strip())
    except InvalidOperation as err:
        raise ValidationError(f"field {field}: {raw!r} is not a number") from err
    if not number.is_finite():
        raise ValidationError(f"field {field}: {raw!r} is not a finite number")
    return number


def _as_long(field: str, kind: str, raw: Any) -> int:
    value = int(_as_number(field, kind, raw))
    if value < _LONG_MIN or value > _LONG_MAX:
        raise ValidationError(f"field {field}: {raw!r} is out of 64-bit range")
    return value


def _as_bool(field: str, kind: str, raw: Any) -> bool:
    if kind == "BOOL":
        return bool(raw)
    if kind == "N":
        return _as_number(field, kind, raw) != 0
    if kind == "S":
        lowered = str(raw).strip().lower()
        if lowered in {"true", "1"}:
            return True
        if lowered in {"false", "0"}:
            return False
    raise _mismatch(field, kind, "bool")


def _as_bytes(field: str, kind: str, raw: Any) -> bytes:
    if kind == "B":
        if isinstance(raw, Binary):
            return bytes(raw.value)
        return bytes(raw)
    if kind == "S":
        return str(raw).encode("utf-8")
    raise _mismatch(field, kind, "b")


def _as_list[V](
    field: str,
    av: Any,
    *,
    set_kind: str,
    scalar_kind: str,
    convert: Callable[[str, str, Any], V],
) -> list[V]:
    kind, raw = _split_av(field, av)
    if kind == set_kind:
        members = [{scalar_kind: v} for v in raw]
    elif kind == "L":
        members = list(raw)
    else:
        members = [av]

    out: list[V] = []
    for member in members:
        member_kind, member_raw = _split_av(field, member)
        out.append(convert(field, member_kind, member_raw))
    return out


def _as_map(field: str, kind: str, raw: Any) -> dict[str, Any]:
    if kind != "M":
        raise _mismatch(field, kind, "m")
    return {str(k): _unwrap_binary(_deserializer.deserialize(v)) for k, v in raw.items()}


_SCALARS: dict[str, Callable[[str, str, Any], Any]] = {
    "s": _as_str,
    "n": _as_number,
    "l": _as_long,
    "bool": _as_bool,
    "b": _as_bytes,
    "m": _as_map,
}

_SETS: dict[str, tuple[str, str, Callable[[str, str, Any], Any]]] = {
    "ss": ("SS", "S", _as_str),
    "ns": ("NS", "N", _as_number),
    "bs": ("BS", "B", _as_bytes),
}


def decode_value(field: str, av: Any, field_type: str) -> RowValue:
    """Decode one low-level attribute value according to its declared type.

    Raises ValidationError when the stored value cannot be read as the
    declared type, and ValueError for codes outside FIELD_TYPES.
    """
    declared = field_type.lower()
    if declared == "null":
        return _deserializer.deserialize(av)

    kind, raw = _split_av(field, av)
    if kind == "NULL":
        return None

    if declared in _SCALARS:
        return _SCALARS[declared](field, kind, raw)
    if declared in _SETS:
        set_kind, scalar_kind, convert = _SETS[declared]
        return _as_list(field, av, set_kind=set_kind, scalar_kind=scalar_kind, convert=convert)

    raise ValueError(f"unsupported field type: {field_type}")


def decode_item(
    item: Mapping[str, Any],
    field_types: Mapping[str, Any] | None = None,
    *,
    logger: logging.Logger | None = None,
) -> Row:
    """Turn one raw DynamoDB item into a Row.

    With no field types every attribute is deserialized as boto3 would. With a
    field type map, attributes without an entry are deserialized unchanged and
    attributes whose declared type is unknown are logged and left out.
    """
    types = normalize_field_types(field_types)
    if not types:
        return {name: _deserializer.deserialize(av) for name, av in item.items()}

    log = logger or _log
    row: Row = {}
    for name, av in item.items():
        declared = types.get(name, "null")
        if declared not in FIELD_TYPES:
            log.warning("field %s has unrecognized attribute type %r; dropping it", name, declared)
            continue
        row[name] = decode_value(name, av, declared)
    return row
