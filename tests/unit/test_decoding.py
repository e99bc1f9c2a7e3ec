from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, get_args

import pytest
from boto3.dynamodb.types import Binary

from dynamoimport_py import ValidationError, decode_item, decode_value, normalize_field_types
from dynamoimport_py.decoding import PassThroughValue, RowValue


def test_normalize_field_types_lowercases_and_maps_none_to_null() -> None:
    assert normalize_field_types(None) == {}
    assert normalize_field_types({}) == {}
    assert normalize_field_types({"a": "S", "b": " NS ", "c": None}) == {"a": "s", "b": "ns", "c": "null"}


def test_number_keeps_exact_decimal() -> None:
    row = decode_item({"price": {"N": "42.5"}}, {"price": "n"})
    assert row == {"price": Decimal("42.5")}
    assert isinstance(row["price"], Decimal)

    big = decode_value("x", {"N": "12345678901234567890.000000001"}, "n")
    assert big == Decimal("12345678901234567890.000000001")


def test_string_set_keeps_store_order() -> None:
    row = decode_item({"tags": {"SS": ["a", "b"]}}, {"tags": "ss"})
    assert row == {"tags": ["a", "b"]}

    row = decode_item({"tags": {"SS": ["z", "a", "m"]}}, {"tags": "SS"})
    assert row["tags"] == ["z", "a", "m"]


def test_number_set_and_binary_set_decode_to_lists() -> None:
    row = decode_item(
        {"ns": {"NS": ["3", "1.5"]}, "bs": {"BS": [b"x", b"y"]}},
        {"ns": "ns", "bs": "bs"},
    )
    assert row == {"ns": [Decimal("3"), Decimal("1.5")], "bs": [b"x", b"y"]}


def test_map_decodes_nested_values() -> None:
    item = {
        "meta": {
            "M": {
                "name": {"S": "widget"},
                "count": {"N": "2"},
                "blob": {"B": b"\x00\x01"},
                "tags": {"L": [{"S": "a"}, {"BOOL": True}]},
            }
        }
    }
    row = decode_item(item, {"meta": "m"})
    assert row == {
        "meta": {"name": "widget", "count": Decimal("2"), "blob": b"\x00\x01", "tags": ["a", True]}
    }


@pytest.mark.parametrize(
    ("av", "field_type", "expected"),
    [
        ({"S": "hello"}, "s", "hello"),
        ({"N": "7"}, "s", "7"),
        ({"BOOL": False}, "s", "false"),
        ({"N": "9000000000"}, "l", 9000000000),
        ({"S": "12"}, "l", 12),
        ({"N": "3.9"}, "l", 3),
        ({"BOOL": True}, "bool", True),
        ({"N": "0"}, "bool", False),
        ({"S": "TRUE"}, "bool", True),
        ({"B": b"raw"}, "b", b"raw"),
        ({"S": "text"}, "b", b"text"),
        ({"S": "only"}, "ss", ["only"]),
        ({"L": [{"N": "1"}, {"S": "2"}]}, "ns", [Decimal("1"), Decimal("2")]),
        ({"NULL": True}, "n", None),
        ({"NULL": True}, "ss", None),
    ],
)
def test_decode_value_coercions(av: dict, field_type: str, expected: object) -> None:
    assert decode_value("f", av, field_type) == expected


def test_binary_value_wrapped_by_boto3_is_unwrapped() -> None:
    assert decode_value("f", {"B": Binary(b"abc")}, "b") == b"abc"


@pytest.mark.parametrize(
    ("av", "field_type"),
    [
        ({"B": b"x"}, "s"),
        ({"BOOL": True}, "n"),
        ({"S": "abc"}, "n"),
        ({"N": "1e30"}, "l"),
        ({"S": "maybe"}, "bool"),
        ({"N": "1"}, "b"),
        ({"S": "x"}, "m"),
        ({"SS": ["a"]}, "ns"),
        ({"S": "NaN"}, "n"),
        ({"S": "Infinity"}, "n"),
        ({"N": "-inf"}, "l"),
        ({"N": "NaN"}, "bool"),
        ({"NS": ["1", "NaN"]}, "ns"),
    ],
)
def test_decode_value_rejects_uncoercible_values(av: dict, field_type: str) -> None:
    with pytest.raises(ValidationError, match="field f"):
        decode_value("f", av, field_type)


def test_non_finite_numbers_are_rejected_with_the_field_name() -> None:
    with pytest.raises(ValidationError, match="field price: 'NaN' is not a finite number"):
        decode_item({"price": {"S": "NaN"}}, {"price": "n"})


def test_decode_item_normalizes_raw_type_codes(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        item = {"a": {"S": "x"}, "b": {"S": "y"}, "c": {"N": "3"}}
        row = decode_item(item, {"a": None, "b": " S ", "c": "L"})

    assert row == {"a": "x", "b": "y", "c": 3}
    assert caplog.records == []


def test_decode_value_rejects_malformed_attribute_values() -> None:
    with pytest.raises(ValidationError, match="single-key map"):
        decode_value("f", {"S": "a", "N": "1"}, "s")
    with pytest.raises(ValidationError, match="single-key map"):
        decode_value("f", "plain", "s")


def test_decode_value_rejects_unknown_type_code() -> None:
    with pytest.raises(ValueError, match="unsupported field type"):
        decode_value("f", {"S": "a"}, "xyz")


def test_unspecified_type_passes_through_deserialized_value() -> None:
    row = decode_item({"a": {"S": "x"}, "b": {"N": "1"}}, {"a": "null"})
    assert row == {"a": "x", "b": Decimal("1")}


def test_unrecognized_type_is_logged_and_dropped(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("test.decoding")
    with caplog.at_level(logging.WARNING, logger="test.decoding"):
        row = decode_item({"a": {"S": "x"}, "b": {"S": "y"}}, {"a": "xyz", "b": "s"}, logger=logger)

    assert row == {"b": "y"}
    assert len(caplog.records) == 1
    assert "'xyz'" in caplog.records[0].getMessage()
    assert "field a" in caplog.records[0].getMessage()


def test_empty_type_map_returns_deserialized_item_unchanged() -> None:
    item = {
        "id": {"S": "1"},
        "price": {"N": "42.5"},
        "tags": {"SS": ["a"]},
        "nothing": {"NULL": True},
    }
    for field_types in (None, {}):
        row = decode_item(item, field_types)
        assert row == {"id": "1", "price": Decimal("42.5"), "tags": {"a"}, "nothing": None}


def test_row_value_names_pass_through_kinds_instead_of_any() -> None:
    members = get_args(RowValue.__value__)
    assert Any not in members
    assert PassThroughValue in members
    assert Binary in get_args(PassThroughValue.__value__)
