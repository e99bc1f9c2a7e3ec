from __future__ import annotations

import re

from .errors import ValidationError

MinNameLength = 3
MaxNameLength = 255

_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")


def _validate_name(kind: str, name: str) -> None:
    if not isinstance(name, str):
        raise ValidationError(f"{kind} name must be a string")

    if len(name) < MinNameLength or len(name) > MaxNameLength:
        raise ValidationError(f"{kind} name length invalid: {name!r}")

    if _NAME_PATTERN.match(name) is None:
        raise ValidationError(f"{kind} name contains invalid characters: {name!r}")


def validate_table_name(name: str) -> None:
    _validate_name("table", name)


def validate_index_name(name: str | None) -> None:
    if not name:
        return
    _validate_name("index", name)
