from __future__ import annotations

from botocore.exceptions import ClientError

from .errors import AwsError, NotFoundError, ValidationError

VALIDATION_EXCEPTION = "ValidationException"


def client_error_code(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Code", ""))


def client_error_message(err: ClientError) -> str:
    return str(err.response.get("Error", {}).get("Message", ""))


def is_validation_error(err: ClientError) -> bool:
    return client_error_code(err) == VALIDATION_EXCEPTION


def map_client_error(err: ClientError) -> Exception:
    code = client_error_code(err)
    message = client_error_message(err)

    if code == VALIDATION_EXCEPTION:
        return ValidationError(message or "validation failed")
    if code == "ResourceNotFoundException":
        return NotFoundError(message or "resource not found")

    return AwsError(code=code or "UnknownError", message=message or str(err))
