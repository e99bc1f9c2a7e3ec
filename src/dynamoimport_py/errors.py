from __future__ import annotations


class DynamoImportError(Exception):
    pass


class NotFoundError(DynamoImportError):
    pass


class ValidationError(DynamoImportError):
    pass


class AwsError(DynamoImportError):
    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
