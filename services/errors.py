"""Error taxonomy for the measurement query API."""

from __future__ import annotations

from models.records import VALID_FIELDS

NO_DATA_MESSAGE = "No measurements found for the specified criteria"
_FIELD_CHOICES = ", ".join(VALID_FIELDS)


class QueryError(Exception):
    """Base class for outcomes that map onto a structured error response."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QueryError):
    """Client supplied a parameter that fails its constraint."""

    status_code = 400


class InvalidField(ValidationError):
    error = "Invalid field name"

    def __init__(self, value: str) -> None:
        super().__init__(f"Field must be one of: {_FIELD_CHOICES}")
        self.value = value


class MissingField(ValidationError):
    error = "Missing field parameter"

    def __init__(self) -> None:
        super().__init__(f"Field is required. Must be one of: {_FIELD_CHOICES}")


class InvalidDateFormat(ValidationError):

    def __init__(self, bound: str, value: str) -> None:
        super().__init__("Date must be in YYYY-MM-DD format")
        self.bound = bound
        self.value = value
        self.error = f"Invalid {bound} format"


class NoDataFound(QueryError):
    status_code = 404
    error = "No data found"

    def __init__(self) -> None:
        super().__init__(NO_DATA_MESSAGE)


class InternalError(QueryError):
    """Store or connectivity fault; the cause stays in the server log."""

    status_code = 500
    error = "Internal server error"
