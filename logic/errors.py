from __future__ import annotations


class ValidationError(ValueError):
    """Base class for rejected console input. Raised before any state changes."""

    kind = "ValidationError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingField(ValidationError):
    kind = "MissingField"


class DuplicateEntry(ValidationError):
    kind = "DuplicateEntry"


class InvalidFormat(ValidationError):
    kind = "InvalidFormat"


class InvalidNumber(ValidationError):
    kind = "InvalidNumber"
