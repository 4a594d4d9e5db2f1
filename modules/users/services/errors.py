"""
Service Errors - Tagged failures raised by the user service.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MISSING_FIELD = "missing_field"
    DUPLICATE_EMAIL = "duplicate_email"
    NOT_FOUND = "not_found"
    INVALID_IDENTIFIER = "invalid_identifier"
    VALIDATION_FAILURE = "validation_failure"


class ServiceError(Exception):
    """A failure the HTTP layer can map to a status code and error body."""

    def __init__(self, kind: ErrorKind, message: str, details: Optional[list[str]] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    def __repr__(self) -> str:
        return f"ServiceError({self.kind.value!r}, {self.message!r})"

    @classmethod
    def missing_field(cls) -> "ServiceError":
        return cls(ErrorKind.MISSING_FIELD, "Name and email are required")

    @classmethod
    def duplicate_email(cls) -> "ServiceError":
        return cls(ErrorKind.DUPLICATE_EMAIL, "User with this email already exists")

    @classmethod
    def not_found(cls) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND, "User not found")

    @classmethod
    def invalid_identifier(cls) -> "ServiceError":
        return cls(ErrorKind.INVALID_IDENTIFIER, "Invalid ID format")

    @classmethod
    def validation_failure(cls, details: list[str]) -> "ServiceError":
        return cls(ErrorKind.VALIDATION_FAILURE, "Validation Error", details)
