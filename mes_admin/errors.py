"""Custom domain exceptions for the application."""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable, machine-readable error codes for API consumers."""

    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    ALREADY_DELETED = "ALREADY_DELETED"
    NOT_DELETED = "NOT_DELETED"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    kind: ErrorKind


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist (or belongs to another tenant)."""

    kind = ErrorKind.NOT_FOUND


class DuplicateResourceError(DomainError):
    """Raised when creating or updating a resource would violate a uniqueness constraint."""

    kind = ErrorKind.DUPLICATE_RESOURCE

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class AlreadyDeletedError(DomainError):
    """Raised when deleting a resource that is already soft-deleted."""

    kind = ErrorKind.ALREADY_DELETED


class NotDeletedError(DomainError):
    """Raised when restoring a resource that is not soft-deleted."""

    kind = ErrorKind.NOT_DELETED


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail."""

    kind = ErrorKind.VALIDATION_ERROR
