from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations.

    ``category`` is the stable, user-facing error kind.
    """

    category = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""

    category = "validation_error"


class NotFoundError(DomainError):
    """Raised when an employee or today's record does not exist."""

    category = "not_found"


class PreconditionFailedError(DomainError):
    """Raised when the employee has no reference photos registered."""

    category = "precondition_failed"


class ConflictError(DomainError):
    """Raised on duplicate check-in, duplicate checkout or duplicate email."""

    category = "conflict"


class VerificationFailedError(DomainError):
    """Raised when the captured photo does not match the reference photos."""

    category = "unauthorized"

    def __init__(self, message: str, *, confidence: float):
        super().__init__(message)
        self.confidence = confidence


class UpstreamError(DomainError):
    """Raised when the photo storage cannot be used."""

    category = "upstream_failure"
    kind = "transient"


class StorageConfigurationError(UpstreamError):
    kind = "configuration"


class StorageUnavailableError(UpstreamError):
    kind = "transient"
