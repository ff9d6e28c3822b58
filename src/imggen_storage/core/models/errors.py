"""Custom exception classes for the image service."""

from typing import TYPE_CHECKING, Any

from imggen_storage.core.utils.constants import (
    ERROR_CODE_CONSTRAINT_VIOLATION,
    ERROR_CODE_OPERATION_CANCELLED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORAGE_UNAVAILABLE,
    ERROR_CODE_VALIDATION_FAILED,
)

if TYPE_CHECKING:
    from imggen_storage.core.models.image import Violation


class ImageServiceError(Exception):
    """
    Base exception for all image service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationFailedError(ImageServiceError):
    """Raised before any write when a record fails the validation policy.

    The field-level violations are available on `violations` and are
    mirrored into `details["violations"]` for API responses.
    """

    violations: list["Violation"]

    def __init__(
        self,
        violations: list["Violation"],
        *,
        message: str = "Image metadata failed validation",
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.violations = list(violations)

        merged: dict[str, Any] = dict(details or {})
        merged["violations"] = [violation.model_dump() for violation in self.violations]

        super().__init__(
            message=message,
            error_code=error_code,
            details=merged,
        )


class NotFoundError(ImageServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ConstraintViolationError(ImageServiceError):
    """Raised when storage rejects a write that would break the 1:1 invariant."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CONSTRAINT_VIOLATION,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StorageUnavailableError(ImageServiceError):
    """Raised when S3 or DynamoDB cannot be reached or rejects a request.

    The failure is retryable; no retry is attempted by the service.
    """

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class OperationCancelledError(ImageServiceError):
    """Raised when a cancellation signal is observed before the commit point."""

    def __init__(
        self,
        *,
        message: str = "Operation cancelled before commit",
        error_code: str = ERROR_CODE_OPERATION_CANCELLED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
