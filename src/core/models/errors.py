"""Custom exception classes for the gallery service.

Each subclass only fixes its default ``error_code``; handlers and the
``api_gateway_handler`` decorator map the class to an HTTP status.
"""

from typing import Any, ClassVar

from core.utils.constants import (
    ERROR_CODE_CONFLICT,
    ERROR_CODE_DATABASE,
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_METADATA_OPERATION_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORAGE,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)


class GalleryServiceError(Exception):
    """
    Base exception for all gallery service errors.

    Arguments are keyword-only. ``error_code`` may be omitted on
    subclasses that define ``default_error_code``; optional context goes
    in ``details`` and is returned to the caller for 4xx errors only.
    """

    default_error_code: ClassVar[str | None] = None

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        code = error_code or self.default_error_code
        if code is None:
            raise TypeError(f"{type(self).__name__} requires an error_code")

        self.message = message
        self.error_code = code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(GalleryServiceError):
    """Raised when request validation fails (400)."""

    default_error_code = ERROR_CODE_VALIDATION_FAILED


class InvalidFileTypeError(ValidationError):
    """Declared content type is not ``image/*``."""

    default_error_code = ERROR_CODE_UNSUPPORTED_MIME_TYPE


class FileTooLargeError(ValidationError):
    default_error_code = ERROR_CODE_FILE_SIZE_EXCEEDED


class NotFoundError(GalleryServiceError):
    """Raised when a requested user, image or binary does not exist (404)."""

    default_error_code = ERROR_CODE_RESOURCE_NOT_FOUND


class ConflictError(GalleryServiceError):
    """Raised when a unique constraint (user id or email) is violated (409)."""

    default_error_code = ERROR_CODE_CONFLICT


class MetadataOperationFailedError(GalleryServiceError):
    """An image record could not be written or removed."""

    default_error_code = ERROR_CODE_METADATA_OPERATION_FAILED


class StorageError(GalleryServiceError):
    """Raised when an image binary storage operation fails."""

    default_error_code = ERROR_CODE_STORAGE


class DatabaseError(GalleryServiceError):
    """Raised when a metadata backing store operation fails."""

    default_error_code = ERROR_CODE_DATABASE
