"""
FileChat - Custom Exceptions.

Centralized exception handling with standardized error responses.
"""

from typing import Any


class FileChatException(Exception):
    """Base exception for FileChat application."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundException(FileChatException):
    """Raised when a resource is not found."""

    def __init__(self, resource_type: str, resource_id: int | str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource_type} not found: {resource_id}",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class ValidationException(FileChatException):
    """Raised for validation errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details={"errors": errors} if errors else None,
        )


class UnsupportedFileTypeException(FileChatException):
    """Raised when a file extension or type tag is not one we can ingest."""

    def __init__(self, file_type: str, allowed: list[str] | None = None):
        details: dict[str, Any] = {"file_type": file_type}
        if allowed:
            details["allowed"] = allowed
        super().__init__(
            code="UNSUPPORTED_FILE_TYPE",
            message=f"Unsupported file type: {file_type}",
            status_code=415,
            details=details,
        )


class FileTooLargeException(FileChatException):
    """Raised when an upload exceeds the configured size ceiling."""

    def __init__(self, size_bytes: int, limit_bytes: int):
        super().__init__(
            code="FILE_TOO_LARGE",
            message=f"File size exceeds {limit_bytes // (1024 * 1024)}MB limit",
            status_code=413,
            details={"size_bytes": size_bytes, "limit_bytes": limit_bytes},
        )


class StoreAccessException(FileChatException):
    """Raised when the local database cannot be read or written."""

    def __init__(self, operation: str, message: str):
        super().__init__(
            code="STORE_ACCESS_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation},
        )


class FeatureDisabledException(FileChatException):
    """Raised when a feature flag is disabled."""

    def __init__(self, feature_name: str):
        super().__init__(
            code="FEATURE_DISABLED",
            message=f"Feature '{feature_name}' is currently disabled",
            status_code=503,
            details={"feature": feature_name},
        )


class ExternalServiceException(FileChatException):
    """Raised when an external service fails."""

    def __init__(self, service_name: str, message: str, code: str = "EXTERNAL_SERVICE_ERROR"):
        super().__init__(
            code=code,
            message=f"{service_name} error: {message}",
            status_code=502,
            details={"service": service_name},
        )


class GenerationFailure(ExternalServiceException):
    """Raised when the hosted text-generation call fails."""

    def __init__(self, message: str):
        super().__init__("Gemini", message, code="GENERATION_FAILED")
