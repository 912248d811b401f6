"""Custom exception hierarchy mapped onto HTTP error responses."""

from typing import Any, Optional


class BaseAPIException(Exception):
    """Base class for all errors rendered by the API exception handler."""

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details


# ============================================================================
# Client errors
# ============================================================================


class ValidationError(BaseAPIException):
    """Request failed domain validation (bad type, unknown field paths, ...)."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, details=details)


class ResourceNotFoundError(BaseAPIException):
    """Requested resource does not exist or is not visible to the caller."""

    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(BaseAPIException):
    status_code = 403
    error_code = "FORBIDDEN"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class UnknownReportTypeError(BaseAPIException):
    """No generator is registered for the requested report type."""

    status_code = 400
    error_code = "UNKNOWN_REPORT_TYPE"

    def __init__(self, report_type: str):
        super().__init__(
            f"Unknown report type: {report_type}",
            details={"report_type": report_type},
        )
        self.report_type = report_type


class ExportFormatError(BaseAPIException):
    """Export format is not one of the supported renderers."""

    status_code = 400
    error_code = "UNSUPPORTED_EXPORT_FORMAT"

    def __init__(self, export_format: str, supported: Optional[list[str]] = None):
        super().__init__(
            f"Unsupported export format: {export_format}",
            details={"format": export_format, "supported": supported or []},
        )
        self.export_format = export_format


# ============================================================================
# Authentication errors
# ============================================================================


class MissingTokenError(BaseAPIException):
    status_code = 401
    error_code = "MISSING_TOKEN"

    def __init__(self, message: str = "Authorization token is required"):
        super().__init__(message)


class InvalidTokenError(BaseAPIException):
    status_code = 401
    error_code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid authorization token"):
        super().__init__(message)


# ============================================================================
# Server errors
# ============================================================================


class ReportGenerationError(BaseAPIException):
    """
    Raised when a report generator fails.

    Wraps the underlying cause so callers never observe partially
    aggregated data.
    """

    status_code = 500
    error_code = "REPORT_GENERATION_FAILED"

    def __init__(self, report_type: str, cause: Optional[BaseException] = None):
        reason = str(cause) if cause is not None else "unknown error"
        super().__init__(
            f"Failed to generate {report_type} report: {reason}",
            details={
                "report_type": report_type,
                "cause": type(cause).__name__ if cause is not None else None,
            },
        )
        self.report_type = report_type
        self.cause = cause


class TaskQueueUnavailableError(BaseAPIException):
    """The broker refused a generation task; the report was marked failed."""

    status_code = 503
    error_code = "TASK_QUEUE_UNAVAILABLE"

    def __init__(self, report_id: str, cause: Optional[BaseException] = None):
        super().__init__(
            "Report generation could not be queued",
            details={
                "report_id": report_id,
                "cause": type(cause).__name__ if cause is not None else None,
            },
        )


class DatabaseError(BaseAPIException):
    status_code = 500
    error_code = "DATABASE_ERROR"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)
