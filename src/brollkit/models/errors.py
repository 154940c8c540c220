"""Error hierarchy and error response models."""

from pydantic import BaseModel, Field


class BrollError(Exception):
    """Base error for all brollkit errors."""

    def __init__(self, message: str, component: str = "", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.details = details or {}


class ValidationError(BrollError):
    """Invalid input values (bad fields, progress regressions)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="validation", details=details)


class NotFoundError(BrollError):
    """A referenced record does not exist. Raised only by the API layer."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="registry", details=details)


class InvalidTransitionError(BrollError):
    """A status change not allowed by the task state machine."""

    def __init__(self, current: str, requested: str, task_id: str = ""):
        super().__init__(
            f"Illegal status transition {current} -> {requested}",
            component="registry",
            details={"task_id": task_id, "current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class ConcurrentUpdateError(BrollError):
    """Compare-and-swap update lost against a newer version of the record."""

    def __init__(self, task_id: str, expected: int, actual: int):
        super().__init__(
            f"Task {task_id} is at version {actual}, expected {expected}",
            component="registry",
            details={"task_id": task_id, "expected": expected, "actual": actual},
        )


class StorageError(BrollError):
    """Failure talking to the local persistence backend."""

    kind = "storage"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="storage", details=details)


class StorageTimeoutError(StorageError):
    kind = "timeout"


class StorageConnectionError(StorageError):
    kind = "connection"


class StorageHTTPError(StorageError):
    """Backend answered with a non-2xx status."""

    kind = "http_status"

    def __init__(self, message: str, status_code: int, details: dict | None = None):
        super().__init__(message, details={"status_code": status_code, **(details or {})})
        self.status_code = status_code


class MalformedResponseError(StorageError):
    """Backend body could not be decoded or is not what the contract promises."""

    kind = "malformed_response"


class DownloadError(BrollError):
    """Server-side failure fetching a remote asset."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, component="downloader", details=details)


class ErrorResponse(BaseModel):
    """Standardized error response for API."""

    error_type: str = Field(..., description="Error category")
    component: str = Field(default="", description="Component that raised the error")
    message: str = Field(..., description="Human-readable error message")
    details: dict = Field(default_factory=dict)
    retry_possible: bool = Field(default=False)

    @classmethod
    def from_exception(cls, exc: BrollError, retry: bool = False) -> "ErrorResponse":
        return cls(
            error_type=type(exc).__name__,
            component=exc.component,
            message=exc.message,
            details=exc.details,
            retry_possible=retry,
        )
