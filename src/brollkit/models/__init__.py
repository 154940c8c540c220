"""Data models for brollkit."""

from brollkit.models.errors import (
    BrollError,
    ConcurrentUpdateError,
    DownloadError,
    ErrorResponse,
    InvalidTransitionError,
    MalformedResponseError,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    StorageHTTPError,
    StorageTimeoutError,
    ValidationError,
)
from brollkit.models.stock import (
    DownloadProgress,
    FailureKind,
    MigrationResult,
    RetrievalOutcome,
    StockAssetReference,
    StockSource,
)
from brollkit.models.task import GenerationTask, TaskStatus

__all__ = [
    "BrollError",
    "ConcurrentUpdateError",
    "DownloadError",
    "DownloadProgress",
    "ErrorResponse",
    "FailureKind",
    "GenerationTask",
    "InvalidTransitionError",
    "MalformedResponseError",
    "MigrationResult",
    "NotFoundError",
    "RetrievalOutcome",
    "StockAssetReference",
    "StockSource",
    "StorageConnectionError",
    "StorageError",
    "StorageHTTPError",
    "StorageTimeoutError",
    "TaskStatus",
    "ValidationError",
]
