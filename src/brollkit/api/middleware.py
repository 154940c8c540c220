"""Error handling middleware."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from brollkit.models.errors import (
    BrollError,
    ConcurrentUpdateError,
    DownloadError,
    ErrorResponse,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def broll_error_handler(request: Request, exc: BrollError) -> JSONResponse:
    """Handle BrollError exceptions."""
    status_code = _get_status_code(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    response = ErrorResponse.from_exception(exc, retry=_is_retryable(exc))
    return JSONResponse(status_code=status_code, content=response.model_dump())


def _get_status_code(exc: BrollError) -> int:
    """Map error type to HTTP status code."""
    if isinstance(exc, ValidationError):
        return 400
    elif isinstance(exc, NotFoundError):
        return 404
    elif isinstance(exc, (InvalidTransitionError, ConcurrentUpdateError)):
        return 409
    elif isinstance(exc, (StorageError, DownloadError)):
        return 502
    return 500


def _is_retryable(exc: BrollError) -> bool:
    return isinstance(exc, (StorageError, DownloadError, ConcurrentUpdateError))
