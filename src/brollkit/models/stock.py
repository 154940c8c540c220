"""Stock asset references and retrieval/migration results."""

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class StockSource(StrEnum):
    """Third-party stock footage providers."""

    PEXELS = "pexels"
    PIXABAY = "pixabay"


class FailureKind(StrEnum):
    """Why a call to the persistence backend did not succeed."""

    TIMEOUT = "timeout"
    CONNECTION = "connection"
    HTTP_STATUS = "http_status"
    MALFORMED_RESPONSE = "malformed_response"


class StockAssetReference(BaseModel):
    """External stock footage descriptor."""

    model_config = {"frozen": True}

    id: str = Field(..., min_length=1)
    download_url: str = Field(..., min_length=1)
    preview_url: str | None = None
    duration: float = Field(default=0.0, ge=0)
    source: StockSource
    author: str | None = None


class DownloadProgress(BaseModel):
    """Progress of a single asset retrieval."""

    model_config = {"frozen": True}

    loaded: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    percent: float = Field(..., ge=0, le=100)


class RetrievalOutcome(BaseModel):
    """Result of saving one remote asset: either a local URL or an error.

    ``degraded`` marks a success where the backend was unreachable and the
    remote URL is handed back unchanged.
    """

    model_config = {"frozen": True}

    success: bool
    local_url: str | None = None
    degraded: bool = False
    error: str | None = None
    failure_kind: FailureKind | None = None

    @model_validator(mode="after")
    def validate_shape(self) -> "RetrievalOutcome":
        if self.success:
            if not self.local_url:
                raise ValueError("successful outcome requires local_url")
            if self.error is not None or self.failure_kind is not None:
                raise ValueError("successful outcome cannot carry an error")
        else:
            if not self.error:
                raise ValueError("failed outcome requires an error message")
            if self.local_url is not None or self.degraded:
                raise ValueError("failed outcome cannot carry a local_url")
        return self

    @classmethod
    def ok(cls, local_url: str, degraded: bool = False) -> "RetrievalOutcome":
        return cls(success=True, local_url=local_url, degraded=degraded)

    @classmethod
    def failed(cls, error: str, kind: FailureKind | None = None) -> "RetrievalOutcome":
        return cls(success=False, error=error, failure_kind=kind)


class MigrationResult(BaseModel):
    """Total old -> new URL mapping plus how it was produced.

    ``migrated`` is True only when the batch call succeeded. On any failure
    the mapping is the identity over every input URL.
    """

    model_config = {"frozen": True}

    url_map: dict[str, str] = Field(default_factory=dict)
    migrated: bool = False
    degraded: bool = False
    external_count: int = Field(default=0, ge=0)
    error: str | None = None
    failure_kind: FailureKind | None = None
