"""Generation task state and status models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class TaskStatus(StrEnum):
    """Stages of a B-roll generation task."""

    PENDING = "pending"
    GENERATING_IMAGE = "generating_image"
    GENERATING_VIDEO = "generating_video"
    DOWNLOADING = "downloading"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({TaskStatus.COMPLETE, TaskStatus.FAILED})

# Forward edges only; FAILED is reachable from every non-terminal status.
NEXT_STATUS: dict[TaskStatus, TaskStatus] = {
    TaskStatus.PENDING: TaskStatus.GENERATING_IMAGE,
    TaskStatus.GENERATING_IMAGE: TaskStatus.GENERATING_VIDEO,
    TaskStatus.GENERATING_VIDEO: TaskStatus.DOWNLOADING,
    TaskStatus.DOWNLOADING: TaskStatus.COMPLETE,
}


def can_transition(current: TaskStatus, requested: TaskStatus) -> bool:
    """Check whether a task may move from ``current`` to ``requested``.

    Re-asserting the current status is allowed for non-terminal tasks so that
    URLs and collaborator handles can be recorded within a stage.
    """
    if current.is_terminal:
        return False
    if requested == current or requested == TaskStatus.FAILED:
        return True
    return NEXT_STATUS.get(current) == requested


class GenerationTask(BaseModel):
    """One attempt to produce content for an asset slot."""

    id: str = Field(..., min_length=1)
    asset_id: str = Field(..., min_length=1)
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    image_task_id: str | None = None
    video_task_id: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    error: str | None = None
    progress: int = Field(default=0, ge=0, le=100)
    created_at: datetime
    updated_at: datetime
    version: int = Field(default=0, ge=0)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


# Fields callers may pass to TaskRegistry.update.
UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "image_task_id",
        "video_task_id",
        "image_url",
        "video_url",
        "error",
        "progress",
    }
)
