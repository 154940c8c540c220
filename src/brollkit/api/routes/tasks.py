"""Generation task endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from brollkit.api.dependencies import get_registry
from brollkit.models.errors import NotFoundError
from brollkit.models.task import GenerationTask, TaskStatus
from brollkit.pipeline.registry import TaskRegistry
from brollkit.pipeline.stages import get_progress_label

router = APIRouter(prefix="/api/v1", tags=["tasks"])


class CreateTaskRequest(BaseModel):
    asset_id: str = Field(..., min_length=1)


class UpdateTaskRequest(BaseModel):
    status: TaskStatus | None = None
    image_task_id: str | None = None
    video_task_id: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    error: str | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    expected_version: int | None = None


def _task_payload(task: GenerationTask) -> dict:
    return {**task.model_dump(mode="json"), "label": get_progress_label(task.status)}


@router.post("/tasks")
async def create_task(
    request: CreateTaskRequest,
    registry: TaskRegistry = Depends(get_registry),
):
    """Start tracking generation for an asset, reusing its in-flight task."""
    return _task_payload(registry.create_for_asset(request.asset_id))


@router.get("/tasks")
async def list_tasks(registry: TaskRegistry = Depends(get_registry)):
    return [_task_payload(task) for task in registry.get_all()]


@router.get("/tasks/{task_id}")
async def get_task(task_id: str, registry: TaskRegistry = Depends(get_registry)):
    """Get the status of a generation task."""
    task = registry.get(task_id)
    if not task:
        raise NotFoundError(f"Task {task_id} not found")
    return _task_payload(task)


@router.patch("/tasks/{task_id}")
async def update_task(
    task_id: str,
    request: UpdateTaskRequest,
    registry: TaskRegistry = Depends(get_registry),
):
    """Record progress reported by the generation service."""
    fields = request.model_dump(exclude_unset=True)
    expected_version = fields.pop("expected_version", None)
    task = registry.update(task_id, expected_version=expected_version, **fields)
    if not task:
        raise NotFoundError(f"Task {task_id} not found")
    return _task_payload(task)


@router.delete("/tasks/{task_id}")
async def cancel_task(task_id: str, registry: TaskRegistry = Depends(get_registry)):
    """Cancel a generation task."""
    task = registry.cancel(task_id)
    if not task:
        raise NotFoundError(f"Task {task_id} not found")
    return _task_payload(task)
