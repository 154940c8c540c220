"""In-memory registry of generation tasks."""

import logging
import threading
import time
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from brollkit.models.errors import ConcurrentUpdateError, InvalidTransitionError, ValidationError
from brollkit.models.task import UPDATABLE_FIELDS, GenerationTask, TaskStatus, can_transition
from brollkit.pipeline.stages import get_stage_progress

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Generation failed"


class TaskRegistry:
    """Owns GenerationTask records for one session or application.

    Every returned task is a copy; mutate only through :meth:`update`. All
    operations hold a re-entrant lock, and each record carries a version
    counter that callers can pass back as ``expected_version`` to detect a
    lost update.
    """

    def __init__(self):
        self._tasks: dict[str, GenerationTask] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create(self, asset_id: str) -> GenerationTask:
        """Create a new pending task for an asset slot."""
        now = datetime.now(UTC)
        with self._lock:
            task_id = self._new_id()
            task = GenerationTask(
                id=task_id,
                asset_id=asset_id,
                status=TaskStatus.PENDING,
                progress=0,
                created_at=now,
                updated_at=now,
            )
            self._tasks[task_id] = task
        logger.info(f"Created task {task_id} for asset {asset_id}")
        return task.model_copy(deep=True)

    def create_for_asset(self, asset_id: str) -> GenerationTask:
        """Return the in-flight task for an asset, creating one if there is none."""
        with self._lock:
            existing = self._in_flight(asset_id)
            if existing is not None:
                return existing.model_copy(deep=True)
            return self.create(asset_id)

    def get(self, task_id: str) -> GenerationTask | None:
        with self._lock:
            task = self._tasks.get(task_id)
            return task.model_copy(deep=True) if task else None

    def get_by_asset_id(self, asset_id: str) -> GenerationTask | None:
        """Get the non-terminal task for an asset, if any."""
        with self._lock:
            task = self._in_flight(asset_id)
            return task.model_copy(deep=True) if task else None

    def get_all(self) -> list[GenerationTask]:
        """Snapshot of all tasks in insertion order."""
        with self._lock:
            return [task.model_copy(deep=True) for task in self._tasks.values()]

    def update(
        self, task_id: str, expected_version: int | None = None, **fields: Any
    ) -> GenerationTask | None:
        """Validate and merge ``fields`` into a task.

        Returns None for an unknown id. Raises InvalidTransitionError for a
        status change the state machine forbids (including any change to a
        terminal task), ValidationError for bad field values and
        ConcurrentUpdateError when ``expected_version`` is stale.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {sorted(unknown)}",
                details={"fields": sorted(unknown)},
            )

        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            if expected_version is not None and expected_version != task.version:
                raise ConcurrentUpdateError(task_id, expected_version, task.version)

            updated = self._merge(task, fields)
            self._tasks[task_id] = updated

        if updated.status != task.status:
            logger.info(f"Task {task_id}: {task.status} -> {updated.status}")
        return updated.model_copy(deep=True)

    def cancel(self, task_id: str, reason: str = "Cancelled") -> GenerationTask | None:
        """Fail a non-terminal task with ``reason``."""
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            return self.update(task_id, status=TaskStatus.FAILED, error=reason)

    def _in_flight(self, asset_id: str) -> GenerationTask | None:
        for task in self._tasks.values():
            if task.asset_id == asset_id and not task.is_terminal:
                return task
        return None

    def _new_id(self) -> str:
        while True:
            task_id = f"task_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
            if task_id not in self._tasks:
                return task_id

    def _merge(self, task: GenerationTask, fields: dict[str, Any]) -> GenerationTask:
        current = task.status
        try:
            requested = TaskStatus(fields.get("status") or current)
        except ValueError:
            raise ValidationError(f"Unknown status: {fields.get('status')}")

        if not can_transition(current, requested):
            raise InvalidTransitionError(current.value, requested.value, task.id)

        progress = fields.get("progress")
        if progress is None:
            progress = task.progress
            stage_progress = get_stage_progress(requested)
            if requested != current and stage_progress is not None:
                progress = max(progress, stage_progress)
        elif not isinstance(progress, int) or isinstance(progress, bool):
            raise ValidationError(
                f"Progress must be an integer, got {progress!r}", details={"task_id": task.id}
            )
        elif progress < task.progress:
            raise ValidationError(
                f"Progress cannot decrease from {task.progress} to {progress}",
                details={"task_id": task.id},
            )

        error = fields.get("error", task.error)
        if requested == TaskStatus.FAILED:
            error = error or DEFAULT_FAILURE_MESSAGE
        elif error is not None:
            raise ValidationError("error may only be set on failed tasks")

        data = task.model_dump()
        data.update(fields)
        data.update(
            status=requested,
            progress=progress,
            error=error,
            updated_at=_next_timestamp(task.updated_at),
            version=task.version + 1,
        )
        try:
            return GenerationTask.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid task update: {e}", details={"task_id": task.id})


def _next_timestamp(previous: datetime) -> datetime:
    """Current time, forced strictly after ``previous``."""
    now = datetime.now(UTC)
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now
