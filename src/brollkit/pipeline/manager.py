"""Generation manager: drives one asset through image -> video -> local save."""

import logging
from typing import NamedTuple, Protocol

from brollkit.models.errors import InvalidTransitionError
from brollkit.models.task import GenerationTask, TaskStatus
from brollkit.pipeline.registry import TaskRegistry
from brollkit.storage.retrieval import AssetRetriever

logger = logging.getLogger(__name__)

GENERATED_SOURCE = "ai"


class GeneratedMedia(NamedTuple):
    """A finished job of the external generation service."""

    task_id: str
    url: str


class MediaGenerator(Protocol):
    """External image/video generation service.

    Implementations block until their own job finishes and raise on failure.
    """

    def generate_image(self, prompt: str) -> GeneratedMedia: ...

    def generate_video(self, prompt: str, image_url: str) -> GeneratedMedia: ...


class _Stopped(Exception):
    """The task reached a terminal state from outside the run."""


class GenerationManager:
    """Sequences generation stages and records them in the registry."""

    def __init__(
        self,
        registry: TaskRegistry,
        retriever: AssetRetriever,
        generator: MediaGenerator,
    ):
        self.registry = registry
        self.retriever = retriever
        self.generator = generator

    def start(self, asset_id: str) -> GenerationTask:
        """Return the in-flight task for an asset, or a new pending one."""
        return self.registry.create_for_asset(asset_id)

    def cancel(self, task_id: str) -> GenerationTask | None:
        """Cancel a task; a running :meth:`run` stops at the next stage boundary."""
        task = self.registry.get(task_id)
        if task is None or task.is_terminal:
            return task
        try:
            return self.registry.cancel(task_id, reason="Cancelled")
        except InvalidTransitionError:
            return self.registry.get(task_id)

    def run(self, task_id: str, prompt: str, owner_id: str) -> GenerationTask | None:
        """Run all stages for a task. Returns None for an unknown id.

        Failures of the generator or the local save mark the task failed;
        they are not raised to the caller.
        """
        task = self.registry.get(task_id)
        if task is None:
            return None

        try:
            # Stage 1: image
            self._advance(task_id, TaskStatus.GENERATING_IMAGE)
            image = self.generator.generate_image(prompt)
            self._advance(
                task_id,
                TaskStatus.GENERATING_IMAGE,
                image_task_id=image.task_id,
                image_url=image.url,
            )

            # Stage 2: video
            self._advance(task_id, TaskStatus.GENERATING_VIDEO)
            video = self.generator.generate_video(prompt, image.url)
            self._advance(
                task_id,
                TaskStatus.GENERATING_VIDEO,
                video_task_id=video.task_id,
                video_url=video.url,
            )

            # Stage 3: local save
            self._advance(task_id, TaskStatus.DOWNLOADING)
            outcome = self.retriever.save_remote_asset(
                video.url, GENERATED_SOURCE, task.asset_id, owner_id
            )
            if not outcome.success:
                return self._fail(task_id, outcome.error)

            self._advance(task_id, TaskStatus.COMPLETE, video_url=outcome.local_url)
            logger.info(f"Task {task_id} complete: {outcome.local_url}")

        except _Stopped:
            logger.info(f"Task {task_id} stopped before completion")
        except Exception as e:
            logger.error(f"Task {task_id} failed: {e}")
            return self._fail(task_id, str(e) or type(e).__name__)

        return self.registry.get(task_id)

    def _advance(self, task_id: str, status: TaskStatus, **fields) -> None:
        current = self.registry.get(task_id)
        if current is None or current.is_terminal:
            raise _Stopped()
        try:
            self.registry.update(task_id, status=status, **fields)
        except InvalidTransitionError:
            # Cancelled between the check above and the update.
            raise _Stopped()

    def _fail(self, task_id: str, message: str | None) -> GenerationTask | None:
        try:
            return self.registry.update(task_id, status=TaskStatus.FAILED, error=message)
        except InvalidTransitionError:
            return self.registry.get(task_id)
