"""Generation workflow steps used to present task progress."""

from typing import NamedTuple

from brollkit.models.task import TaskStatus

UNKNOWN_LABEL = "Unknown"


class WorkflowStep(NamedTuple):
    status: TaskStatus
    label: str
    progress: int


WORKFLOW_STEPS: tuple[WorkflowStep, ...] = (
    WorkflowStep(TaskStatus.PENDING, "Queued", 0),
    WorkflowStep(TaskStatus.GENERATING_IMAGE, "Generating Image", 25),
    WorkflowStep(TaskStatus.GENERATING_VIDEO, "Converting to Video", 60),
    WorkflowStep(TaskStatus.DOWNLOADING, "Downloading & Saving", 90),
    WorkflowStep(TaskStatus.COMPLETE, "Complete", 100),
)

_STEPS_BY_STATUS = {step.status: step for step in WORKFLOW_STEPS}


def get_progress_label(status: str) -> str:
    """Return the display label for a status, or ``"Unknown"``."""
    step = _STEPS_BY_STATUS.get(status)
    return step.label if step else UNKNOWN_LABEL


def get_stage_progress(status: str) -> int | None:
    """Return the progress percentage for a status, if it is a workflow step."""
    step = _STEPS_BY_STATUS.get(status)
    return step.progress if step else None
