"""Pipeline state container types."""

from caloriesnap.domain.meal.pipeline.state import (
    Failed,
    Idle,
    PipelineState,
    PipelineStatus,
    Processing,
    StepFailed,
    StepOutcome,
    StepSucceeded,
    Succeeded,
)

__all__ = [
    "Failed",
    "Idle",
    "PipelineState",
    "PipelineStatus",
    "Processing",
    "StepFailed",
    "StepOutcome",
    "StepSucceeded",
    "Succeeded",
]
