"""Pipeline state and step outcomes.

``PipelineState`` is a closed sum type: exactly one of Idle, Processing,
Succeeded or Failed holds at any time. States are immutable; the
orchestrator replaces the current state, it never mutates it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, Sequence, TypeVar, Union

T = TypeVar("T")


class PipelineStatus(str, Enum):
    """Discriminator of the pipeline state."""

    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Idle:
    """
    No run in flight.

    ``notice`` carries a validation or read error from the latest upload so
    it can be shown while the pipeline stays idle.
    """

    notice: Optional[str] = None

    @property
    def status(self) -> PipelineStatus:
        return PipelineStatus.IDLE

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "notice": self.notice}


@dataclass(frozen=True)
class Processing:
    """Run ``run_id`` is waiting on the remote model."""

    run_id: int

    @property
    def status(self) -> PipelineStatus:
        return PipelineStatus.PROCESSING

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "run_id": self.run_id}


@dataclass(frozen=True)
class Succeeded:
    """
    Run finished.

    ``calorie_estimate`` is None exactly when ``food_items`` is empty.
    ``food_items`` is stored as a tuple, so listeners cannot mutate it.
    """

    run_id: int
    food_items: Sequence[str] = ()
    calorie_estimate: Optional[str] = None

    def __post_init__(self) -> None:
        """Freeze food items and validate invariants after initialization."""
        object.__setattr__(self, "food_items", tuple(self.food_items))
        if self.calorie_estimate is not None and not self.food_items:
            raise ValueError("Calorie estimate requires at least one food item")

    @property
    def status(self) -> PipelineStatus:
        return PipelineStatus.SUCCEEDED

    @property
    def has_food_items(self) -> bool:
        return bool(self.food_items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "run_id": self.run_id,
            "food_items": list(self.food_items),
            "calorie_estimate": self.calorie_estimate,
        }


@dataclass(frozen=True)
class Failed:
    """Run failed; any partial results were discarded."""

    run_id: int
    message: str

    @property
    def status(self) -> PipelineStatus:
        return PipelineStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "run_id": self.run_id, "message": self.message}


PipelineState = Union[Idle, Processing, Succeeded, Failed]


# ═══════════════════════════════════════════════════════════
# STEP OUTCOMES
# ═══════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StepSucceeded(Generic[T]):
    """A pipeline step produced a value."""

    value: T


@dataclass(frozen=True)
class StepFailed:
    """A pipeline step failed with ``error``."""

    error: Exception

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


StepOutcome = Union[StepSucceeded[T], StepFailed]
