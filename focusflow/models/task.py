"""Task model — a goal card with two independently tracked time budgets."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    """Lifecycle states: PENDING → RUNNING ↔ PAUSED → COMPLETED → (reset) PENDING"""
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"


class TaskMode(str, Enum):
    """Which budget the running timer accrues against."""
    FOCUS = "FOCUS"
    LEARN = "LEARN"

    def toggled(self) -> "TaskMode":
        """The other mode: FOCUS ↔ LEARN."""
        return TaskMode.LEARN if self is TaskMode.FOCUS else TaskMode.FOCUS


class Task(BaseModel):
    """A goal card. Durations are seconds, timestamps are epoch seconds.

    Persisted with camelCase keys (``targetDuration``, ``focusElapsed``, ...);
    Python code uses the snake_case field names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Unique task identifier")
    title: str = Field(min_length=1, description="Goal title")
    description: str = Field(default="", description="Free-text details")
    target_duration: int = Field(ge=0, description="Focus-mode goal in seconds")
    learn_target_duration: int = Field(ge=0, description="Learn-mode goal in seconds")
    focus_elapsed: float = Field(default=0.0, ge=0, description="Seconds credited to focus")
    learn_elapsed: float = Field(default=0.0, ge=0, description="Seconds credited to learning")
    active_mode: TaskMode = Field(default=TaskMode.FOCUS, description="Budget currently accruing")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current lifecycle state")
    last_proceeded_at: Optional[float] = Field(
        default=None, description="Last moment elapsed time was credited (RUNNING only)"
    )
    created_at: float = Field(ge=0, description="Creation time")

    @model_validator(mode="after")
    def _check_invariants(self) -> "Task":
        if self.target_duration <= 0 and self.learn_target_duration <= 0:
            raise ValueError("a task needs at least one non-zero budget")
        if self.focus_elapsed > self.target_duration:
            raise ValueError("focus_elapsed exceeds target_duration")
        if self.learn_elapsed > self.learn_target_duration:
            raise ValueError("learn_elapsed exceeds learn_target_duration")
        if (self.last_proceeded_at is not None) != (self.status == TaskStatus.RUNNING):
            raise ValueError("last_proceeded_at must be set iff the task is RUNNING")
        return self

    def target_for(self, mode: TaskMode) -> int:
        return self.target_duration if mode is TaskMode.FOCUS else self.learn_target_duration

    def elapsed_for(self, mode: TaskMode) -> float:
        return self.focus_elapsed if mode is TaskMode.FOCUS else self.learn_elapsed

    def with_elapsed(self, mode: TaskMode, value: float, **changes) -> "Task":
        """Copy with the given mode's elapsed replaced (plus any other field changes)."""
        field_name = "focus_elapsed" if mode is TaskMode.FOCUS else "learn_elapsed"
        return self.model_copy(update={field_name: value, **changes})

    @property
    def active_target(self) -> int:
        return self.target_for(self.active_mode)

    @property
    def active_elapsed(self) -> float:
        return self.elapsed_for(self.active_mode)

    @property
    def remaining(self) -> float:
        """Seconds left on the active budget."""
        return max(0.0, self.active_target - self.active_elapsed)

    @property
    def progress(self) -> float:
        """Fraction of the active budget used, 0.0 – 1.0."""
        if self.active_target <= 0:
            return 1.0
        return min(1.0, self.active_elapsed / self.active_target)

    @property
    def is_running(self) -> bool:
        return self.status == TaskStatus.RUNNING

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def __repr__(self) -> str:
        return (
            f"Task(id={self.id!r}, mode={self.active_mode.value}, "
            f"focus={self.focus_elapsed:.1f}/{self.target_duration}, "
            f"learn={self.learn_elapsed:.1f}/{self.learn_target_duration}, "
            f"status={self.status.value})"
        )
