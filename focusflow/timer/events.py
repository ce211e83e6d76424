"""Command types for the timer engine's single command stream."""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class CommandType(str, Enum):
    """Everything that can mutate the task collection."""
    CREATE = "create"
    START_OR_PAUSE = "start_or_pause"
    TOGGLE_MODE = "toggle_mode"
    MARK_COMPLETE = "mark_complete"
    DELETE = "delete"
    RESET = "reset"
    TICK = "tick"


@dataclass(frozen=True)
class Command:
    """
    A single request against the task collection.
    ``time`` is the wall-clock moment the command was issued (epoch seconds);
    None means "ask the engine's clock".
    CREATE carries ``title``, ``description``, ``focus_seconds`` and
    ``learn_seconds`` in ``payload``.
    """
    type: CommandType
    task_id: Optional[str] = None
    time: Optional[float] = None
    payload: dict = field(default_factory=dict)

    def __repr__(self) -> str:
        parts = [f"Command(type={self.type.value}"]
        if self.task_id:
            parts.append(f", task={self.task_id}")
        if self.time is not None:
            parts.append(f", t={self.time:.2f}")
        parts.append(")")
        return "".join(parts)
