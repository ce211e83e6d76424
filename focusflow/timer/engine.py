"""Timer Engine — owns the task collection and applies commands and ticks."""

import logging
import time
import uuid
from typing import Callable, Optional

from focusflow.core.config import settings
from focusflow.errors import InvalidTaskError
from focusflow.models.task import Task, TaskMode, TaskStatus
from focusflow.storage.store import PersistenceAdapter
from focusflow.timer import reducer
from focusflow.timer.events import Command, CommandType

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "No description provided."


class TimerEngine:
    """Single owner of the task collection.

    Commands and ticks are applied one at a time; each replaces the affected
    Task objects with new ones produced by ``focusflow.timer.reducer``.
    Invalid commands (unknown id, starting a completed task, ...) are no-ops
    and return False.
    """

    def __init__(
        self,
        tasks: Optional[list[Task]] = None,
        adapter: Optional[PersistenceAdapter] = None,
        clock: Callable[[], float] = time.time,
        min_delta: float = settings.MIN_TICK_DELTA,
        default_learn_target: int = settings.DEFAULT_LEARN_TARGET,
    ):
        self.tasks: dict[str, Task] = {t.id: t for t in (tasks or [])}
        self.adapter = adapter
        self.clock = clock
        self.min_delta = min_delta
        self.default_learn_target = default_learn_target

        # Enforce exclusivity on whatever we were handed
        running = [t for t in self.tasks.values() if t.is_running]
        for extra in running[1:]:
            logger.warning("More than one running task on load; pausing %s", extra.id)
            self.tasks[extra.id] = reducer.pause(extra)

    @classmethod
    def from_adapter(cls, adapter: PersistenceAdapter, **kwargs) -> "TimerEngine":
        """Build an engine from the adapter's snapshot (empty when absent).

        ``PersistenceAdapter.load`` already downgrades RUNNING records; tasks from
        any other adapter still marked RUNNING are paused here as well, since the
        gap since they were saved is unknown.
        """
        tasks = [reducer.recover(t) for t in adapter.load() or []]
        return cls(tasks=tasks, adapter=adapter, **kwargs)

    # ── Queries ───────────────────────────────────────────────────────

    def get(self, task_id: str) -> Optional[Task]:
        return self.tasks.get(task_id)

    def list_tasks(self) -> list[Task]:
        """Newest first."""
        return sorted(self.tasks.values(), key=lambda t: t.created_at, reverse=True)

    @property
    def running_task(self) -> Optional[Task]:
        return next((t for t in self.tasks.values() if t.is_running), None)

    # ── Commands ──────────────────────────────────────────────────────

    def create_task(
        self,
        title: str,
        description: str = "",
        focus_seconds: int = 0,
        learn_seconds: int = 0,
        now: Optional[float] = None,
    ) -> Task:
        """Validate inputs and add a new PENDING task in FOCUS mode."""
        title = (title or "").strip()
        if not title:
            raise InvalidTaskError("title must not be empty")
        for name, value in (("focus_seconds", focus_seconds), ("learn_seconds", learn_seconds)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidTaskError(f"{name} must be a whole number of seconds")
            if value < 0:
                raise InvalidTaskError(f"{name} must not be negative")
        if focus_seconds + learn_seconds <= 0:
            raise InvalidTaskError("at least one duration must be positive")

        task = Task(
            id=str(uuid.uuid4()),
            title=title,
            description=(description or "").strip() or DEFAULT_DESCRIPTION,
            target_duration=focus_seconds,
            learn_target_duration=learn_seconds or self.default_learn_target,
            active_mode=TaskMode.FOCUS,
            status=TaskStatus.PENDING,
            created_at=self._now(now),
        )
        self.tasks[task.id] = task
        logger.info("Created task %s (%r)", task.id, task.title)
        self._persist()
        return task

    def start_or_pause(self, task_id: str, now: Optional[float] = None) -> bool:
        """Pause the task if it is running, otherwise start it."""
        task = self.tasks.get(task_id)
        if task is None:
            return self._noop("start_or_pause", task_id, "unknown task")
        if task.is_running:
            return self.pause(task_id)
        return self.start(task_id, now)

    def start(self, task_id: str, now: Optional[float] = None) -> bool:
        """Start/resume a task, pausing whichever other task is running."""
        task = self.tasks.get(task_id)
        if task is None:
            return self._noop("start", task_id, "unknown task")
        if task.is_completed:
            return self._noop("start", task_id, "task is completed")
        if task.is_running:
            return self._noop("start", task_id, "already running")

        for other in list(self.tasks.values()):
            if other.id != task_id and other.is_running:
                self.tasks[other.id] = reducer.pause(other)
                logger.info("Paused %s to start %s", other.id, task_id)

        self.tasks[task_id] = reducer.start(task, self._now(now))
        self._persist()
        return True

    def pause(self, task_id: str) -> bool:
        task = self.tasks.get(task_id)
        if task is None:
            return self._noop("pause", task_id, "unknown task")
        return self._replace(task, reducer.pause(task), "pause")

    def toggle_mode(self, task_id: str) -> bool:
        task = self.tasks.get(task_id)
        if task is None:
            return self._noop("toggle_mode", task_id, "unknown task")
        return self._replace(task, reducer.toggle_mode(task), "toggle_mode")

    def mark_complete(self, task_id: str) -> bool:
        task = self.tasks.get(task_id)
        if task is None:
            return self._noop("mark_complete", task_id, "unknown task")
        return self._replace(task, reducer.mark_complete(task), "mark_complete")

    def reset_task(self, task_id: str) -> bool:
        task = self.tasks.get(task_id)
        if task is None:
            return self._noop("reset", task_id, "unknown task")
        return self._replace(task, reducer.reset(task), "reset")

    def delete_task(self, task_id: str) -> bool:
        if self.tasks.pop(task_id, None) is None:
            return self._noop("delete", task_id, "unknown task")
        logger.info("Deleted task %s", task_id)
        self._persist()
        return True

    def tick(self, now: Optional[float] = None) -> list[str]:
        """Credit elapsed time to the running task(s). Returns ids that changed."""
        now = self._now(now)
        changed: list[str] = []
        next_tasks: dict[str, Task] = {}

        for task_id, task in self.tasks.items():
            updated = reducer.advance(task, now, self.min_delta)
            if updated is not task:
                changed.append(task_id)
                if updated.is_completed:
                    logger.info(
                        "Task %s reached its %s target", task_id, updated.active_mode.value
                    )
            next_tasks[task_id] = updated

        if changed:
            self.tasks = next_tasks
            self._persist()
        return changed

    def dispatch(self, command: Command):
        """Apply a Command from the serialized command stream."""
        match command.type:
            case CommandType.CREATE:
                return self.create_task(now=command.time, **command.payload)
            case CommandType.START_OR_PAUSE:
                return self.start_or_pause(command.task_id, now=command.time)
            case CommandType.TOGGLE_MODE:
                return self.toggle_mode(command.task_id)
            case CommandType.MARK_COMPLETE:
                return self.mark_complete(command.task_id)
            case CommandType.DELETE:
                return self.delete_task(command.task_id)
            case CommandType.RESET:
                return self.reset_task(command.task_id)
            case CommandType.TICK:
                return self.tick(now=command.time)
        raise ValueError(f"Unknown command type: {command.type}")

    # ── Utilities ─────────────────────────────────────────────────────

    def _replace(self, old: Task, new: Task, action: str) -> bool:
        if new is old:
            return self._noop(action, old.id, f"no change from {old.status.value}")
        self.tasks[old.id] = new
        logger.debug("%s %s: %s → %s", action, old.id, old.status.value, new.status.value)
        self._persist()
        return True

    def _noop(self, action: str, task_id: Optional[str], reason: str) -> bool:
        logger.debug("Ignored %s for %s: %s", action, task_id, reason)
        return False

    def _now(self, now: Optional[float]) -> float:
        return self.clock() if now is None else now

    def _persist(self) -> None:
        if self.adapter is not None:
            self.adapter.save(self.list_tasks())
