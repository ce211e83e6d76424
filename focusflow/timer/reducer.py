"""Pure state transitions for a single Task.

Every function takes a Task and returns a Task. When nothing changes the
*same* object is returned, so callers detect mutation with ``is not``.
Transitions never credit time on their own; only ``advance`` (the tick step)
moves elapsed values forward.
"""

from focusflow.models.task import Task, TaskStatus

DEFAULT_MIN_DELTA = 0.1


def start(task: Task, now: float) -> Task:
    """PENDING/PAUSED → RUNNING. Completed or already running tasks are left alone."""
    if task.status in (TaskStatus.COMPLETED, TaskStatus.RUNNING):
        return task
    return task.model_copy(update={
        "status": TaskStatus.RUNNING,
        "last_proceeded_at": now,
    })


def pause(task: Task) -> Task:
    """RUNNING → PAUSED. Freezes accrual without crediting the partial interval."""
    if task.status != TaskStatus.RUNNING:
        return task
    return task.model_copy(update={
        "status": TaskStatus.PAUSED,
        "last_proceeded_at": None,
    })


def toggle_mode(task: Task) -> Task:
    """Flip FOCUS ↔ LEARN, always landing in PAUSED so no time leaks across modes."""
    return task.model_copy(update={
        "active_mode": task.active_mode.toggled(),
        "status": TaskStatus.PAUSED,
        "last_proceeded_at": None,
    })


def mark_complete(task: Task) -> Task:
    """Force the active budget to its target. The other budget is not touched."""
    if task.status == TaskStatus.COMPLETED:
        return task
    return task.with_elapsed(
        task.active_mode,
        float(task.active_target),
        status=TaskStatus.COMPLETED,
        last_proceeded_at=None,
    )


def reset(task: Task) -> Task:
    """Zero both budgets and return to PENDING. Mode is kept."""
    return task.model_copy(update={
        "status": TaskStatus.PENDING,
        "focus_elapsed": 0.0,
        "learn_elapsed": 0.0,
        "last_proceeded_at": None,
    })


def advance(task: Task, now: float, min_delta: float = DEFAULT_MIN_DELTA) -> Task:
    """Credit wall-clock time since ``last_proceeded_at`` to the active budget.

    - Missing ``last_proceeded_at`` counts as ``now``: nothing is credited,
      but the stamp is set so the next tick measures from here.
    - A delta below ``min_delta`` (including a clock that stepped backwards)
      is not credited and ``last_proceeded_at`` is kept, so it carries over.
    - Reaching the target snaps elapsed to exactly the target and completes.
    """
    if task.status != TaskStatus.RUNNING:
        return task

    if task.last_proceeded_at is None:
        # zero delta this cycle; accrual resumes from here on the next tick
        return task.model_copy(update={"last_proceeded_at": now})

    delta = now - task.last_proceeded_at
    if delta < min_delta:
        return task

    target = task.active_target
    candidate = task.active_elapsed + delta

    if candidate >= target:
        return task.with_elapsed(
            task.active_mode,
            float(target),
            status=TaskStatus.COMPLETED,
            last_proceeded_at=None,
        )
    return task.with_elapsed(task.active_mode, candidate, last_proceeded_at=now)


def recover(task: Task) -> Task:
    """Cold-start rule: a task persisted as RUNNING comes back PAUSED."""
    if task.status != TaskStatus.RUNNING:
        return task
    return task.model_copy(update={
        "status": TaskStatus.PAUSED,
        "last_proceeded_at": None,
    })
