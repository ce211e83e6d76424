"""Versioned snapshot migrations.

Snapshot versions
-----------------
v1  Single-budget cards stored as a bare JSON list. Fields: ``id``, ``title``,
    ``description``, ``targetDuration``, ``elapsedSeconds``, ``status``,
    ``createdAt``/``lastProceededAt`` in *milliseconds*.
v2  Dual-budget cards in an envelope ``{"version": 2, "tasks": [...]}``.
    Adds ``focusElapsed``, ``learnElapsed``, ``learnTargetDuration``,
    ``activeMode``; timestamps in epoch seconds.

Records are upgraded one version at a time through ``MIGRATIONS`` and then
normalized so that they satisfy the Task invariants on load.
"""

import logging
from typing import Any, Callable

from focusflow.core.config import settings

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 2

RawRecord = dict[str, Any]


def _v1_to_v2(record: RawRecord) -> RawRecord:
    out = dict(record)
    legacy_elapsed = out.pop("elapsedSeconds", None)
    if out.get("focusElapsed") is None:
        out["focusElapsed"] = legacy_elapsed if legacy_elapsed is not None else 0
    if out.get("learnElapsed") is None:
        out["learnElapsed"] = 0
    if out.get("learnTargetDuration") is None:
        out["learnTargetDuration"] = settings.DEFAULT_LEARN_TARGET
    if not out.get("activeMode"):
        out["activeMode"] = "FOCUS"
    for key in ("createdAt", "lastProceededAt"):
        if isinstance(out.get(key), (int, float)):
            out[key] = out[key] / 1000.0
    return out


MIGRATIONS: dict[int, Callable[[RawRecord], RawRecord]] = {
    1: _v1_to_v2,
}


def migrate_record(record: RawRecord, from_version: int) -> RawRecord:
    """Upgrade a raw record from ``from_version`` to ``SNAPSHOT_VERSION``."""
    if from_version > SNAPSHOT_VERSION:
        raise ValueError(f"Snapshot version {from_version} is newer than supported ({SNAPSHOT_VERSION})")
    version = from_version
    while version < SNAPSHOT_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise ValueError(f"No migration from snapshot version {version}")
        record = step(record)
        version += 1
    return normalize_record(record)


def normalize_record(record: RawRecord) -> RawRecord:
    """Fill gaps a partially written v2 record may have and restore invariants.

    - missing fields get the same defaults as the v1 → v2 upgrade
    - elapsed values are clamped into [0, target]
    - RUNNING becomes PAUSED and ``lastProceededAt`` is dropped (cold start)
    """
    out = dict(record)
    legacy_elapsed = out.pop("elapsedSeconds", None)
    if out.get("focusElapsed") is None and legacy_elapsed is not None:
        out["focusElapsed"] = legacy_elapsed
    out.setdefault("description", "")
    if not out.get("activeMode"):
        out["activeMode"] = "FOCUS"
    if out.get("learnTargetDuration") is None:
        out["learnTargetDuration"] = settings.DEFAULT_LEARN_TARGET
    if isinstance(out.get("status"), str):
        out["status"] = out["status"].upper()
    if isinstance(out.get("activeMode"), str):
        out["activeMode"] = out["activeMode"].upper()

    for elapsed_key, target_key in (
        ("focusElapsed", "targetDuration"),
        ("learnElapsed", "learnTargetDuration"),
    ):
        elapsed = out.get(elapsed_key)
        if elapsed is None:
            out[elapsed_key] = 0.0
            continue
        target = out.get(target_key)
        if isinstance(elapsed, (int, float)) and isinstance(target, (int, float)):
            out[elapsed_key] = float(min(max(elapsed, 0), target))

    if out.get("status") == "RUNNING":
        out["status"] = "PAUSED"
    if out.get("status") != "RUNNING":
        out.pop("lastProceededAt", None)
    return out


def unwrap_snapshot(data: Any) -> tuple[int, list]:
    """Return ``(version, records)`` for a decoded snapshot.

    A bare list is a v1 snapshot. Anything else that is not a versioned
    envelope is rejected with ValueError.
    """
    if isinstance(data, list):
        return 1, data
    if isinstance(data, dict) and isinstance(data.get("tasks"), list):
        version = data.get("version", SNAPSHOT_VERSION)
        if not isinstance(version, int) or isinstance(version, bool) or version < 1:
            raise ValueError(f"Bad snapshot version: {version!r}")
        return version, data["tasks"]
    raise ValueError("Snapshot is neither a task list nor a versioned envelope")


def wrap_snapshot(records: list[RawRecord]) -> dict[str, Any]:
    return {"version": SNAPSHOT_VERSION, "tasks": records}
