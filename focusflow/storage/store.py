"""Persistence adapter — loads/saves the whole task collection as one snapshot."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from focusflow.core.config import settings
from focusflow.models.task import Task
from focusflow.storage.migrations import migrate_record, unwrap_snapshot, wrap_snapshot

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """Opaque key → string storage. Subclasses decide the medium."""

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Return the stored blob, or None if the key was never written."""
        ...

    @abstractmethod
    def write(self, key: str, blob: str) -> None:
        """Replace the blob stored under ``key``."""
        ...


class MemoryStore(BlobStore):
    """Dict-backed store for tests and dry runs."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.blobs: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.blobs.get(key)

    def write(self, key: str, blob: str) -> None:
        self.blobs[key] = blob


class JsonFileStore(BlobStore):
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: str | Path = settings.STORAGE_DIR):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, blob: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_text(blob, encoding="utf-8")


class PersistenceAdapter:
    """Serializes the task collection into a versioned snapshot blob.

    Loading never raises for bad data: a malformed snapshot reads as absent,
    and individual records that cannot be repaired are skipped.
    """

    def __init__(self, store: BlobStore, key: str = settings.STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> Optional[list[Task]]:
        """Return the persisted tasks (cold-start recovered), or None if absent/unreadable."""
        try:
            blob = self.store.read(self.key)
            if blob is None:
                return None
            version, records = unwrap_snapshot(json.loads(blob))
        except (OSError, ValueError) as e:  # includes JSONDecodeError and UnicodeDecodeError
            logger.error("Failed to parse stored tasks, starting empty: %s", e)
            return None

        tasks: list[Task] = []
        for index, raw in enumerate(records):
            if not isinstance(raw, dict):
                logger.warning("Skipping snapshot record %d: not an object", index)
                continue
            try:
                tasks.append(Task.model_validate(migrate_record(raw, version)))
            except (ValidationError, ValueError, TypeError) as e:
                logger.warning("Skipping snapshot record %d (%s): %s", index, raw.get("id"), e)

        logger.debug("Loaded %d task(s) from snapshot v%d", len(tasks), version)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        """Replace the stored snapshot with ``tasks``."""
        records = [t.model_dump(mode="json", by_alias=True, exclude_none=True) for t in tasks]
        self.store.write(self.key, json.dumps(wrap_snapshot(records), indent=2))
