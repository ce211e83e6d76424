from focusflow.storage.migrations import SNAPSHOT_VERSION, migrate_record
from focusflow.storage.store import BlobStore, JsonFileStore, MemoryStore, PersistenceAdapter

__all__ = [
    "SNAPSHOT_VERSION", "migrate_record",
    "BlobStore", "JsonFileStore", "MemoryStore", "PersistenceAdapter",
]
