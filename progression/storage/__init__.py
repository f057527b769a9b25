"""Snapshot persistence backends"""

from progression.storage.snapshot_store import (
    SnapshotStorage,
    InMemoryStorage,
    JsonFileStorage,
    RedisSnapshotStorage,
)

__all__ = [
    "SnapshotStorage",
    "InMemoryStorage",
    "JsonFileStorage",
    "RedisSnapshotStorage",
]
