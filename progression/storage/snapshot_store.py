"""
Snapshot persistence backends

Each backend stores one JSON document per (user, key):
- JsonFileStorage: DATA_PATH/<user_id>/<key>.json, replaced atomically
- RedisSnapshotStorage: Redis string at <key>:<user_id>
- InMemoryStorage: dict, for tests and throwaway sessions

Backends move raw documents only; parsing and defaulting belong to the
progress store. Write failures are raised as PersistenceWriteError.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import redis.asyncio as redis

from progression.config import DATA_PATH, REDIS_URL
from progression.exceptions import (
    MalformedPersistedStateError,
    PersistenceWriteError,
    StorageError,
)

logger = logging.getLogger(__name__)


class SnapshotStorage(ABC):
    """Async key/value store for serialized progress snapshots"""

    @abstractmethod
    async def load(self, user_id: str, key: str) -> Optional[str]:
        """Return the stored document, or None if nothing was saved yet"""

    @abstractmethod
    async def save(self, user_id: str, key: str, document: str) -> None:
        """Replace the stored document"""

    async def close(self) -> None:
        return None


class InMemoryStorage(SnapshotStorage):
    """Dict-backed storage (not persisted across processes)"""

    def __init__(self):
        self._documents: dict[tuple[str, str], str] = {}
        self.save_count = 0

    async def load(self, user_id: str, key: str) -> Optional[str]:
        return self._documents.get((user_id, key))

    async def save(self, user_id: str, key: str, document: str) -> None:
        self._documents[(user_id, key)] = document
        self.save_count += 1
        logger.debug(f"Saved {key} for user {user_id} to memory")


class JsonFileStorage(SnapshotStorage):
    """One JSON file per user and key"""

    def __init__(self, data_path: Path = DATA_PATH):
        self.data_path = Path(data_path)

    def get_path(self, user_id: str, key: str) -> Path:
        return self.data_path / user_id / f"{key}.json"

    async def load(self, user_id: str, key: str) -> Optional[str]:
        path = self.get_path(user_id, key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(
                message=f"Failed to read {path}",
                key=key,
                user_id=user_id,
                operation="load",
                cause=e,
            )
        except UnicodeDecodeError as e:
            raise MalformedPersistedStateError(
                message=f"{path} is not valid UTF-8",
                key=key,
                user_id=user_id,
                operation="load",
                cause=e,
            )

    async def save(self, user_id: str, key: str, document: str) -> None:
        path = self.get_path(user_id, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write next to the target, then swap it in so readers never see half a file
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                    tmp.write(document)
                    tmp.flush()
                    os.fsync(tmp.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceWriteError(
                message=f"Failed to write {path}",
                key=key,
                user_id=user_id,
                operation="save",
                cause=e,
            )
        logger.debug(f"Saved {key} for user {user_id} to {path}")


class RedisSnapshotStorage(SnapshotStorage):
    """Redis-backed storage; connects lazily on first use"""

    def __init__(self, redis_url: str = REDIS_URL, client: Optional[Any] = None):
        self.redis_url = redis_url
        self._client = client

    async def _get_client(self) -> Any:
        if self._client is None:
            self._client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info(f"Redis storage connected: {self.redis_url}")
        return self._client

    @staticmethod
    def redis_key(user_id: str, key: str) -> str:
        return f"{key}:{user_id}"

    async def load(self, user_id: str, key: str) -> Optional[str]:
        client = await self._get_client()
        try:
            return await client.get(self.redis_key(user_id, key))
        except UnicodeDecodeError as e:
            raise MalformedPersistedStateError(
                message=f"Value at {self.redis_key(user_id, key)} is not valid UTF-8",
                key=key,
                user_id=user_id,
                operation="load",
                cause=e,
            )
        except redis.RedisError as e:
            raise StorageError(
                message=f"Redis GET failed for {self.redis_key(user_id, key)}",
                key=key,
                user_id=user_id,
                operation="load",
                cause=e,
            )

    async def save(self, user_id: str, key: str, document: str) -> None:
        client = await self._get_client()
        try:
            await client.set(self.redis_key(user_id, key), document)
        except redis.RedisError as e:
            raise PersistenceWriteError(
                message=f"Redis SET failed for {self.redis_key(user_id, key)}",
                key=key,
                user_id=user_id,
                operation="save",
                cause=e,
            )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis storage connection closed")
