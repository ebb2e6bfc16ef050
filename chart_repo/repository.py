"""Library for maintaining the index of a chart repository in storage.

A ChartRepository owns the read-merge-write cycle of the index document. Each
upload reads the current index (if any), merges in the uploaded chart version
and writes the index back. Uploads against the same index are serialized with
a per-key lock held from before the read until after the write, so concurrent
uploads of different versions can't overwrite each other:

```python
from chart_repo.config import RepositoryConfig
from chart_repo.repository import ChartRepository
from chart_repo.storage import FileStorage

repo = ChartRepository(
    FileStorage(Path("/srv/charts")),
    RepositoryConfig(base_url="https://example.com/charts/"),
)
archive = await repo.upload(content)
```
"""

import asyncio
from collections import Counter
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
import datetime
import logging
from typing import TypeVar
import weakref

from .archive import ChartArchive
from .config import RepositoryConfig
from .context import trace_context
from .exceptions import (
    LockTimeoutError,
    StorageException,
    StoreUnreachableError,
)
from .index import Catalog
from .merge import merge
from .storage import Storage

__all__ = [
    "ChartRepository",
    "KeyLocks",
    "get_key_locks",
]

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class KeyLocks:
    """A set of asyncio locks, one per key, created on demand.

    A lock is dropped once nothing holds or waits for it so the set does not
    grow with the number of keys ever used.
    """

    def __init__(self) -> None:
        """Initialize KeyLocks."""
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._locks)

    def locked(self, key: str) -> bool:
        """Return True if the lock for the key is currently held."""
        return (lock := self._locks.get(key)) is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, key: str, timeout: float) -> AsyncGenerator[None, None]:
        """Hold the lock for the key for the duration of the context.

        Raises:
            LockTimeoutError: If the lock is not acquired within the timeout.
        """
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            try:
                async with asyncio.timeout(timeout):
                    await lock.acquire()
            except TimeoutError as err:
                raise LockTimeoutError(key, timeout) from err
            try:
                yield
            finally:
                lock.release()
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]


# Shared so that every ChartRepository over the same storage uses the same locks
_key_locks: weakref.WeakKeyDictionary[Storage, KeyLocks] = (
    weakref.WeakKeyDictionary()
)


def get_key_locks(storage: Storage) -> KeyLocks:
    """Get the KeyLocks shared by every user of the storage in this process."""
    if (locks := _key_locks.get(storage)) is None:
        locks = KeyLocks()
        _key_locks[storage] = locks
    return locks


class ChartRepository:
    """A chart repository whose index is kept in a Storage."""

    def __init__(
        self,
        storage: Storage,
        config: RepositoryConfig,
        *,
        locks: KeyLocks | None = None,
        clock: Callable[[], datetime.datetime] = _utcnow,
    ) -> None:
        """Initialize ChartRepository."""
        self._storage = storage
        self._config = config
        self._locks = locks if locks is not None else get_key_locks(storage)
        self._clock = clock

    @property
    def storage(self) -> Storage:
        """Return the storage holding the index and archives."""
        return self._storage

    @property
    def config(self) -> RepositoryConfig:
        """Return the repository configuration."""
        return self._config

    async def _call(self, op: str, key: str, call: Awaitable[T]) -> T:
        """Run a storage operation bounded by the storage timeout."""
        try:
            async with asyncio.timeout(self._config.storage_timeout):
                return await call
        except TimeoutError as err:
            _LOGGER.error("Storage %s of %s timed out", op, key)
            raise StoreUnreachableError(
                f"Storage {op} of {key} timed out after "
                f"{self._config.storage_timeout:0.1f}s"
            ) from err
        except StorageException as err:
            _LOGGER.error("Storage %s of %s failed: %s", op, key, err)
            raise StoreUnreachableError(
                f"Storage {op} of {key} failed: {err}"
            ) from err

    async def read_catalog(self) -> Catalog | None:
        """Return the current index, or None if it was never written.

        Raises:
            CorruptCatalogError: If the stored index can't be parsed.
            StoreUnreachableError: If the storage can't be read.
        """
        key = self._config.index_key
        if not await self._call("exists", key, self._storage.exists(key)):
            _LOGGER.debug("Index %s does not exist yet", key)
            return None
        content = await self._call("get", key, self._storage.get(key))
        return Catalog.parse_yaml(content, key)

    async def update(self, archive: ChartArchive) -> bool:
        """Add the archive's chart version to the index.

        The archive is stored under its file name and the index is replaced
        with one that includes the new version. Uploading a version that is
        already in the index writes nothing.

        Returns:
            True if the version was added, False if it was already present.

        Raises:
            CorruptCatalogError: If the stored index can't be parsed.
            StoreUnreachableError: If the storage can't be read or written.
            LockTimeoutError: If another upload holds the index for too long.
        """
        key = self._config.index_key
        descriptor = archive.descriptor
        with trace_context(f"update {key}"):
            async with self._locks.hold(key, self._config.lock_timeout):
                with trace_context("read"):
                    catalog = await self.read_catalog()
                with trace_context("merge"):
                    updated = merge(
                        catalog, archive, self._config.base_url, self._clock()
                    )
                if updated is catalog:
                    _LOGGER.info(
                        "Chart %s version %s already in index, nothing to do",
                        descriptor.name,
                        descriptor.version,
                    )
                    return False
                with trace_context("write"):
                    await self._call(
                        "put",
                        archive.file_name,
                        self._storage.put(archive.file_name, archive.content),
                    )
                    await self._call(
                        "put", key, self._storage.put(key, updated.yaml().encode())
                    )
        _LOGGER.info(
            "Added chart %s version %s to index (%d bytes)",
            descriptor.name,
            descriptor.version,
            archive.size,
        )
        return True

    async def upload(self, content: bytes) -> ChartArchive:
        """Parse an uploaded archive and add it to the index.

        Parsing runs in a worker thread since it needs no coordination with
        other uploads.

        Raises:
            ArchiveError: If the archive can't be read, before touching storage.
        """
        archive = await asyncio.to_thread(ChartArchive.parse, content)
        await self.update(archive)
        return archive
