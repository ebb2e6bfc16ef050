"""Storage interface for holding the index and chart archives."""

from abc import ABC, abstractmethod


class Storage(ABC):
    """Abstract base class for an opaque key/value byte store."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return True if a value is stored under the key."""

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Return the value stored under the key.

        Raises:
            KeyNotFoundError: If nothing is stored under the key.
            StorageException: If the value can't be read.
        """

    @abstractmethod
    async def put(self, key: str, content: bytes) -> None:
        """Store the value under the key, replacing any existing value in full.

        Raises:
            StorageException: If the value can't be written.
        """
