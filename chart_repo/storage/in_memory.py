"""Module for in memory key/value storage."""

import logging

from chart_repo.exceptions import KeyNotFoundError

from .storage import Storage

_LOGGER = logging.getLogger(__name__)


class InMemoryStorage(Storage):
    """In-memory implementation of the Storage interface.

    Values are held in a dict for the lifetime of the object, which makes this
    useful for tests and for servers that don't need to survive a restart.
    """

    def __init__(self, values: dict[str, bytes] | None = None) -> None:
        """Initialize the InMemoryStorage."""
        self._values: dict[str, bytes] = dict(values or {})

    async def exists(self, key: str) -> bool:
        """Return True if a value is stored under the key."""
        return key in self._values

    async def get(self, key: str) -> bytes:
        """Return the value stored under the key."""
        if (value := self._values.get(key)) is None:
            raise KeyNotFoundError(f"Key {key} not found in storage")
        return value

    async def put(self, key: str, content: bytes) -> None:
        """Store the value under the key."""
        _LOGGER.debug("Storing %s (%d bytes)", key, len(content))
        self._values[key] = bytes(content)

    def keys(self) -> list[str]:
        """Return all stored keys."""
        return sorted(self._values)
