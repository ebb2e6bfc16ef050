"""Module for storing values as files in a local directory."""

import logging
from pathlib import Path, PurePosixPath
import uuid

import aiofiles
import aiofiles.os
from aiofiles.ospath import exists, isfile

from chart_repo.exceptions import (
    InvalidKeyError,
    KeyNotFoundError,
    StorageException,
)

from .storage import Storage

_LOGGER = logging.getLogger(__name__)


class FileStorage(Storage):
    """Storage implementation where each key is a file under a root directory.

    Writes go to a temporary file in the same directory that is renamed over
    the destination, so readers never observe a partially written value.
    """

    def __init__(self, root: Path) -> None:
        """Initialize the FileStorage."""
        self._root = root

    @property
    def root(self) -> Path:
        """Return the directory holding the stored files."""
        return self._root

    def _path(self, key: str) -> Path:
        """Return the file path for a key, refusing keys outside the root."""
        parts = PurePosixPath(key).parts
        if not parts or key.startswith("/") or ".." in parts:
            raise InvalidKeyError(f"Invalid storage key: {key!r}")
        return self._root.joinpath(*parts)

    async def exists(self, key: str) -> bool:
        """Return True if a file is stored under the key."""
        return bool(await isfile(self._path(key)))

    async def get(self, key: str) -> bytes:
        """Return the contents of the file stored under the key."""
        path = self._path(key)
        if not await isfile(path):
            raise KeyNotFoundError(f"Key {key} not found in storage")
        try:
            async with aiofiles.open(path, mode="rb") as stored_file:
                return bytes(await stored_file.read())
        except OSError as err:
            raise StorageException(f"Unable to read {key}: {err}") from err

    async def put(self, key: str, content: bytes) -> None:
        """Write the contents to the file for the key, replacing it atomically."""
        path = self._path(key)
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        _LOGGER.debug("Writing %s (%d bytes)", path, len(content))
        try:
            if not await exists(path.parent):
                await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(tmp_path, mode="wb") as tmp_file:
                await tmp_file.write(content)
                await tmp_file.flush()
            await aiofiles.os.replace(tmp_path, path)
        except OSError as err:
            raise StorageException(f"Unable to write {key}: {err}") from err
        finally:
            if await exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
