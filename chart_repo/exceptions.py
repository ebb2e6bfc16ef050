"""Exceptions related to chart-repo."""

__all__ = [
    "ChartRepoException",
    "ArchiveError",
    "MalformedArchiveError",
    "MissingDescriptorError",
    "StoreError",
    "CorruptCatalogError",
    "StoreUnreachableError",
    "LockTimeoutError",
    "StorageException",
    "KeyNotFoundError",
    "InvalidKeyError",
]


class ChartRepoException(Exception):
    """Generic base exception used for this library."""


class ArchiveError(ChartRepoException):
    """Raised when an uploaded chart archive can't be used."""


class MalformedArchiveError(ArchiveError):
    """Raised when the archive can't be decompressed or its descriptor is invalid."""


class MissingDescriptorError(ArchiveError):
    """Raised when the archive does not contain a Chart.yaml descriptor."""


class StoreError(ChartRepoException):
    """Raised when the catalog can't be read or written."""


class CorruptCatalogError(StoreError):
    """Raised when the persisted catalog fails to parse."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"Catalog {key} is corrupt: {message}")
        self.key = key


class StoreUnreachableError(StoreError):
    """Raised when a storage read or write fails or times out."""


class LockTimeoutError(StoreError):
    """Raised when exclusive access to a catalog key is not granted in time."""

    def __init__(self, key: str, timeout: float) -> None:
        super().__init__(f"Timed out after {timeout:0.1f}s waiting for lock on {key}")
        self.key = key
        self.timeout = timeout


class StorageException(ChartRepoException):
    """Raised by a storage backend when an operation fails."""


class KeyNotFoundError(StorageException):
    """Raised when a key does not exist in storage."""


class InvalidKeyError(StorageException):
    """Raised when a key can't be mapped to a storage location."""
