"""
The storage module provides the key/value byte store that holds the index and
the uploaded chart archives.

- Keys are `/` separated relative paths such as `index.yaml` or `tomcat-0.4.1.tgz`.
- Every operation is asynchronous and individually atomic.
- There are no transactions across calls; callers that read then write a key
  are responsible for their own locking.

This abstract interface allows for various implementations (in-memory, file, etc.).
"""

from .storage import Storage
from .in_memory import InMemoryStorage
from .file import FileStorage

__all__ = [
    "Storage",
    "InMemoryStorage",
    "FileStorage",
]
