"""Library for reading the contents of an uploaded chart archive.

A chart archive is a gzip compressed tarball containing a single top level
directory named after the chart. The chart descriptor lives at
`<chart>/Chart.yaml` and holds at least the `name` and `version` of the chart:

```python
from chart_repo.archive import ChartArchive

archive = ChartArchive.parse(content)
print(f"Uploaded {archive.descriptor.name} {archive.descriptor.version}")
print(f"Stored as {archive.file_name} ({archive.size} bytes)")
```
"""

from dataclasses import dataclass, field
import gzip
import hashlib
import io
import logging
import tarfile
from typing import Any
import zlib

import yaml

from . import loader
from .exceptions import MalformedArchiveError, MissingDescriptorError

__all__ = [
    "ChartArchive",
    "ChartDescriptor",
]

_LOGGER = logging.getLogger(__name__)

DESCRIPTOR_FILE = "Chart.yaml"
ARCHIVE_SUFFIX = ".tgz"
_UNSAFE_PARTS = ("/", "\\", "..")


@dataclass(frozen=True)
class ChartDescriptor:
    """The metadata of a chart read from its Chart.yaml."""

    name: str
    """The name of the chart."""

    version: str
    """The version of the chart."""

    fields: dict[str, Any] = field(default_factory=dict)
    """Any additional descriptor fields e.g. appVersion or description."""

    @classmethod
    def parse_doc(cls, doc: Any) -> "ChartDescriptor":
        """Parse a ChartDescriptor from a Chart.yaml document."""
        if not isinstance(doc, dict):
            raise MalformedArchiveError(
                f"Invalid {DESCRIPTOR_FILE} is not a mapping: {doc!r}"
            )
        if not (name := doc.get("name")):
            raise MalformedArchiveError(f"Invalid {DESCRIPTOR_FILE} missing name")
        if not (version := doc.get("version")):
            raise MalformedArchiveError(f"Invalid {DESCRIPTOR_FILE} missing version")
        name, version = str(name), str(version)
        for key, value in (("name", name), ("version", version)):
            # Both end up in the archive's storage key
            if any(part in value for part in _UNSAFE_PARTS):
                raise MalformedArchiveError(
                    f"Invalid {DESCRIPTOR_FILE} {key}: {value!r}"
                )
        return cls(
            name=name,
            version=version,
            fields={
                str(k): v for k, v in doc.items() if k not in ("name", "version")
            },
        )


@dataclass(frozen=True)
class ChartArchive:
    """An uploaded chart archive and the descriptor found inside it."""

    content: bytes = field(repr=False)
    """The raw bytes of the archive."""

    descriptor: ChartDescriptor
    """The descriptor read from the archive."""

    @classmethod
    def parse(cls, content: bytes) -> "ChartArchive":
        """Read the chart descriptor out of the raw archive bytes."""
        return cls(content=content, descriptor=_read_descriptor(content))

    @property
    def size(self) -> int:
        """Return the length of the archive in bytes."""
        return len(self.content)

    @property
    def file_name(self) -> str:
        """Return the conventional file name of the archive."""
        return f"{self.descriptor.name}-{self.descriptor.version}{ARCHIVE_SUFFIX}"

    @property
    def digest(self) -> str:
        """Return the sha256 hex digest of the archive bytes."""
        return hashlib.sha256(self.content).hexdigest()


def _is_descriptor(member: tarfile.TarInfo) -> bool:
    """Return True if the member is the Chart.yaml of the top level chart."""
    if not member.isfile():
        return False
    parts = [part for part in member.name.split("/") if part and part != "."]
    return len(parts) == 2 and parts[1] == DESCRIPTOR_FILE


def _read_descriptor(content: bytes) -> ChartDescriptor:
    try:
        # Decompress fully up front so a truncated upload fails the checksum
        data = gzip.decompress(content)
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as tar:
            member = next((m for m in tar.getmembers() if _is_descriptor(m)), None)
            if member is None:
                raise MissingDescriptorError(
                    f"Archive does not contain a {DESCRIPTOR_FILE} file"
                )
            _LOGGER.debug("Reading chart descriptor %s", member.name)
            if (stream := tar.extractfile(member)) is None:
                raise MissingDescriptorError(f"Unable to read {member.name}")
            raw = stream.read()
    except (tarfile.TarError, zlib.error, EOFError, OSError) as err:
        raise MalformedArchiveError(f"Unable to read chart archive: {err}") from err

    try:
        doc = loader.load(raw)
    except yaml.YAMLError as err:
        raise MalformedArchiveError(
            f"Unable to parse {DESCRIPTOR_FILE}: {err}"
        ) from err
    return ChartDescriptor.parse_doc(doc)
