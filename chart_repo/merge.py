"""Library for adding a newly uploaded chart version to the index.

Merging is a pure operation: the existing catalog is never modified and the
same inputs always produce the same catalog, so it can be tested without any
storage.
"""

import datetime
import logging

from .archive import ChartArchive
from .index import Catalog, VersionRecord, RECORD_FIELDS

__all__ = [
    "merge",
]

_LOGGER = logging.getLogger(__name__)


def new_record(
    archive: ChartArchive, base_url: str, now: datetime.datetime
) -> VersionRecord:
    """Build the index record for an archive accepted at the specified time."""
    descriptor = archive.descriptor
    return VersionRecord.model_validate(
        {
            **{
                k: v
                for k, v in descriptor.fields.items()
                if k not in RECORD_FIELDS
            },
            "name": descriptor.name,
            "version": descriptor.version,
            "created": now,
            "urls": [f"{base_url}{archive.file_name}"],
            "digest": archive.digest,
        }
    )


def merge(
    catalog: Catalog | None,
    archive: ChartArchive,
    base_url: str,
    now: datetime.datetime,
) -> Catalog:
    """Return a catalog that contains the archive's chart version exactly once.

    When the version was already accepted the existing catalog is returned
    as-is, so a re-upload keeps the original `created` time and url. New
    versions are appended after existing ones regardless of version order.
    """
    if catalog is None:
        catalog = Catalog.empty(now)
    name = archive.descriptor.name
    version = archive.descriptor.version
    if catalog.find(name, version) is not None:
        _LOGGER.debug("Chart %s version %s already in index", name, version)
        return catalog

    _LOGGER.debug("Adding chart %s version %s to index", name, version)
    entries = dict(catalog.entries)
    entries[name] = [*catalog.versions(name), new_record(archive, base_url, now)]
    return catalog.model_copy(update={"generated": now, "entries": entries})
