"""Common utilities for chart-repo commands."""

import logging
import pathlib
from argparse import ArgumentParser

from chart_repo.config import INDEX_KEY, RepositoryConfig
from chart_repo.repository import ChartRepository
from chart_repo.storage import FileStorage, InMemoryStorage, Storage

_LOGGER = logging.getLogger(__name__)


def add_storage_flags(args: ArgumentParser) -> None:
    """Add flags for locating the repository storage."""
    args.add_argument(
        "--storage-dir",
        type=pathlib.Path,
        default=None,
        help="Directory holding index.yaml and the chart archives",
    )
    args.add_argument(
        "--index-key",
        default=INDEX_KEY,
        help="Storage key of the index document",
    )


def add_repository_flags(args: ArgumentParser) -> None:
    """Add flags used when updating the index."""
    add_storage_flags(args)
    args.add_argument(
        "--base-url",
        default="",
        help=(
            "Prefix of chart download urls written to the index, "
            "e.g. https://example.com/charts/"
        ),
    )
    args.add_argument(
        "--lock-timeout",
        type=float,
        default=RepositoryConfig.lock_timeout,
        help="Seconds to wait for exclusive access to the index",
    )
    args.add_argument(
        "--storage-timeout",
        type=float,
        default=RepositoryConfig.storage_timeout,
        help="Seconds to wait for a single storage read or write",
    )


def build_storage(storage_dir: pathlib.Path | None) -> Storage:
    """Return the storage for the directory, or memory when none is given."""
    if storage_dir is None:
        _LOGGER.warning("No --storage-dir specified, charts are kept in memory")
        return InMemoryStorage()
    storage_dir.mkdir(parents=True, exist_ok=True)
    return FileStorage(storage_dir)


def build_repository(  # type: ignore[no-untyped-def]
    storage_dir: pathlib.Path | None,
    index_key: str = INDEX_KEY,
    base_url: str = "",
    lock_timeout: float = RepositoryConfig.lock_timeout,
    storage_timeout: float = RepositoryConfig.storage_timeout,
    **kwargs,  # pylint: disable=unused-argument
) -> ChartRepository:
    """Return a ChartRepository from the command line flags."""
    config = RepositoryConfig(
        base_url=base_url,
        index_key=index_key,
        lock_timeout=lock_timeout,
        storage_timeout=storage_timeout,
    )
    return ChartRepository(build_storage(storage_dir), config)
