"""Test fixtures for chart-repo."""

import pytest

from chart_repo.archive import ChartArchive
from chart_repo.config import RepositoryConfig
from chart_repo.repository import ChartRepository, KeyLocks
from chart_repo.storage import InMemoryStorage

from . import BASE_URL, NOW, TOMCAT_CHART, ArchiveFactory, build_archive


@pytest.fixture(name="chart_archive")
def chart_archive_fixture() -> ArchiveFactory:
    """Fixture for building chart archive bytes."""
    return build_archive


@pytest.fixture(name="tomcat")
def tomcat_fixture() -> ChartArchive:
    """Fixture for the parsed tomcat 0.4.1 chart archive."""
    return ChartArchive.parse(build_archive(TOMCAT_CHART))


@pytest.fixture(name="storage")
def storage_fixture() -> InMemoryStorage:
    """Fixture for the storage of the repository."""
    return InMemoryStorage()


@pytest.fixture(name="config")
def config_fixture() -> RepositoryConfig:
    """Fixture for the repository configuration."""
    return RepositoryConfig(base_url=BASE_URL, lock_timeout=5.0, storage_timeout=5.0)


@pytest.fixture(name="repository")
def repository_fixture(
    storage: InMemoryStorage, config: RepositoryConfig
) -> ChartRepository:
    """Fixture for a repository with a fixed clock."""
    return ChartRepository(storage, config, locks=KeyLocks(), clock=lambda: NOW)
