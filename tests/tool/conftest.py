"""Test fixtures for chart-repo tools."""

import pathlib

import pytest

from .. import TOMCAT_CHART, build_archive, chart_version

from . import write_archive


@pytest.fixture(name="storage_dir")
def storage_dir_fixture(tmp_path: pathlib.Path) -> pathlib.Path:
    """Fixture for the repository directory."""
    return tmp_path / "repo"


@pytest.fixture(name="upload_dir")
def upload_dir_fixture(tmp_path: pathlib.Path) -> pathlib.Path:
    """Fixture for a directory of packaged charts to push."""
    path = tmp_path / "upload"
    path.mkdir()
    write_archive(path, "tomcat-0.4.1.tgz", build_archive(TOMCAT_CHART))
    write_archive(path, "tomcat-0.5.0.tgz", build_archive(chart_version("0.5.0")))
    write_archive(
        path, "nginx-1.0.0.tgz", build_archive({"name": "nginx", "version": "1.0.0"})
    )
    return path
