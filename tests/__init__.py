"""Test helpers for chart-repo."""

from collections.abc import Callable
import datetime
import gzip
import io
import tarfile
from typing import Any

import yaml

BASE_URL = "http://localhost:8080/"
NOW = datetime.datetime(2020, 3, 30, 10, 3, 11, 123456, tzinfo=datetime.timezone.utc)

TOMCAT_CHART = {
    "apiVersion": "v1",
    "appVersion": "7.0",
    "description": "Deploy a basic tomcat application server",
    "home": "https://github.com/apache/tomcat",
    "icon": "http://tomcat.apache.org/res/images/tomcat.png",
    "keywords": ["tomcat", "java", "web"],
    "maintainers": [{"name": "yahavb", "email": "ybiran@ananware.systems"}],
    "name": "tomcat",
    "version": "0.4.1",
}

ArchiveFactory = Callable[..., bytes]


def build_archive(
    chart: dict[str, Any] | None = None,
    *,
    directory: str | None = None,
    descriptor: str | None = None,
    files: dict[str, bytes] | None = None,
) -> bytes:
    """Return the bytes of a gzip tarball laid out like a packaged chart.

    The Chart.yaml is written from `chart`, or from the raw `descriptor` text
    when given. Passing neither produces an archive without a Chart.yaml.
    """
    if directory is None:
        directory = str((chart or {}).get("name", "chart"))
    members: dict[str, bytes] = {}
    if descriptor is not None:
        members[f"{directory}/Chart.yaml"] = descriptor.encode()
    elif chart is not None:
        members[f"{directory}/Chart.yaml"] = yaml.safe_dump(chart).encode()
    members[f"{directory}/values.yaml"] = b"replicaCount: 1\n"
    members.update(files or {})

    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mtime = 0
            tar.addfile(info, io.BytesIO(content))
    return gzip.compress(buf.getvalue(), mtime=0)


def chart_version(version: str, **fields: Any) -> dict[str, Any]:
    """Return the tomcat chart descriptor with a different version."""
    return {**TOMCAT_CHART, **fields, "version": version}
