"""Test helpers for chart-repo tools."""

import pathlib


def write_archive(directory: pathlib.Path, name: str, content: bytes) -> pathlib.Path:
    """Write chart archive bytes to a file and return its path."""
    path = directory / name
    path.write_bytes(content)
    return path
