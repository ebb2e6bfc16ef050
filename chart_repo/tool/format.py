"""Library for formatting command output."""

from collections.abc import Generator
import json
import sys
from typing import Any, TextIO

import yaml

PADDING = 4


def format_columns(
    headers: list[str], rows: list[list[str]]
) -> Generator[str, None, None]:
    """Yield the header and rows aligned on the widest value of each column."""
    data = [headers] + rows
    widths = [max(len(row[i]) for row in data) for i in range(len(headers))]
    for row in data:
        yield "".join(
            value.ljust(width + PADDING) for value, width in zip(row, widths)
        ).rstrip()


class PrintFormatter:
    """A formatter that prints human readable console output."""

    def __init__(self, keys: list[str]):
        """Initialize the PrintFormatter with the keys to print."""
        self._keys = keys

    def format(self, data: list[dict[str, Any]]) -> Generator[str, None, None]:
        """Format the data objects."""
        if not data:
            return
        rows = [[str(row.get(key, "")) for key in self._keys] for row in data]
        yield from format_columns([key.upper() for key in self._keys], rows)

    def print(self, data: list[dict[str, Any]], file: TextIO = sys.stdout) -> None:
        """Output the data objects."""
        for line in self.format(data):
            print(line, file=file)


class YamlFormatter:
    """A formatter that prints a yaml document."""

    def print(self, data: Any, file: TextIO = sys.stdout) -> None:
        """Output the data object."""
        print(yaml.safe_dump(data, sort_keys=False), end="", file=file)


class JsonFormatter:
    """A formatter that prints a json document."""

    def print(self, data: Any, file: TextIO = sys.stdout) -> None:
        """Output the data object."""
        json.dump(data, sort_keys=False, indent=4, fp=file, default=str)
        print(file=file)
