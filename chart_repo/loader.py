"""YAML loading that keeps scalar values as they were written.

Chart descriptors and index documents hold string fields, so an unquoted
`version: 1.10` must stay `"1.10"` rather than becoming the float `1.1`, and a
date such as `2020-01-01` must stay a string so it reads back the same after
being written to the index. Booleans and nulls are still resolved.
"""

from typing import Any

import yaml

__all__ = [
    "StringLoader",
    "load",
]

_STRING_TAGS = frozenset(
    {
        "tag:yaml.org,2002:float",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:timestamp",
    }
)


class StringLoader(yaml.SafeLoader):
    """A yaml loader that leaves numbers and timestamps as strings."""


StringLoader.yaml_implicit_resolvers = {
    key: [(tag, regexp) for tag, regexp in resolvers if tag not in _STRING_TAGS]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load(content: str | bytes) -> Any:
    """Load a single yaml document with the StringLoader."""
    return yaml.load(content, Loader=StringLoader)
