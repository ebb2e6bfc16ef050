"""Representation of the chart repository index.

The index is the `index.yaml` document that chart installers download to find
the charts in a repository. It maps each chart name to the list of versions
that have been accepted, in the order they were accepted:

```yaml
apiVersion: v1
entries:
  tomcat:
  - apiVersion: v1
    appVersion: '7.0'
    created: '2020-03-30T10:03:11.123456+00:00'
    digest: 1b2c...
    name: tomcat
    urls:
    - http://localhost:8080/tomcat-0.4.1.tgz
    version: 0.4.1
generated: '2020-03-30T10:03:11.123456+00:00'
```

Any chart descriptor fields besides the ones the index computes are carried
through on each version record unchanged.
"""

import datetime
import logging
import re
from typing import Any, cast

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_serializer,
)
from pydantic_core.core_schema import SerializerFunctionWrapHandler
import yaml

from . import loader
from .exceptions import CorruptCatalogError

__all__ = [
    "Catalog",
    "VersionRecord",
    "API_VERSION",
]

_LOGGER = logging.getLogger(__name__)

API_VERSION = "v1"

# Go emits up to nanosecond precision which datetime can't represent
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def format_time(value: datetime.datetime) -> str:
    """Format a timestamp the way index consumers expect (RFC 3339)."""
    return value.isoformat(timespec="microseconds")


def parse_time(value: Any) -> datetime.datetime:
    """Parse a timestamp written by this library or by helm."""
    if isinstance(value, datetime.datetime):
        return value
    text = _FRACTION_RE.sub(r"\1", str(value))
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(text)


# Keys computed by the index, everything else on a record is passed through
RECORD_FIELDS = frozenset({"name", "version", "created", "urls", "digest"})


class VersionRecord(BaseModel):
    """A single accepted version of a chart.

    Chart descriptor fields besides the ones below are kept as extra fields
    and written back to the index unchanged.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    """The name of the chart."""

    version: str
    """The version of the chart."""

    created: datetime.datetime
    """When the version was accepted into the index."""

    urls: list[str] = Field(default_factory=list)
    """The download urls of the chart archive."""

    digest: str | None = None
    """The sha256 digest of the chart archive."""

    @field_validator("name", "version", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> Any:
        # Records built in code may carry numeric versions
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("created", mode="before")
    @classmethod
    def _parse_created(cls, value: Any) -> datetime.datetime:
        return parse_time(value)

    @field_serializer("created")
    def _serialize_created(self, value: datetime.datetime) -> str:
        return format_time(value)

    @model_serializer(mode="wrap")
    def _serialize(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = cast(dict[str, Any], handler(self))
        if data.get("digest") is None:
            data.pop("digest", None)
        return data

    @property
    def extra(self) -> dict[str, Any]:
        """Return the chart descriptor fields passed through to the index."""
        return dict(self.model_extra or {})


class Catalog(BaseModel):
    """The index of all charts in a repository.

    Top level keys written by other repository servers, such as `serverInfo`,
    are kept as extra fields and written back unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    api_version: str = Field(default=API_VERSION, alias="apiVersion")
    """The schema version of the index document."""

    generated: datetime.datetime
    """When the index was last changed."""

    entries: dict[str, list[VersionRecord]] = Field(default_factory=dict)
    """Accepted versions of each chart, in the order they were accepted."""

    @field_validator("generated", mode="before")
    @classmethod
    def _parse_generated(cls, value: Any) -> datetime.datetime:
        return parse_time(value)

    @field_validator("entries", mode="before")
    @classmethod
    def _empty_entries(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_serializer("generated")
    def _serialize_generated(self, value: datetime.datetime) -> str:
        return format_time(value)

    @classmethod
    def empty(cls, now: datetime.datetime) -> "Catalog":
        """Return an index with no charts."""
        return cls(generated=now)

    def versions(self, name: str) -> list[VersionRecord]:
        """Return the accepted versions of a chart."""
        return self.entries.get(name, [])

    def find(self, name: str, version: str) -> VersionRecord | None:
        """Return the record for a chart version if it was accepted."""
        for record in self.versions(name):
            if record.version == version:
                return record
        return None

    @classmethod
    def parse_yaml(cls, content: str | bytes, key: str = "index.yaml") -> "Catalog":
        """Parse a serialized index document.

        Raises:
            CorruptCatalogError: If the content is not a valid index.
        """
        try:
            doc = loader.load(content)
        except yaml.YAMLError as err:
            raise CorruptCatalogError(key, f"invalid yaml: {err}") from err
        if not isinstance(doc, dict):
            raise CorruptCatalogError(key, "document is not a mapping")
        try:
            return cls.model_validate(doc)
        except ValidationError as err:
            raise CorruptCatalogError(key, str(err)) from err

    def to_dict(self) -> dict[str, Any]:
        """Return the index as it is written to the document."""
        return self.model_dump(by_alias=True)

    def yaml(self) -> str:
        """Return the YAML representation of the index."""
        return cast(str, yaml.safe_dump(self.to_dict(), sort_keys=True))
