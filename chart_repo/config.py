"""Configuration objects for chart-repo."""

from dataclasses import dataclass

INDEX_KEY = "index.yaml"


@dataclass
class RepositoryConfig:
    """Configuration for the ChartRepository."""

    base_url: str = ""
    """Prefix of the download url of every chart, e.g. https://example.com/charts/."""

    index_key: str = INDEX_KEY
    """Storage key of the index document."""

    lock_timeout: float = 30.0
    """Seconds to wait for exclusive access to the index."""

    storage_timeout: float = 10.0
    """Seconds to wait for a single storage read or write."""


@dataclass
class ServerConfig:
    """Configuration for the http server."""

    host: str = "127.0.0.1"
    port: int = 8080
