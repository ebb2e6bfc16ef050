"""
chart-repo maintains the index.yaml of a chart repository as archives are uploaded.
"""

__all__ = [
    "archive",
    "index",
    "loader",
    "merge",
    "repository",
    "server",
    "storage",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
