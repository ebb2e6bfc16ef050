"""Utilities for tracing the phases of an index update."""

import contextvars
from contextlib import contextmanager
import logging
from time import perf_counter
from typing import Generator


_LOGGER = logging.getLogger(__name__)

# No public API
__all__: list[str] = []


trace: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "trace", default=()
)


@contextmanager
def trace_context(name: str) -> Generator[None, None, None]:
    """Log when the named phase starts and how long it took.

    Nested phases are reported with their parents e.g. `update index.yaml > read`.
    Each asyncio task gets its own copy of the context so concurrent uploads
    don't interleave their labels.
    """
    stack = trace.get() + (name,)
    token = trace.set(stack)
    label = " > ".join(stack)
    start = perf_counter()
    _LOGGER.debug("[Trace] > %s", label)
    try:
        yield
    finally:
        trace.reset(token)
        _LOGGER.debug("[Trace] < %s (%0.3fs)", label, perf_counter() - start)
