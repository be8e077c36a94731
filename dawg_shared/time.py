"""
Clock helpers for log lines, snapshot stamps and rebuild timings.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager


def now() -> float:
    """Wall-clock time in seconds."""
    return time.time()


def format_timestamp(ts: float | None = None, *, clock_only: bool = False) -> str:
    """
    Local time as ``YYYY-MM-DDTHH:MM:SS`` (or just ``HH:MM:SS``).

    Args:
        ts: Timestamp in seconds (default: now)
        clock_only: Drop the date part, as used in console log lines
    """
    local = time.localtime(now() if ts is None else ts)
    return time.strftime("%H:%M:%S" if clock_only else "%Y-%m-%dT%H:%M:%S", local)


@contextmanager
def timer(label: str, logger: logging.Logger) -> Iterator[None]:
    """
    Log how long the block took, at debug level.

    Usage:
        with timer("rebuild", logger):
            coordinator.rebuild()
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug("%s took %.1fms", label, (time.perf_counter() - start) * 1000.0)
