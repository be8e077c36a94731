"""Filesystem watching: path registry and monitor."""
from .monitor import DELIVERED_EVENTS, Monitor, WatchHandle
from .registry import PathRegistry, WatchCallback, WatchEntry

__all__ = [
    "Monitor",
    "WatchHandle",
    "DELIVERED_EVENTS",
    "PathRegistry",
    "WatchEntry",
    "WatchCallback",
]
