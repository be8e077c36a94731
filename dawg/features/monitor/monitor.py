"""
File system monitor for chapter sources, templates and stylesheets.

Each watched path owns exactly one watchdog watch. Directory watches are
recursive and subsume watches on paths beneath them. The watchdog handler only
enqueues events; a dedicated dispatch thread drains the queue and runs the
subscribed callbacks, so a callback may call ``watch``/``unwatch`` freely.

Usage:
    monitor = Monitor()
    monitor.start()
    monitor.watch("docs", on_change)
    ...
    monitor.stop()
"""
from __future__ import annotations

import os
import queue
import threading
from collections.abc import Callable
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ...config import MONITOR_JOIN_TIMEOUT_S
from ...shared import PathNotFoundError, get_logger
from ...utils import normalize_path
from .registry import PathRegistry, WatchCallback, WatchEntry

logger = get_logger(__name__)

# watchdog also reports opened/closed events on some platforms; those never
# change content.
DELIVERED_EVENTS = frozenset({"created", "modified", "deleted", "moved"})

_STOP = object()


class WatchHandle:
    """Ownership of one scheduled watchdog watch."""

    def __init__(self, observer: Any, handler: FileSystemEventHandler, watch: Any, key: tuple[str, bool]):
        self.observer = observer
        self.handler = handler
        self.watch = watch
        self.key = key
        self.released = False

    def release(self, shared: bool) -> None:
        """Release the watch; a watch still used by another entry only loses this handler."""
        if self.released:
            return
        self.released = True
        if shared:
            self.observer.remove_handler_for_watch(self.handler, self.watch)
        else:
            self.observer.unschedule(self.watch)


class _EntryEventHandler(FileSystemEventHandler):
    """Forwards watchdog events for one entry onto the monitor queue."""

    def __init__(self, entry_path: str, is_directory: bool, enqueue: Callable[[str, str, str], None]):
        super().__init__()
        self._entry_path = entry_path
        self._is_directory = is_directory
        self._enqueue = enqueue

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in DELIVERED_EVENTS:
            return
        paths = [os.fsdecode(event.src_path)]
        dest = getattr(event, "dest_path", "")
        if dest:
            paths.append(os.fsdecode(dest))

        if self._is_directory:
            self._enqueue(self._entry_path, event.event_type, paths[-1])
            return
        # File entries watch their parent directory; keep only their own events.
        for raw in paths:
            if normalize_path(raw) == self._entry_path:
                self._enqueue(self._entry_path, event.event_type, raw)
                return


class Monitor:
    """
    Watches files and directories and fans change events out to callbacks.

    Callbacks receive ``(event_type, path)`` where ``event_type`` is one of
    ``created``, ``modified``, ``deleted`` or ``moved``.
    """

    def __init__(
        self,
        registry: PathRegistry | None = None,
        *,
        observer_factory: Callable[[], Any] = Observer,
        join_timeout: float = MONITOR_JOIN_TIMEOUT_S,
    ):
        self._registry = registry if registry is not None else PathRegistry()
        self._observer = observer_factory()
        self._join_timeout = join_timeout
        self._lock = threading.RLock()
        self._queue: queue.Queue[Any] = queue.Queue()
        self._dispatcher: threading.Thread | None = None
        self._running = False

    @property
    def registry(self) -> PathRegistry:
        return self._registry

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def watched_paths(self) -> list[str]:
        with self._lock:
            return self._registry.paths()

    def __enter__(self) -> "Monitor":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start(self) -> None:
        """Start the observer and the dispatch thread."""
        with self._lock:
            if self._running:
                return
            self._observer.start()
            self._dispatcher = threading.Thread(
                target=self._dispatch_loop,
                name="dawg-monitor-dispatch",
                daemon=True,
            )
            self._dispatcher.start()
            self._running = True
        logger.debug("Monitor started")

    def stop(self) -> None:
        """Release every watch and stop the observer and the dispatch thread."""
        with self._lock:
            for key in self._registry.paths():
                self._destroy(key)
            if not self._running:
                return
            self._running = False
            dispatcher = self._dispatcher
            self._dispatcher = None

        try:
            self._observer.stop()
            self._observer.join(timeout=self._join_timeout)
        except RuntimeError as exc:
            logger.debug("Observer stop error: %s", exc)

        self._queue.put(_STOP)
        if dispatcher is not None:
            dispatcher.join(timeout=self._join_timeout)
        logger.debug("Monitor stopped")

    def watch(self, path: str | os.PathLike[str], callback: WatchCallback) -> None:
        """
        Invoke ``callback`` whenever ``path`` (or anything beneath it) changes.

        Raises:
            PathNotFoundError: ``path`` does not exist.
        """
        if not callable(callback):
            raise TypeError("callback must be callable")
        key = normalize_path(path)
        if not os.path.exists(key):
            raise PathNotFoundError(f'Path "{key}" does not exist.', path=key)

        with self._lock:
            entry = self._registry.get(key)
            if entry is not None:
                entry.callbacks.append(callback)
                return

            ancestor = self._registry.nearest_ancestor(key)
            if ancestor is not None:
                ancestor.callbacks.append(callback)
                logger.debug("Watch for %s covered by %s", key, ancestor.path)
                return

            is_directory = os.path.isdir(key)
            handle = self._allocate(key, is_directory)
            entry = WatchEntry(path=key, is_directory=is_directory, handle=handle)

            if is_directory:
                for child in self._registry.descendants(key):
                    entry.callbacks.extend(child.callbacks)
                    self._destroy(child.path)
                    logger.debug("Watch for %s merged into %s", child.path, key)

            entry.callbacks.append(callback)
            self._registry.add(entry)
        logger.info("Watching %s", key)

    def unwatch(self, path: str | os.PathLike[str]) -> None:
        """Stop watching ``path``; unknown paths are ignored."""
        key = normalize_path(path)
        with self._lock:
            if self._destroy(key):
                logger.info("Stopped watching %s", key)

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every event queued so far has been dispatched."""
        if not self._running:
            return False
        marker = threading.Event()
        self._queue.put(marker)
        return marker.wait(timeout)

    def _allocate(self, key: str, is_directory: bool) -> WatchHandle:
        watch_dir = key if is_directory else os.path.dirname(key)
        handler = _EntryEventHandler(key, is_directory, self._enqueue)
        try:
            watch = self._observer.schedule(handler, watch_dir, recursive=is_directory)
        except FileNotFoundError as exc:
            raise PathNotFoundError(f'Path "{key}" does not exist.', path=key) from exc
        return WatchHandle(self._observer, handler, watch, (watch_dir, is_directory))

    def _destroy(self, key: str) -> bool:
        entry = self._registry.pop(key)
        if entry is None:
            return False
        shared = any(other.handle.key == entry.handle.key for other in self._registry)
        try:
            entry.handle.release(shared)
        except (KeyError, OSError) as exc:
            logger.debug("Failed to release watch for %s: %s", key, exc)
        return True

    def _enqueue(self, entry_path: str, event_type: str, event_path: str) -> None:
        self._queue.put((entry_path, event_type, event_path))

    def _dispatch_loop(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            if isinstance(item, threading.Event):
                item.set()
                continue
            self._dispatch(*item)

    def _dispatch(self, entry_path: str, event_type: str, event_path: str) -> None:
        with self._lock:
            # The entry may have been merged into a directory watch since the event was queued.
            entry = self._registry.get(entry_path) or self._registry.nearest_ancestor(entry_path)
            callbacks = list(entry.callbacks) if entry is not None else []

        for callback in callbacks:
            try:
                callback(event_type, event_path)
            except Exception as exc:
                logger.warning("Monitor callback failed for %s: %s", event_path, exc, exc_info=True)
