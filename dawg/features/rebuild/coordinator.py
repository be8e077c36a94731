"""
Gather -> render -> publish, triggered once at startup and then by the monitor.

A single worker thread performs rebuilds. Notifications arriving while a
rebuild runs set a pending flag, so any number of them collapse into exactly
one follow-up rebuild. The flag is cleared before the follow-up gathers, so it
always sees the filesystem as it was at or after the last notification.

Readers take ``coordinator.snapshot`` without locking; a new snapshot replaces
the old one with a single reference assignment.
"""
from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable
from enum import Enum

from ...config import REBUILD_DELAY_MS
from ...shared import ChapterRenderError, DawgError, format_timestamp, get_logger, log_success, now, timer
from ..chapters import ChapterStore, gather
from ..render import Renderer
from .snapshot import ChapterError, ChapterSnapshot

logger = get_logger(__name__)

GatherFn = Callable[..., ChapterStore]
SnapshotListener = Callable[[ChapterSnapshot], None]


class RebuildState(str, Enum):
    """Coordinator state."""

    IDLE = "idle"
    REBUILDING = "rebuilding"


class RebuildCoordinator:
    """
    Owns the published ``ChapterSnapshot`` for one source.

    Usage:
        coordinator = RebuildCoordinator("docs")
        coordinator.start()                 # first snapshot, synchronously
        monitor.watch("docs", coordinator.notify)
        page = coordinator.snapshot.lookup("/intro")
    """

    def __init__(
        self,
        source: str | os.PathLike[str],
        renderer: Renderer | None = None,
        *,
        gather_fn: GatherFn = gather,
        discover_title: bool = True,
        delay_s: float = REBUILD_DELAY_MS / 1000.0,
    ):
        self._source = os.path.abspath(os.fspath(source))
        self._renderer = renderer if renderer is not None else Renderer()
        self._gather = gather_fn
        self._discover_title = discover_title
        self._delay_s = max(0.0, delay_s)

        self._cond = threading.Condition()
        self._running = False
        self._pending = False
        self._state = RebuildState.IDLE
        self._worker: threading.Thread | None = None

        self._snapshot: ChapterSnapshot | None = None
        self._listeners: list[SnapshotListener] = []
        self._rebuild_count = 0
        self._last_error: str | None = None

    @property
    def source(self) -> str:
        return self._source

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def snapshot(self) -> ChapterSnapshot | None:
        """The most recently published snapshot (None before ``start``)."""
        return self._snapshot

    @property
    def state(self) -> RebuildState:
        return self._state

    @property
    def rebuild_count(self) -> int:
        return self._rebuild_count

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def add_listener(self, listener: SnapshotListener) -> None:
        """Call ``listener(snapshot)`` after every publish."""
        self._listeners.append(listener)

    def start(self) -> ChapterSnapshot:
        """
        Build and publish the first snapshot synchronously.

        Raises:
            SourceNotFoundError: the source path does not exist.
        """
        with self._cond:
            self._running = True
            self._state = RebuildState.REBUILDING
        try:
            snapshot = self.rebuild()
        finally:
            with self._cond:
                self._running = False
                self._state = RebuildState.IDLE
                if self._pending:
                    self._spawn_worker_locked()
                self._cond.notify_all()
        return snapshot

    def notify(self, event_type: str | None = None, path: str | None = None) -> None:
        """Monitor callback: schedule a rebuild, coalescing with one in flight."""
        with self._cond:
            self._pending = True
            if self._running:
                logger.debug("Rebuild already running; coalesced change %s %s", event_type or "", path or "")
                return
            self._spawn_worker_locked()
        logger.debug("Rebuild scheduled after %s %s", event_type or "change", path or "")

    def notify_templates(self, event_type: str | None = None, path: str | None = None) -> None:
        """Monitor callback for template/stylesheet changes."""
        self._renderer.cache.invalidate()
        self.notify(event_type, path)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no rebuild is running or pending."""
        with self._cond:
            return self._cond.wait_for(lambda: not self._running and not self._pending, timeout)

    def rebuild(self) -> ChapterSnapshot:
        """
        Gather, render and publish synchronously.

        Prefer ``notify`` from event sources; this is the worker's procedure.
        """
        snapshot = self._build()
        self._publish(snapshot)
        return snapshot

    def _spawn_worker_locked(self) -> None:
        self._running = True
        self._worker = threading.Thread(target=self._work, name="dawg-rebuild", daemon=True)
        self._worker.start()

    def _work(self) -> None:
        while True:
            with self._cond:
                if not self._pending:
                    self._running = False
                    self._state = RebuildState.IDLE
                    self._cond.notify_all()
                    return
            if self._delay_s:
                # Settle; notifications during the pause fold into this pass.
                time.sleep(self._delay_s)
            with self._cond:
                self._pending = False
                self._state = RebuildState.REBUILDING
            self._rebuild_in_worker()

    def _rebuild_in_worker(self) -> None:
        try:
            self.rebuild()
        except DawgError as exc:
            self._last_error = str(exc)
            logger.error("Rebuild failed, keeping the previous snapshot: %s", exc)
        except Exception as exc:
            self._last_error = str(exc)
            logger.error("Rebuild failed, keeping the previous snapshot: %s", exc, exc_info=True)

    def _build(self) -> ChapterSnapshot:
        with timer("rebuild", logger):
            if self._renderer.cache.dev:
                self._renderer.cache.invalidate()
            chapters = self._gather(self._source, discover_title=self._discover_title)
            rendered: dict[str, str] = {}
            errors: list[ChapterError] = []
            for chapter in chapters:
                try:
                    rendered[chapter.id] = self._renderer.render(chapter, chapters)
                except Exception as exc:
                    if isinstance(exc, ChapterRenderError):
                        logger.error("%s", exc)
                    else:
                        logger.error("Could not render chapter %s: %s", chapter.filename, exc, exc_info=True)
                    errors.append(ChapterError(chapter.id, chapter.filename, str(exc)))
                    rendered[chapter.id] = self._renderer.render_error(chapter, chapters, exc)
            return ChapterSnapshot(chapters, rendered, tuple(errors), now())

    def _publish(self, snapshot: ChapterSnapshot) -> None:
        self._snapshot = snapshot
        self._rebuild_count += 1
        self._last_error = None
        if snapshot.errors:
            logger.warning(
                "Rendered %d chapter(s), %d with errors: %s",
                len(snapshot),
                len(snapshot.errors),
                ", ".join(error.filename for error in snapshot.errors),
            )
        else:
            log_success(logger, "Rendered %d chapter(s) from %s", len(snapshot), self._source)
        logger.debug("Published snapshot #%d built at %s", self._rebuild_count, format_timestamp(snapshot.built_at))

        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as exc:
                logger.error("Snapshot listener failed: %s", exc, exc_info=True)
