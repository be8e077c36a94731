"""
Wiring for a dawg run.

``run(options)`` builds the first snapshot, writes it when an output is
configured, starts watching when asked to, and serves when asked to. All of
the moving parts hang off one ``RebuildCoordinator``.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from aiohttp import web

from .config import DEBUG
from .features.monitor import Monitor
from .features.publish import write_snapshot
from .features.rebuild import ChapterSnapshot, RebuildCoordinator
from .features.render import Renderer, RenderCache
from .options import Options
from .routes import create_app
from .shared import DawgError, get_logger, set_level, set_quiet

logger = get_logger(__name__)


def configure_logging(options: Options) -> None:
    set_quiet(options.quiet)
    set_level(logging.DEBUG if options.dev or DEBUG else logging.INFO)


def build_coordinator(options: Options) -> RebuildCoordinator:
    cache = RenderCache(options.template, options.styles, dev=options.dev)
    return RebuildCoordinator(options.source, Renderer(cache))


def convert(snapshot: ChapterSnapshot, options: Options) -> list[Path]:
    """Write ``snapshot`` to ``options.output``."""
    if options.output is None:
        raise ValueError("convert requires an output destination")
    return write_snapshot(snapshot, options.output, clear=options.clear)


def _rewrite_on_publish(options: Options) -> Callable[[ChapterSnapshot], None]:
    def listener(snapshot: ChapterSnapshot) -> None:
        try:
            convert(snapshot, options)
        except DawgError as exc:
            logger.error("Could not write pages: %s", exc)
        except OSError as exc:
            logger.error("Could not write pages to %s: %s", options.output, exc)

    return listener


def start_monitor(
    coordinator: RebuildCoordinator,
    options: Options,
    *,
    observer_factory: Callable[[], Any] | None = None,
) -> Monitor | None:
    """
    Watch the source (and, in dev mode, the template and stylesheets).

    Returns None when watching is off.
    """
    if not options.should_watch:
        return None

    monitor = Monitor() if observer_factory is None else Monitor(observer_factory=observer_factory)
    monitor.start()
    try:
        monitor.watch(coordinator.source, coordinator.notify)
        if options.dev:
            for path in coordinator.renderer.cache.watch_paths():
                monitor.watch(path, coordinator.notify_templates)
    except Exception:
        monitor.stop()
        raise
    return monitor


def serve(
    coordinator: RebuildCoordinator,
    options: Options,
    monitor: Monitor | None = None,
) -> None:
    """Serve the coordinator's snapshots until interrupted."""
    app = create_app(coordinator, monitor)
    logger.info("dawg listening on http://%s:%s", options.host, options.port)
    web.run_app(app, host=options.host, port=options.port, print=None)


def _wait_forever(monitor: Monitor) -> None:
    stop = threading.Event()
    try:
        while not stop.wait(1.0):
            pass
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        monitor.stop()


def run(options: Options) -> None:
    """
    Run dawg with ``options``.

    Raises:
        SourceNotFoundError: the source does not exist.
        AmbiguousDestinationError: the output names a single file but the
            source holds several chapters.
    """
    configure_logging(options)
    coordinator = build_coordinator(options)
    snapshot = coordinator.start()

    if options.should_convert:
        convert(snapshot, options)
        if options.should_watch:
            coordinator.add_listener(_rewrite_on_publish(options))

    monitor = start_monitor(coordinator, options)

    if options.should_serve:
        serve(coordinator, options, monitor)
    elif monitor is not None:
        logger.info("Watching %s for changes (Ctrl+C to stop)", coordinator.source)
        _wait_forever(monitor)
