"""
Route registration and application factory.

The server holds no rendering state of its own: every request reads the
coordinator's current snapshot, so a rebuild in progress never blocks
or tears a response.
"""
from __future__ import annotations

from typing import Awaitable, Callable

from aiohttp import web

from dawg.shared import get_logger

from ..features.monitor import Monitor
from ..features.rebuild import RebuildCoordinator
from .handlers import register_chapter_routes
from .keys import COORDINATOR_KEY, MONITOR_KEY

logger = get_logger(__name__)


@web.middleware
async def response_headers_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """
    Pages change whenever the docs do; tell browsers not to cache them.
    """
    response = await handler(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Cache-Control", "no-store, no-cache, must-revalidate")
    response.headers.setdefault("Pragma", "no-cache")
    return response


def register_all_routes() -> web.RouteTableDef:
    """
    Register all route handlers and return the RouteTableDef.
    """
    routes = web.RouteTableDef()
    register_chapter_routes(routes)
    logger.debug("Routes registered: GET /{name}")
    return routes


def _install_monitor_cleanup(app: web.Application) -> None:
    async def _on_cleanup(_app: web.Application) -> None:
        monitor = _app.get(MONITOR_KEY)
        if monitor is None:
            return
        try:
            monitor.stop()
        except Exception as exc:
            logger.warning("Failed to stop file monitor: %s", exc)

    app.on_cleanup.append(_on_cleanup)


def create_app(coordinator: RebuildCoordinator, monitor: Monitor | None = None) -> web.Application:
    """
    Build the aiohttp application that serves ``coordinator``'s snapshots.

    ``monitor``, when given, is stopped on application cleanup.
    """
    app = web.Application(middlewares=[response_headers_middleware])
    app[COORDINATOR_KEY] = coordinator
    app[MONITOR_KEY] = monitor
    app.add_routes(register_all_routes())
    _install_monitor_cleanup(app)
    return app
