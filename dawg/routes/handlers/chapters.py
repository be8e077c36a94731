"""
Chapter pages.

Handlers only read the coordinator's published snapshot; rendering never
happens on the request path.
"""
from aiohttp import web

from dawg.shared import get_logger

from ..keys import COORDINATOR_KEY

NOT_FOUND_BODY = "404 - Not Found"

logger = get_logger(__name__)


def register_chapter_routes(routes: web.RouteTableDef) -> None:
    """Register the catch-all chapter route."""

    @routes.get("/{name:.*}")
    async def get_chapter(request: web.Request) -> web.Response:
        coordinator = request.app[COORDINATOR_KEY]
        snapshot = coordinator.snapshot
        target = request.match_info.get("name", "")

        if snapshot is None:
            logger.debug("No snapshot published yet; %s not served", request.path)
            return web.Response(status=404, text=NOT_FOUND_BODY)

        result = snapshot.lookup(target)
        if not result.ok or result.data is None:
            logger.debug("GET %s -> 404 (%s)", request.path, result.error)
            return web.Response(status=404, text=NOT_FOUND_BODY)

        return web.Response(status=200, text=result.data, content_type="text/html", charset="utf-8")
