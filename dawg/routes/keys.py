"""Typed application keys shared by the app factory and handlers."""
from __future__ import annotations

from typing import TYPE_CHECKING

from aiohttp import web

if TYPE_CHECKING:
    from dawg.features.monitor import Monitor
    from dawg.features.rebuild import RebuildCoordinator

COORDINATOR_KEY: web.AppKey["RebuildCoordinator"] = web.AppKey("dawg_coordinator")
MONITOR_KEY: web.AppKey["Monitor | None"] = web.AppKey("dawg_monitor")
