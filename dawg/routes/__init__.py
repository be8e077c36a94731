"""
HTTP layer for serve mode.
"""
from .keys import COORDINATOR_KEY, MONITOR_KEY
from .registry import create_app, register_all_routes, response_headers_middleware

__all__ = [
    "create_app",
    "register_all_routes",
    "response_headers_middleware",
    "COORDINATOR_KEY",
    "MONITOR_KEY",
]
