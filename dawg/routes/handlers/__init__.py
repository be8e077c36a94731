"""Route handler modules."""
from .chapters import NOT_FOUND_BODY, register_chapter_routes

__all__ = ["register_chapter_routes", "NOT_FOUND_BODY"]
