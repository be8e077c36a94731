"""Markdown, template and stylesheet rendering."""
from .markup import render_markdown
from .renderer import ERROR_CSS_CLASS, Renderer
from .templating import RenderCache, build_css, list_chapters

__all__ = [
    "Renderer",
    "RenderCache",
    "ERROR_CSS_CLASS",
    "build_css",
    "list_chapters",
    "render_markdown",
]
