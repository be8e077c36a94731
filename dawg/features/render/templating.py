"""
Template and stylesheet compilation with an explicit cache.

The cache is owned by the renderer of one coordinator. ``invalidate()`` drops
the compiled template and the stylesheet bundle. In dev mode the coordinator
invalidates once at the start of every rebuild, so template edits show up on
the next rebuild and every page of one snapshot shares one template.
"""
from __future__ import annotations

import os
import threading
from collections.abc import Sequence
from pathlib import Path

import rcssmin
from jinja2 import Environment, Template
from markupsafe import Markup, escape
from pygments.formatters import HtmlFormatter

from ...config import CODE_CSS_CLASS, DEFAULT_STYLESHEETS, DEFAULT_TEMPLATE, PYGMENTS_STYLE
from ...shared import get_logger
from ..chapters import ChapterStore

logger = get_logger(__name__)


def build_css(
    styles: Sequence[str | os.PathLike[str]],
    *,
    compress: bool = True,
    pygments_style: str | None = PYGMENTS_STYLE,
) -> str:
    """
    Concatenate stylesheets into one bundle.

    Missing stylesheets are skipped. The Pygments rules for highlighted code
    blocks are appended when ``pygments_style`` is set.
    """
    parts: list[str] = []
    for style in styles:
        path = Path(style)
        if not path.is_file():
            logger.debug("Skipping missing stylesheet %s", path)
            continue
        parts.append(f"/* {path.name} */\n{path.read_text(encoding='utf-8')}\n\n")

    if pygments_style:
        code_css = HtmlFormatter(style=pygments_style).get_style_defs(f".{CODE_CSS_CLASS}")
        parts.append(f"/* pygments:{pygments_style} */\n{code_css}\n\n")

    css = "".join(parts)
    if compress:
        css = rcssmin.cssmin(css)
    return css


def list_chapters(chapters: ChapterStore, title: str | None = None) -> Markup:
    """Ordered list of links to every chapter, optionally under a heading."""
    html = []
    if title:
        html.append(f"<h1>{escape(title)}</h1>")
    html.append('<ol class="chapters">')
    for chapter in chapters:
        html.append(f'<li><a href="{escape(chapter.filename)}">{escape(chapter.title)}</a></li>')
    html.append("</ol>")
    return Markup("\n".join(html))


class RenderCache:
    """Compiled template and stylesheet bundle for one site."""

    def __init__(
        self,
        template: str | os.PathLike[str] | None = None,
        styles: Sequence[str | os.PathLike[str]] | None = None,
        *,
        dev: bool = False,
        pygments_style: str | None = PYGMENTS_STYLE,
    ):
        self._template_option = template
        self._styles = [Path(s) for s in styles] if styles else [Path(s) for s in DEFAULT_STYLESHEETS]
        self._dev = dev
        self._pygments_style = pygments_style
        self._env = Environment(autoescape=True, keep_trailing_newline=True)
        self._lock = threading.Lock()
        self._template: Template | None = None
        self._styling: str | None = None

    @property
    def dev(self) -> bool:
        return self._dev

    @property
    def template_path(self) -> Path:
        """The user template when it is an existing file, otherwise the packaged default."""
        if self._template_option:
            candidate = Path(self._template_option)
            if candidate.is_file():
                return candidate
            logger.warning("Template %s not found, using the default template", candidate)
        return DEFAULT_TEMPLATE

    @property
    def style_paths(self) -> list[Path]:
        return list(self._styles)

    def watch_paths(self) -> list[Path]:
        """Existing template and stylesheet files worth watching in dev mode."""
        paths = [self.template_path, *self._styles]
        return [p for p in paths if p.is_file()]

    def template(self) -> Template:
        with self._lock:
            if self._template is None:
                path = self.template_path
                self._template = self._env.from_string(path.read_text(encoding="utf-8"))
                logger.debug("Compiled template %s", path)
            return self._template

    def styling(self) -> str:
        with self._lock:
            if self._styling is None:
                self._styling = build_css(
                    self._styles,
                    compress=not self._dev,
                    pygments_style=self._pygments_style,
                )
            return self._styling

    def invalidate(self) -> None:
        with self._lock:
            self._template = None
            self._styling = None
        logger.debug("Render cache invalidated")
