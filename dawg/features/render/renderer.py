"""
Chapter page rendering: markdown body + template + stylesheet bundle.
"""
from __future__ import annotations

import html
from functools import partial

from jinja2 import TemplateError
from markupsafe import Markup

from ...shared import ChapterRenderError, get_logger, sanitize_error_message
from ..chapters import Chapter, ChapterStore
from .markup import render_markdown
from .templating import RenderCache, list_chapters

logger = get_logger(__name__)

ERROR_CSS_CLASS = "dawg-error"

_BARE_ERROR_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body>
{placeholder}
</body>
</html>
"""


class Renderer:
    """Renders chapters to complete HTML pages using a ``RenderCache``."""

    def __init__(self, cache: RenderCache | None = None):
        self._cache = cache if cache is not None else RenderCache()

    @property
    def cache(self) -> RenderCache:
        return self._cache

    def render(self, chapter: Chapter, chapters: ChapterStore) -> str:
        """
        Render one chapter.

        Raises:
            ChapterRenderError: the chapter could not be read, parsed or rendered.
        """
        try:
            body, toc = render_markdown(chapter.content)
            return self._render_page(chapter, chapters, body, toc)
        except ChapterRenderError:
            raise
        except (TemplateError, ValueError, TypeError, LookupError, OSError) as exc:
            raise ChapterRenderError(
                f'Could not render chapter "{chapter.filename}": {exc}', path=chapter.path
            ) from exc

    def render_error(self, chapter: Chapter, chapters: ChapterStore, exc: BaseException) -> str:
        """Placeholder page for a chapter that failed to render."""
        message = sanitize_error_message(exc, f'Could not render chapter "{chapter.filename}"')
        placeholder = (
            f'<div class="{ERROR_CSS_CLASS}" role="alert">'
            f"<h1>Chapter unavailable</h1><p>{html.escape(message)}</p></div>"
        )
        try:
            return self._render_page(chapter, chapters, placeholder, "")
        except (TemplateError, ValueError, TypeError, LookupError, OSError) as page_exc:
            logger.debug("Template failed for error page of %s: %s", chapter.filename, page_exc)
            return _BARE_ERROR_PAGE.format(title=html.escape(chapter.filename), placeholder=placeholder)

    def _render_page(self, chapter: Chapter, chapters: ChapterStore, body: str, toc: str) -> str:
        template = self._cache.template()
        css = self._cache.styling()
        previous, following = chapters.neighbours(chapter)
        toc_markup = Markup(toc)
        return template.render(
            chapter=chapter,
            chapters=chapters,
            content=Markup(body),
            toc=toc_markup,
            styling=Markup(f'<style type="text/css" media="screen">{css}</style>'),
            previous=previous,
            next=following,
            list_chapters=partial(list_chapters, chapters),
            list_toc=lambda: toc_markup,
        )
