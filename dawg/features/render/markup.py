"""
Markdown to HTML conversion with Pygments-highlighted code blocks.
"""
from __future__ import annotations

import markdown

from ...config import CODE_CSS_CLASS

EXTENSIONS = ["extra", "toc", "codehilite"]
EXTENSION_CONFIGS = {
    "codehilite": {
        # Unknown or missing languages render as plain text.
        "guess_lang": False,
        "noclasses": False,
        "css_class": CODE_CSS_CLASS,
    },
    "toc": {
        "permalink": False,
    },
}


def render_markdown(text: str) -> tuple[str, str]:
    """
    Convert markdown source to HTML.

    Returns:
        ``(body_html, toc_html)``
    """
    # Markdown instances keep per-document state; use a fresh one per chapter.
    md = markdown.Markdown(extensions=EXTENSIONS, extension_configs=EXTENSION_CONFIGS, output_format="html")
    body = md.convert(text)
    # An empty toc still renders an empty list; drop it when there are no headings.
    toc = getattr(md, "toc", "") if getattr(md, "toc_tokens", None) else ""
    return body, toc
