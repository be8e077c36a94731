"""
Chapter discovery.
"""
from __future__ import annotations

import os

from ...shared import SourceNotFoundError, get_logger, is_chapter_file
from .chapter import Chapter, ChapterStore

logger = get_logger(__name__)


def gather(source: str | os.PathLike[str], *, discover_title: bool = True) -> ChapterStore:
    """
    Gather chapters from a source directory, one level deep.

    The source may also be a single chapter file. Directory entries are taken
    in sorted order; their position among chapter files gives the 1-based
    chapter index.

    Raises:
        SourceNotFoundError: ``source`` does not exist.
    """
    source = os.path.abspath(os.fspath(source))
    if not os.path.exists(source):
        raise SourceNotFoundError(f'Source "{source}" does not exist.', path=source)

    if os.path.isfile(source):
        candidates = [source]
    else:
        try:
            names = sorted(os.listdir(source))
        except OSError as exc:
            raise SourceNotFoundError(f'Source "{source}" could not be read: {exc}', path=source) from exc
        candidates = [os.path.join(source, name) for name in names]

    chapters: list[Chapter] = []
    for path in candidates:
        if not is_chapter_file(path) or not os.path.isfile(path):
            continue
        chapters.append(Chapter(path, index=len(chapters) + 1, discover_title=discover_title))

    logger.debug("Gathered %d chapter(s) from %s", len(chapters), source)
    return ChapterStore(chapters)
