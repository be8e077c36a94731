"""
Convert mode: write a snapshot's pages to a destination directory.

Links between chapters are written against source filenames (``02-setup.md``)
so the same page works when served; here they are rewritten to the
``.html`` targets.
"""
from __future__ import annotations

import os
import re
import shutil
from pathlib import Path

from ...shared import AmbiguousDestinationError, get_logger, log_success
from ..chapters import ChapterStore
from ..rebuild import ChapterSnapshot

logger = get_logger(__name__)

_LINK_ATTR_RE = re.compile(
    r"""(?P<attr>\b(?:href|src)\s*=\s*)(?P<quote>["'])(?P<url>[^"'#?]*)(?P<suffix>[#?][^"']*)?(?P=quote)""",
    re.IGNORECASE,
)


def rewrite_links(html: str, chapters: ChapterStore) -> str:
    """Point links that name a chapter source file at its ``.html`` target."""
    targets = {chapter.filename: chapter.target for chapter in chapters}
    if not targets:
        return html

    def repl(match: re.Match) -> str:
        url = match.group("url")
        bare = url[2:] if url.startswith("./") else url
        target = targets.get(bare)
        if target is None:
            return match.group(0)
        quote = match.group("quote")
        suffix = match.group("suffix") or ""
        return f"{match.group('attr')}{quote}{target}{suffix}{quote}"

    return _LINK_ATTR_RE.sub(repl, html)


def is_file_destination(destination: str | os.PathLike[str]) -> bool:
    """A destination with a file extension (that is not an existing directory) names a single file."""
    path = Path(destination)
    return bool(path.suffix) and not path.is_dir()


def write_snapshot(
    snapshot: ChapterSnapshot,
    destination: str | os.PathLike[str],
    *,
    clear: bool = False,
) -> list[Path]:
    """
    Write every chapter of ``snapshot`` below ``destination``.

    With ``clear`` the destination is removed and recreated first; otherwise
    files are overwritten in place and pages of removed chapters stay behind.

    Returns:
        The written paths, in chapter order.

    Raises:
        AmbiguousDestinationError: ``destination`` looks like a file and the
            snapshot holds more than one chapter. Nothing is written.
    """
    dest = Path(destination).absolute()
    chapters = snapshot.chapters

    if is_file_destination(dest):
        if len(chapters) > 1:
            raise AmbiguousDestinationError(
                f'Destination "{dest}" is a single file but there are {len(chapters)} chapters.',
                path=dest,
            )
        if clear and dest.is_file():
            dest.unlink()
        dest.parent.mkdir(parents=True, exist_ok=True)
        outputs = [(chapter, dest) for chapter in chapters]
    else:
        if clear and dest.exists():
            if dest.is_dir():
                shutil.rmtree(dest)
            else:
                dest.unlink()
        dest.mkdir(parents=True, exist_ok=True)
        outputs = [(chapter, dest / chapter.target) for chapter in chapters]

    written: list[Path] = []
    for chapter, path in outputs:
        html = rewrite_links(snapshot.page(chapter), chapters)
        path.write_text(html, encoding="utf-8")
        written.append(path)
        logger.debug("Wrote %s", path)

    log_success(logger, "Wrote %d page(s) to %s", len(written), dest)
    return written
