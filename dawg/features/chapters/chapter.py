"""
Chapters: one markdown source file each.

A chapter is identified by the md5 of its extension-stripped filename, so a
chapter keeps its identity (and its URL) when only its position changes.
"""
from __future__ import annotations

import os
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from functools import cached_property

from ...shared import ChapterRenderError, ErrorCode, Result
from ...utils import hash_name, make_hash, strip_extension

_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}[ \t]+(.+?)[ \t#]*$", re.MULTILINE)
_LEADING_NUMBER_RE = re.compile(r"^[0-9]*-")


def filename_title(filename: str) -> str:
    """Title derived from a filename: extension and leading ``NN-`` stripped."""
    title = strip_extension(filename)
    return _LEADING_NUMBER_RE.sub("", title, count=1) or title


@dataclass(frozen=True)
class Chapter:
    """
    A markdown file on disk.

    ``content`` and ``title`` are read lazily and memoized; everything else is
    fixed at creation.
    """

    path: str
    index: int
    discover_title: bool = True
    filename: str = field(init=False)
    name: str = field(init=False)
    id: str = field(init=False)

    def __post_init__(self) -> None:
        filename = os.path.basename(self.path)
        name = strip_extension(filename)
        object.__setattr__(self, "filename", filename)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "id", make_hash(name))

    @property
    def target(self) -> str:
        """Output filename for the chapter (``.html``)."""
        return f"{self.name}.html"

    @cached_property
    def content(self) -> str:
        """
        Unparsed markdown source of the chapter.

        Raises:
            ChapterRenderError: the file cannot be read or is not valid UTF-8.
        """
        try:
            with open(self.path, encoding="utf-8") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ChapterRenderError(f'Could not read chapter "{self.filename}": {exc}', path=self.path) from exc

    @cached_property
    def title(self) -> str:
        if self.discover_title:
            try:
                match = _HEADING_RE.search(self.content)
            except ChapterRenderError:
                match = None
            if match:
                return match.group(1).strip()
        return filename_title(self.filename)

    def __str__(self) -> str:
        return self.id


class ChapterStore(Sequence[Chapter]):
    """Ordered, read-only collection of chapters with lookup by name and index."""

    def __init__(self, chapters: Sequence[Chapter] = ()):
        self._chapters: tuple[Chapter, ...] = tuple(chapters)
        self._by_id = {chapter.id: chapter for chapter in self._chapters}

    def __getitem__(self, index):  # type: ignore[override]
        return self._chapters[index]

    def __len__(self) -> int:
        return len(self._chapters)

    def __iter__(self) -> Iterator[Chapter]:
        return iter(self._chapters)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Chapter):
            return item.id in self._by_id
        return item in self._by_id

    def __repr__(self) -> str:
        return f"ChapterStore({[c.filename for c in self._chapters]!r})"

    @property
    def ids(self) -> list[str]:
        return [chapter.id for chapter in self._chapters]

    def get(self, chapter_id: str) -> Result[Chapter]:
        chapter = self._by_id.get(chapter_id)
        if chapter is None:
            return Result.Err(ErrorCode.NOT_FOUND, f"No chapter with id {chapter_id}")
        return Result.Ok(chapter)

    def find_by_name(self, name: str) -> Result[Chapter]:
        """Find a chapter by name; any extension on ``name`` is ignored."""
        result = self.get(hash_name(name))
        if not result.ok:
            return Result.Err(ErrorCode.NOT_FOUND, f'No chapter named "{name}"')
        return result

    def find_by_index(self, index: int) -> Result[Chapter]:
        for chapter in self._chapters:
            if chapter.index == index:
                return Result.Ok(chapter)
        return Result.Err(ErrorCode.NOT_FOUND, f"No chapter at index {index}")

    def neighbours(self, chapter: Chapter) -> tuple[Chapter | None, Chapter | None]:
        """Previous and next chapter in reading order."""
        try:
            position = self._chapters.index(chapter)
        except ValueError:
            return None, None
        previous = self._chapters[position - 1] if position > 0 else None
        following = self._chapters[position + 1] if position + 1 < len(self._chapters) else None
        return previous, following
