"""
Immutable, fully rendered view of every chapter.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ...shared import Result
from ..chapters import Chapter, ChapterStore


@dataclass(frozen=True)
class ChapterError:
    """A chapter that was published with an error placeholder."""

    chapter_id: str
    filename: str
    message: str


@dataclass(frozen=True)
class ChapterSnapshot:
    """
    Chapters plus their rendered pages, published as one unit.

    Every chapter in ``chapters`` has a page in ``rendered``; construction
    fails otherwise, so a partial snapshot can never be published.
    """

    chapters: ChapterStore
    rendered: Mapping[str, str]
    errors: tuple[ChapterError, ...] = ()
    built_at: float = field(default=0.0, compare=False)

    def __post_init__(self) -> None:
        missing = [chapter.filename for chapter in self.chapters if chapter.id not in self.rendered]
        if missing:
            raise ValueError(f"Snapshot is missing rendered pages for: {', '.join(missing)}")
        object.__setattr__(self, "rendered", MappingProxyType(dict(self.rendered)))

    @classmethod
    def empty(cls) -> "ChapterSnapshot":
        return cls(ChapterStore(), {})

    def __len__(self) -> int:
        return len(self.chapters)

    def resolve(self, target: str) -> Result[Chapter]:
        """
        Resolve a request target to a chapter.

        Leading ``/`` are stripped; an empty target is the first chapter,
        anything else is looked up by name (extension ignored).
        """
        name = (target or "").lstrip("/")
        if not name:
            return self.chapters.find_by_index(1)
        return self.chapters.find_by_name(name)

    def lookup(self, target: str) -> Result[str]:
        """Rendered page for a request target."""
        return self.resolve(target).map(lambda chapter: self.rendered[chapter.id])

    def page(self, chapter: Chapter) -> str:
        return self.rendered[chapter.id]
