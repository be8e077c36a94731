"""Chapter model and discovery."""
from .chapter import Chapter, ChapterStore, filename_title
from .gather import gather

__all__ = ["Chapter", "ChapterStore", "filename_title", "gather"]
