"""Snapshot publishing and the rebuild coordinator."""
from .coordinator import RebuildCoordinator, RebuildState
from .snapshot import ChapterError, ChapterSnapshot

__all__ = ["RebuildCoordinator", "RebuildState", "ChapterSnapshot", "ChapterError"]
