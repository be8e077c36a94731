"""Application-facing alias for shared utilities.

Feature modules import from here so the shared package can be reorganized
without touching every call site.
"""

from __future__ import annotations

import dawg_shared as _root_shared
from dawg_shared import (
    CHAPTER_EXTENSIONS,
    AmbiguousDestinationError,
    ChapterRenderError,
    ConfigParseError,
    DawgError,
    ErrorCode,
    PathNotFoundError,
    Result,
    SourceNotFoundError,
    format_timestamp,
    get_logger,
    is_chapter_file,
    is_quiet,
    log_success,
    now,
    sanitize_error_message,
    set_level,
    set_quiet,
    timer,
)

__all__ = list(_root_shared.__all__)
