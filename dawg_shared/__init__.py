"""Shared utilities for dawg."""
from .errors import (
    AmbiguousDestinationError,
    ChapterRenderError,
    ConfigParseError,
    DawgError,
    PathNotFoundError,
    SourceNotFoundError,
    sanitize_error_message,
)
from .log import get_logger, is_quiet, log_success, set_level, set_quiet
from .result import Result
from .time import format_timestamp, now, timer
from .types import CHAPTER_EXTENSIONS, ErrorCode, is_chapter_file

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "set_level",
    "set_quiet",
    "is_quiet",
    "now",
    "format_timestamp",
    "timer",
    "ErrorCode",
    "CHAPTER_EXTENSIONS",
    "is_chapter_file",
    "DawgError",
    "SourceNotFoundError",
    "PathNotFoundError",
    "ChapterRenderError",
    "AmbiguousDestinationError",
    "ConfigParseError",
    "sanitize_error_message",
]
