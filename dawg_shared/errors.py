"""
Error hierarchy and helpers for sanitizing error messages before they reach
rendered pages.
"""
from __future__ import annotations

import os
import re
from typing import Any

from .log import get_logger
from .types import ErrorCode

logger = get_logger(__name__)
_DEBUG_MODE = os.getenv("DAWG_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")
_WINDOWS_PATH_RE = re.compile(r"[A-Za-z]:\\[^\s]+")
_UNC_PATH_RE = re.compile(r"\\\\[^\s\\]+\\[^\s]+")
_UNIX_PATH_RE = re.compile(r"(?<![A-Za-z0-9:/?&=#%])/(?!/)[^\s#?'\"]+")


class DawgError(Exception):
    """Base class for every error raised by dawg."""

    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, *, path: str | os.PathLike[str] | None = None):
        super().__init__(message)
        self.path = os.fspath(path) if path is not None else None


class SourceNotFoundError(DawgError):
    """The chapter source path does not exist."""

    code = ErrorCode.SOURCE_NOT_FOUND


class PathNotFoundError(DawgError):
    """A path handed to the monitor does not exist."""

    code = ErrorCode.PATH_NOT_FOUND


class ChapterRenderError(DawgError):
    """A single chapter could not be read, parsed or rendered."""

    code = ErrorCode.RENDER_FAILED


class AmbiguousDestinationError(DawgError):
    """A single-file destination was given for more than one chapter."""

    code = ErrorCode.AMBIGUOUS_DESTINATION


class ConfigParseError(DawgError):
    """The config file is unreadable or not a JSON object."""

    code = ErrorCode.CONFIG_INVALID


def _mask_paths(value: str) -> str:
    """Mask path-looking substrings to avoid leaking filesystem structure."""
    cleaned = _WINDOWS_PATH_RE.sub("[path]", value)
    cleaned = _UNC_PATH_RE.sub("[path]", cleaned)
    cleaned = _UNIX_PATH_RE.sub("[path]", cleaned)
    return cleaned


def sanitize_error_message(exc: Any, fallback: str) -> str:
    """
    Build a safe error message for display in a rendered page.

    Args:
        exc: Exception or raw value to sanitize.
        fallback: Fallback message to show when nothing meaningful remains.

    Returns:
        A single-line string with absolute paths masked.
    """
    if not fallback:
        fallback = "An error occurred"

    if exc is None:
        return fallback

    try:
        raw = str(exc)
    except Exception:
        raw = ""

    if not raw:
        return fallback

    sanitized = _mask_paths(raw.replace(os.getcwd(), "[cwd]"))
    sanitized = " ".join(sanitized.splitlines()).strip()

    if _DEBUG_MODE:
        logger.debug("Sanitized error payload: %s", sanitized, exc_info=True)

    if sanitized:
        return f"{fallback}: {sanitized[:200]}"
    return fallback
