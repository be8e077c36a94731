"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from typing import Final


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Lookup / validation
    NOT_FOUND = "NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"

    # Startup / configuration
    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"

    # Watching
    PATH_NOT_FOUND = "PATH_NOT_FOUND"

    # Rendering / writing
    RENDER_FAILED = "RENDER_FAILED"
    AMBIGUOUS_DESTINATION = "AMBIGUOUS_DESTINATION"


# Chapter source extensions (without the leading dot)
CHAPTER_EXTENSIONS: Final[frozenset[str]] = frozenset({"markdown", "mdown", "md"})


def is_chapter_file(filename: str) -> bool:
    """
    Check whether a filename carries a supported chapter extension.

    Args:
        filename: File name or path

    Returns:
        True for ``.md``, ``.mdown`` and ``.markdown`` files
    """
    ext = os.path.splitext(filename)[1][1:]
    return ext in CHAPTER_EXTENSIONS
