"""
Utility helpers shared across dawg modules.
"""
from __future__ import annotations

import hashlib
import os
from typing import Any

TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
FALSE_WORDS = frozenset({"0", "false", "no", "off"})


def parse_bool(value: Any, default: bool = False) -> bool:
    """Lenient boolean for config-file and environment values; unknown words give ``default``."""
    if isinstance(value, (bool, int, float)):
        return bool(value)
    word = value.strip().lower() if isinstance(value, str) else None
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    return default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    return default if raw is None else parse_bool(raw, default)


def strip_extension(path: str) -> str:
    """Return ``path`` without its final extension."""
    return os.path.splitext(path)[0]


def make_hash(value: str) -> str:
    """Saltless md5 hex digest, used as a stable identifier (not for security)."""
    return hashlib.md5(value.encode("utf-8"), usedforsecurity=False).hexdigest()


def hash_name(filename: str) -> str:
    """Hash a file name with its directory and extension discarded."""
    return make_hash(strip_extension(os.path.basename(filename)))


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Absolute, normalized form of ``path`` used as a registry key."""
    return os.path.normcase(os.path.abspath(os.fspath(path)))


def is_under_path(candidate: str, root: str) -> bool:
    """True when ``candidate`` is ``root`` itself or lies beneath it."""
    if not candidate or not root:
        return False
    try:
        return os.path.commonpath([candidate, root]) == root
    except ValueError:
        # Different drives on Windows
        return False
