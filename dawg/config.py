"""
Configuration for dawg.

Values here are process-wide defaults read from the environment. Per-run
choices (source, output, flags) live in ``dawg.options``.
"""
import logging
import os
from pathlib import Path
from typing import Callable, TypeVar

from .utils import env_bool

logger = logging.getLogger(__name__)

N = TypeVar("N", int, float)


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        val = os.getenv(name) if name else None
        if val is not None and val.strip():
            return val.strip()
    return default


def _env_number(
    parse: Callable[[str], N],
    default: N,
    name: str,
    min_value: N | None = None,
    max_value: N | None = None,
) -> N:
    raw = _env_raw(name)
    if raw is None:
        return default
    try:
        value = parse(raw)
    except ValueError:
        logger.warning("Invalid value for %s=%r, using default=%s", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", name, value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", name, value, max_value)
        value = max_value
    return value


def _env_int(default: int, name: str, *, min_value: int | None = None, max_value: int | None = None) -> int:
    return _env_number(int, default, name, min_value, max_value)


def _env_float(default: float, name: str, *, min_value: float | None = None, max_value: float | None = None) -> float:
    return _env_number(float, default, name, min_value, max_value)


# --- PATHS ---
PACKAGE_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = PACKAGE_DIR / "template"
DEFAULT_TEMPLATE = TEMPLATE_DIR / "template.html"
DEFAULT_STYLESHEETS = (
    TEMPLATE_DIR / "normalize.css",
    TEMPLATE_DIR / "style.css",
)

# Config file looked up in the working directory when --config is not given
RCFILE = ".dawg"

DEFAULT_SOURCE = "./docs"

# --- SERVER ---
DEFAULT_HOST = _env_raw("DAWG_HOST", default="127.0.0.1") or "127.0.0.1"
DEFAULT_PORT = _env_int(5678, "DAWG_PORT", min_value=0, max_value=65535)

# --- WATCH / REBUILD ---
# Settle time before a watch-triggered gather so editor save bursts coalesce
REBUILD_DELAY_MS = _env_int(50, "DAWG_REBUILD_DELAY_MS", min_value=0, max_value=10_000)
MONITOR_JOIN_TIMEOUT_S = _env_float(2.0, "DAWG_MONITOR_JOIN_TIMEOUT_S", min_value=0.1, max_value=60.0)

# --- RENDERING ---
PYGMENTS_STYLE = _env_raw("DAWG_PYGMENTS_STYLE", default="default") or "default"
CODE_CSS_CLASS = "codehilite"

# --- DEBUG ---
# Verbose logging and unmasked error payloads in the debug log
DEBUG = env_bool("DAWG_DEBUG", False)
