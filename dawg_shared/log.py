"""
Logging utilities with consistent formatting and emoji indicators.
"""
import logging
from .time import format_timestamp
from typing import Final

# Emoji indicators for log levels
EMOJI_MAP: Final[dict[str, str]] = {
    "DEBUG": "🔍",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🔥",
    "SUCCESS": "✅",
}

# Global logger prefix
PREFIX: Final[str] = "🐶 dawg"

# Root of every project logger; the single console handler lives here.
ROOT_LOGGER_NAME: Final[str] = "dawg"

# Above CRITICAL, so nothing passes the handler while quiet.
_QUIET_LEVEL: Final[int] = logging.CRITICAL + 10

_handler: logging.Handler | None = None
_handler_level = logging.NOTSET


class EmojiFormatter(logging.Formatter):
    """Custom formatter that adds a wall-clock prefix and an emoji per level."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single line with a prefix and emoji."""
        emoji = EMOJI_MAP.get(record.levelname, "🐶")
        stamp = format_timestamp(record.created, clock_only=True)
        name = record.name
        if name.startswith(ROOT_LOGGER_NAME + "."):
            name = name[len(ROOT_LOGGER_NAME) + 1:]

        # Format: 12:00:00 🐶 dawg [✅] rebuild.coordinator: message
        line = f"{stamp} {PREFIX} [{emoji}] {name}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _root_logger() -> logging.Logger:
    global _handler
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(EmojiFormatter())
        _handler.setLevel(_handler_level)
        root.addHandler(_handler)
        root.setLevel(logging.INFO)
        # Prevent propagation to avoid duplicate logs
        root.propagate = False
    return root


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a logger with the dawg prefix and emoji indicators.

    Args:
        name: Logger name (usually __name__)
        level: Optional logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Logger in the ``dawg.*`` namespace sharing the project handler
    """
    # Clean name (strip the package prefix if present)
    if name.startswith("__main__"):
        name = "main"
    else:
        for prefix in ("dawg_shared.", "dawg.features.", "dawg."):
            if name.startswith(prefix):
                name = name[len(prefix):]
                break

    _root_logger()
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    if level is not None:
        logger.setLevel(level)
    return logger


def set_level(level: int) -> None:
    """Set the verbosity of every project logger."""
    _root_logger().setLevel(level)


def set_quiet(quiet: bool = True) -> None:
    """Silence (or restore) the console handler."""
    global _handler_level
    _handler_level = _QUIET_LEVEL if quiet else logging.NOTSET
    _root_logger()
    if _handler is not None:
        _handler.setLevel(_handler_level)


def is_quiet() -> bool:
    return _handler_level >= _QUIET_LEVEL


# Add SUCCESS level
SUCCESS_LEVEL: Final[int] = 25  # Between INFO (20) and WARNING (30)
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


def log_success(logger: logging.Logger, message: str, *args: object) -> None:
    """
    Log a success message with ✅ emoji.

    Args:
        logger: Logger instance
        message: Success message, optionally with ``%`` placeholders
    """
    logger.log(SUCCESS_LEVEL, message, *args)
