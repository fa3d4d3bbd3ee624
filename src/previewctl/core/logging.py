"""Logging configuration for previewctl.

Run progress is logged as ``[INFO]``, ``[WARN]`` and ``[ERROR]`` lines on
stderr, colored through Rich unless color is disabled.
"""

import logging
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

LEVEL_TAGS = {
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "WARNING": "WARN",
    "ERROR": "ERROR",
    "CRITICAL": "ERROR",
}

LEVEL_STYLES = {
    "DEBUG": "dim",
    "INFO": "green",
    "WARN": "yellow",
    "ERROR": "red",
}


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def level_tag(levelname: str) -> str:
    """Map a logging level name to its short tag."""
    return LEVEL_TAGS.get(levelname, levelname)


class TaggedFormatter(logging.Formatter):
    """Prefix each message with its level tag, e.g. ``[WARN] ...``."""

    def __init__(self, markup: bool = False):
        super().__init__("%(message)s")
        self._markup = markup

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        tag = level_tag(record.levelname)
        if self._markup:
            style = LEVEL_STYLES.get(tag, "white")
            return f"[{style}]\\[{tag}][/{style}] {escape(message)}"
        return f"[{tag}] {message}"


def setup_logging(level: LogLevel = LogLevel.INFO, rich_output: bool = True) -> None:
    """Route previewctl logs to stderr.

    Args:
        level: The logging level
        rich_output: Color the level tags through Rich
    """
    log_level = getattr(logging, level.value.upper())

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if rich_output:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_level=False,
            show_path=False,
            markup=True,
        )
        handler.setFormatter(TaggedFormatter(markup=True))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(TaggedFormatter())

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
    logging.getLogger("previewctl").setLevel(log_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``previewctl`` namespace."""
    if name == "previewctl" or name.startswith("previewctl."):
        return logging.getLogger(name)
    return logging.getLogger(f"previewctl.{name}")


class StructuredLogger:
    """Logger that appends bound ``key=value`` context to each message.

    The reconciler binds the branch once, so every step's line names it.
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = get_logger(name)
        self._context: dict[str, Any] = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Create a new logger with additional context."""
        return StructuredLogger(self._logger.name, {**self._context, **kwargs})

    def _format_message(self, message: str, **kwargs: Any) -> str:
        context = {**self._context, **kwargs}
        if not context:
            return message
        return f"{message} ({', '.join(f'{k}={v}' for k, v in context.items())})"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._format_message(message, **kwargs))
