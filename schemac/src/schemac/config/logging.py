"""Logging configuration for schemac."""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator, Optional
from .settings import get_settings

# Schema file currently being compiled; "-" outside of a compilation
current_schema: ContextVar[Optional[str]] = ContextVar("current_schema", default=None)

DEFAULT_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(schema)s] - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)


class SchemaContextFilter(logging.Filter):
    """Stamps each record with the schema name from `current_schema`."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.schema = current_schema.get() or "-"
        return True


@contextmanager
def schema_context(name: str) -> Iterator[None]:
    """Tag every log record emitted inside the block with a schema name."""
    token = current_schema.set(name)
    try:
        yield
    finally:
        current_schema.reset(token)


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level {level!r}")
    return value


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> None:
    """
    Configure logging for the compiler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for file logging
        format_string: Optional custom format string; may use `%(schema)s`

    Raises:
        ValueError: If the level name is unknown
    """
    settings = get_settings()
    log_level = _resolve_level(level or settings.log_level)
    log_file_path = log_file or settings.log_file
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    root_logger = logging.getLogger("schemac")
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler.addFilter(SchemaContextFilter())
        root_logger.addHandler(handler)

    # Compiler output stays out of the host application's root logger
    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if not logging.getLogger("schemac").handlers:
        setup_logging()

    if name.startswith("schemac"):
        return logging.getLogger(name)
    return logging.getLogger(f"schemac.{name}")
