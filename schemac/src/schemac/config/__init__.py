"""Configuration module for schemac."""

from .settings import Settings, get_settings, reset_settings
from .logging import get_logger, schema_context, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "setup_logging",
    "get_logger",
    "schema_context",
]
