"""Utility functions for schemac."""

from .files import write_all_atomic, write_text_atomic

__all__ = ["write_all_atomic", "write_text_atomic"]
