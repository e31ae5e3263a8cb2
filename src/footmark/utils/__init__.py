"""Shared helpers for footmark.

- logger: get_logger for namespaced loggers
"""

from footmark.utils.logger import get_logger

__all__ = ["get_logger"]
