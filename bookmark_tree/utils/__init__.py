"""
Utility modules for the bookmark tree toolkit.

This package contains the exception hierarchy and logging setup.
"""

from .error_handler import (
    BookmarkTreeError,
    ConfigurationError,
    DecodeError,
    NotFoundError,
    ParseError,
)
from .logging_setup import setup_logging

__all__ = [
    "BookmarkTreeError",
    "ConfigurationError",
    "DecodeError",
    "NotFoundError",
    "ParseError",
    "setup_logging",
]
