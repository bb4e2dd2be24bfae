"""
Configuration for the bookmark tree toolkit.
"""

from .pydantic_config import (
    BookmarkTreeConfig,
    ConfigurationManager,
    ExportConfig,
    LoggingConfig,
    ParserConfig,
    format_config_error,
)

__all__ = [
    "BookmarkTreeConfig",
    "ConfigurationManager",
    "ExportConfig",
    "LoggingConfig",
    "ParserConfig",
    "format_config_error",
]
