"""
Tree serializers.

This module provides serializers for the supported output formats:
Netscape bookmark HTML, JSON, CSV and Markdown.
"""

from .base import TreeSerializer, ExportResult, ExportError
from .csv_exporter import CSVSerializer
from .html_exporter import HTMLSerializer
from .json_exporter import JSONSerializer
from .markdown_exporter import MarkdownSerializer

__all__ = [
    "TreeSerializer",
    "ExportResult",
    "ExportError",
    "CSVSerializer",
    "HTMLSerializer",
    "JSONSerializer",
    "MarkdownSerializer",
    "EXPORTERS",
    "get_exporter",
]


# Format registry for easy access
EXPORTERS = {
    "html": HTMLSerializer,
    "json": JSONSerializer,
    "csv": CSVSerializer,
    "markdown": MarkdownSerializer,
    "md": MarkdownSerializer,
}


def get_exporter(format_name: str) -> type:
    """
    Get a serializer class by format name.

    Args:
        format_name: Name of the format (html, json, csv, markdown)

    Returns:
        Serializer class for the specified format

    Raises:
        ValueError: If format is not supported
    """
    format_lower = format_name.lower()
    if format_lower not in EXPORTERS:
        supported = ", ".join(sorted(set(EXPORTERS.keys()) - {"md"}))
        raise ValueError(
            f"Unsupported export format: {format_name}. "
            f"Supported formats: {supported}"
        )
    return EXPORTERS[format_lower]
