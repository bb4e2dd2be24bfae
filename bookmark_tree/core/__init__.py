"""
Core bookmark tree modules.

This package contains the node model, the Netscape bookmark parser, tree
operations, duplicate detection, search, merge and the serializers.
"""

from .data_models import DuplicateGroup, Node, TreeStats
from .netscape_parser import NetscapeHTMLParser

__all__ = [
    'DuplicateGroup',
    'Node',
    'TreeStats',
    'NetscapeHTMLParser',
]
