"""
Bookmark Tree - parse, edit, deduplicate, merge and re-serialize browser
bookmark exports (Netscape bookmark HTML).
"""

__version__ = "1.0.0"
