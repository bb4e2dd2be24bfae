#!/usr/bin/env python3
"""
Main entry point for the Bookmark Tree toolkit.

This module backs the bookmark-tree console script.
"""

import sys
from bookmark_tree.cli import main


if __name__ == "__main__":
    sys.exit(main())
