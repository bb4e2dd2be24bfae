"""
Substring search over a bookmark tree.
"""

import logging
from typing import List

from .tree_operations import Tree, iter_nodes

logger = logging.getLogger(__name__)

TAG_PREFIX = "tag:"


def search(tree: Tree, query: str) -> List[str]:
    """
    Find nodes matching a query, case-insensitively.

    A query starting with "tag:" matches nodes having a tag that contains
    the rest of the query. Any other query matches nodes whose title, url
    or one of whose tags contains it. Folders are searched like bookmarks.

    Args:
        tree: Tree to search
        query: Search text, optionally prefixed with "tag:"

    Returns:
        Ids of matching nodes in pre-order
    """
    needle = query.lower()

    if needle.startswith(TAG_PREFIX):
        tag_needle = needle[len(TAG_PREFIX):]
        results = [
            node.id
            for node in iter_nodes(tree)
            if any(tag_needle in tag.lower() for tag in node.tags)
        ]
    else:
        results = [
            node.id
            for node in iter_nodes(tree)
            if needle in node.title.lower()
            or (node.url is not None and needle in node.url.lower())
            or any(needle in tag.lower() for tag in node.tags)
        ]

    logger.debug(f"Search {query!r} matched {len(results)} node(s)")
    return results
