"""
Read-only queries and copies over bookmark trees.

Counting, tag listing, breadcrumb paths, filtered and sorted copies. None
of these functions modify the tree they are given.
"""

from typing import Callable, Dict, List, Set

from .data_models import Node, TreeStats
from .duplicate_detector import find_duplicates
from .tree_operations import Tree, find_by_id, iter_nodes, iter_with_depth

SORT_KEYS: Dict[str, Callable[[Node], object]] = {
    "title": lambda node: node.title.casefold(),
    "date": lambda node: node.add_date,
    "type": lambda node: node.title.casefold(),
}

SORT_ORDERS = ("asc", "desc")


def count_nodes(tree: Tree) -> int:
    return sum(1 for _ in iter_nodes(tree))


def count_bookmarks(tree: Tree) -> int:
    return sum(1 for node in iter_nodes(tree) if node.is_bookmark)


def count_folders(tree: Tree) -> int:
    return sum(1 for node in iter_nodes(tree) if node.is_folder)


def get_all_tags(tree: Tree) -> List[str]:
    """Every distinct tag used in the tree, sorted."""
    tags: Set[str] = set()
    for node in iter_nodes(tree):
        tags.update(node.tags)
    return sorted(tags)


def tree_stats(tree: Tree) -> TreeStats:
    """
    Compute summary counts for a tree.

    ``duplicates`` counts bookmarks whose url is shared with another node,
    computed from the current urls rather than the stored flags.
    ``max_depth`` is the number of nesting levels (0 for an empty tree).
    """
    stats = TreeStats()
    for node, depth in iter_with_depth(tree):
        stats.total_nodes += 1
        if node.is_folder:
            stats.folders += 1
        else:
            stats.bookmarks += 1
        stats.max_depth = max(stats.max_depth, depth + 1)

    stats.duplicates = sum(len(group.nodes) for group in find_duplicates(tree))
    stats.unique_tags = len(get_all_tags(tree))
    return stats


def _node_chain(tree: Tree, is_target: Callable[[Node], bool]) -> List[Node]:
    """Nodes from the top level down to the first target in pre-order."""
    stack = [(node, [node]) for node in reversed(tree)]
    while stack:
        node, chain = stack.pop()
        if is_target(node):
            return chain
        stack.extend((child, chain + [child]) for child in reversed(node.children))
    return []


def find_node_path(tree: Tree, node_id: str) -> List[str]:
    """
    Ids from the top level down to a node (inclusive).

    Returns:
        List of ids, or an empty list if the node is not in the tree
    """
    return [node.id for node in _node_chain(tree, lambda node: node.id == node_id)]


def get_node_path_string(tree: Tree, node_id: str) -> str:
    """Titles from the top level down to a node, joined by " / "."""
    chain = _node_chain(tree, lambda node: node.id == node_id)
    return " / ".join(node.title for node in chain)


def get_path_string_for(tree: Tree, target: Node) -> str:
    """
    Like get_node_path_string, but locates the node object itself.

    Merged trees can repeat ids, so callers holding the Node use this.
    """
    chain = _node_chain(tree, lambda node: node is target)
    return " / ".join(node.title for node in chain)


def get_descendants(tree: Tree, node_id: str) -> List[Node]:
    """All nodes below a node in pre-order; empty if the node is missing."""
    node = find_by_id(tree, node_id)
    if node is None:
        return []
    return list(iter_nodes(node.children))


def clone_tree(tree: Tree) -> Tree:
    """Deep copy of a tree."""
    return [node.copy() for node in tree]


def filter_tree_by_ids(tree: Tree, matching_ids: Set[str]) -> Tree:
    """
    Copy of the tree holding only matching nodes and their ancestors.

    Non-matching descendants of a matching folder are dropped, so the
    result shows exactly the path to every match.
    """
    keep = set()
    stack = [(node, ()) for node in reversed(tree)]
    while stack:
        node, ancestors = stack.pop()
        if node.id in matching_ids:
            keep.add(id(node))
            keep.update(id(ancestor) for ancestor in ancestors)
        stack.extend((child, ancestors + (node,)) for child in reversed(node.children))

    filtered: Tree = []
    copy_stack = [(node, filtered) for node in reversed(tree)]
    while copy_stack:
        node, container = copy_stack.pop()
        if id(node) not in keep:
            continue
        copied = node.shallow_copy()
        container.append(copied)
        copy_stack.extend((child, copied.children) for child in reversed(node.children))
    return filtered


def sort_tree(tree: Tree, sort_by: str = "title", order: str = "asc") -> Tree:
    """
    Sorted copy of a tree; every level is sorted independently.

    Args:
        tree: Tree to sort
        sort_by: "title", "date" or "type" (folders first, then title)
        order: "asc" or "desc"

    Raises:
        ValueError: For an unknown sort key or order
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Invalid sort key: {sort_by}. Use one of {sorted(SORT_KEYS)}.")
    if order not in SORT_ORDERS:
        raise ValueError(f"Invalid sort order: {order}. Use 'asc' or 'desc'.")

    key = SORT_KEYS[sort_by]
    reverse = order == "desc"

    def sort_level(nodes: List[Node]) -> None:
        nodes.sort(key=key, reverse=reverse)
        if sort_by == "type":
            # Folders stay first regardless of order
            nodes.sort(key=lambda node: node.is_bookmark)

    sorted_tree = clone_tree(tree)
    sort_level(sorted_tree)
    for node in iter_nodes(sorted_tree):
        sort_level(node.children)
    return sorted_tree
