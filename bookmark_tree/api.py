"""
Boundary operations over plain payloads.

Host applications exchange trees as lists of dicts using camelCase field
names (id, parentId, title, url, addDate, lastModified, icon, tags,
isDuplicate, children). Every function here decodes its payload arguments,
runs the matching tree operation and encodes the result back, so callers
never handle Node objects. A payload that does not fit the node shape
raises DecodeError.

Example:
    >>> tree = parse(markup)
    >>> tree = add_tag(tree, "node_3", "work")
    >>> search(tree, "tag:work")
    ['node_3']
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from .core import duplicate_detector, tree_operations, tree_utils
from .core.merge import merge as merge_trees
from .core.search import search as search_tree
from .core.exporters import (
    CSVSerializer,
    HTMLSerializer,
    JSONSerializer,
    MarkdownSerializer,
    get_exporter,
)
from .core.netscape_parser import NetscapeHTMLParser
from .core.payload import (
    decode_new_node,
    decode_tree,
    decode_tree_json,
    decode_updates,
    encode_duplicate_groups,
    encode_tree,
)
from .utils.error_handler import NotFoundError

logger = logging.getLogger(__name__)

Payload = List[Dict[str, Any]]
TreeInput = Union[Payload, Dict[str, Any]]


def _apply(tree: TreeInput, operation, *args) -> Payload:
    nodes = decode_tree(tree)
    return encode_tree(operation(nodes, *args))


# ============================================================================
# Parsing
# ============================================================================


def parse(markup: Union[str, bytes], features: str = "html5lib") -> Payload:
    """
    Parse Netscape bookmark markup.

    Returns:
        A one-element list holding the synthetic "Bookmarks" root

    Raises:
        ParseError: If the input cannot be read as markup at all
    """
    root = NetscapeHTMLParser(features=features).parse(markup)
    return encode_tree([root])


def load_json(text: Union[str, bytes]) -> Payload:
    """
    Read a tree from a document produced by serialize_to_json.

    Raises:
        DecodeError: If the text is not a valid tree document
    """
    return encode_tree(decode_tree_json(text))


# ============================================================================
# Queries
# ============================================================================


def find_by_id(tree: TreeInput, node_id: str) -> Optional[Dict[str, Any]]:
    """The first node with the id (with its subtree), or None."""
    node = tree_operations.find_by_id(decode_tree(tree), node_id)
    return node.to_dict() if node is not None else None


def collect_all(tree: TreeInput) -> Payload:
    """Every node in pre-order, each with its subtree."""
    return encode_tree(tree_operations.collect_all(decode_tree(tree)))


def find_duplicates(tree: TreeInput) -> List[Dict[str, Any]]:
    """Groups of nodes sharing a url, as {"url", "nodes"} dicts."""
    return encode_duplicate_groups(duplicate_detector.find_duplicates(decode_tree(tree)))


def mark_duplicates(tree: TreeInput) -> Payload:
    return _apply(tree, duplicate_detector.mark_duplicates)


def search(tree: TreeInput, query: str) -> List[str]:
    """Ids of nodes matching the query, in pre-order."""
    return search_tree(decode_tree(tree), query)


def stats(tree: TreeInput) -> Dict[str, Any]:
    return tree_utils.tree_stats(decode_tree(tree)).to_dict()


def all_tags(tree: TreeInput) -> List[str]:
    return tree_utils.get_all_tags(decode_tree(tree))


def node_path(tree: TreeInput, node_id: str) -> List[str]:
    """Ids from the top level down to the node; empty if it is missing."""
    return tree_utils.find_node_path(decode_tree(tree), node_id)


def filter_by_ids(tree: TreeInput, ids: List[str]) -> Payload:
    return encode_tree(tree_utils.filter_tree_by_ids(decode_tree(tree), set(ids)))


def sort(tree: TreeInput, sort_by: str = "title", order: str = "asc") -> Payload:
    return encode_tree(tree_utils.sort_tree(decode_tree(tree), sort_by, order))


# ============================================================================
# Mutations
# ============================================================================


def update(tree: TreeInput, node_id: str, fields: Dict[str, Any]) -> Payload:
    """
    Apply a partial update (camelCase keys) to one node.

    Raises:
        DecodeError: If a present field has the wrong type
    """
    updates = decode_updates(fields)
    return _apply(tree, tree_operations.update, node_id, updates)


def add(tree: TreeInput, parent_id: Optional[str], node: Dict[str, Any]) -> Payload:
    """Insert a node (its id is minted) under a folder, or at top level."""
    new_node = decode_new_node(node)
    return _apply(tree, tree_operations.add, parent_id, new_node)


def add_folder(tree: TreeInput, parent_id: Optional[str], title: str) -> Payload:
    return _apply(tree, tree_operations.add_folder, parent_id, title)


def delete(tree: TreeInput, node_id: str) -> Payload:
    """
    Raises:
        NotFoundError: If no node has the id
    """
    return _apply(tree, tree_operations.delete, node_id)


def add_tag(tree: TreeInput, node_id: str, tag: str) -> Payload:
    return _apply(tree, tree_operations.add_tag, node_id, tag)


def remove_tag(tree: TreeInput, node_id: str, tag: str) -> Payload:
    return _apply(tree, tree_operations.remove_tag, node_id, tag)


def rename_tag(tree: TreeInput, old_tag: str, new_tag: str) -> Tuple[Payload, int]:
    nodes, affected = tree_operations.rename_tag(decode_tree(tree), old_tag, new_tag)
    return encode_tree(nodes), affected


def delete_tag(tree: TreeInput, tag: str) -> Tuple[Payload, int]:
    nodes, affected = tree_operations.delete_tag(decode_tree(tree), tag)
    return encode_tree(nodes), affected


def move(tree: TreeInput, node_id: str, new_parent_id: Optional[str]) -> Payload:
    """
    Move a node under another folder ("root" or "" for the top level).

    The tree payload passed in is not changed. When the destination is
    missing, NotFoundError is raised; its ``tree`` attribute holds the
    encoded tree with the node re-attached at the top level.

    Raises:
        NotFoundError: If the node or the destination is missing
        ValueError: If the destination is a bookmark or inside the node
    """
    return _apply_with_recovery(tree, tree_operations.move, node_id, new_parent_id)


def move_relative(
    tree: TreeInput, node_id: str, sibling_id: str, position: str
) -> Payload:
    """Move a node "before" or "after" another node; errors as for move."""
    return _apply_with_recovery(
        tree, tree_operations.move_relative, node_id, sibling_id, position
    )


def _apply_with_recovery(tree: TreeInput, operation, *args) -> Payload:
    nodes = decode_tree(tree)
    try:
        operation(nodes, *args)
    except NotFoundError as e:
        # Partial result of a move whose destination was missing
        e.tree = encode_tree(nodes)
        raise
    return encode_tree(nodes)


def resolve_duplicate(tree: TreeInput, url: str, keep_id: str) -> Payload:
    """
    Keep one bookmark with the given url and delete the other copies.

    Raises:
        ValueError: If the url has no duplicates or keep_id is not one of them
    """
    nodes = decode_tree(tree)
    for group in duplicate_detector.find_duplicates(nodes):
        if group.url == url:
            return encode_tree(duplicate_detector.resolve_duplicate(nodes, group, keep_id))
    raise ValueError(f"No duplicates found for url: {url}")


def merge(base: TreeInput, target: TreeInput) -> Payload:
    """Append target's top-level nodes to base and recompute duplicate flags."""
    return encode_tree(merge_trees(decode_tree(base), decode_tree(target)))


# ============================================================================
# Serialization
# ============================================================================


def serialize_to_html(tree: TreeInput, title: str = "Bookmarks") -> str:
    return HTMLSerializer(title=title).serialize(decode_tree(tree))


def serialize_to_json(tree: TreeInput, indent: int = 2) -> str:
    return JSONSerializer(indent=indent).serialize(decode_tree(tree))


def serialize_to_csv(tree: TreeInput, tag_separator: str = ";") -> str:
    return CSVSerializer(tag_separator=tag_separator).serialize(decode_tree(tree))


def serialize_to_markdown(tree: TreeInput) -> str:
    return MarkdownSerializer().serialize(decode_tree(tree))


def export(tree: TreeInput, format_name: str) -> str:
    """
    Serialize a tree in a format chosen by name.

    Raises:
        ValueError: If the format is not supported
    """
    serializer = get_exporter(format_name)()
    return serializer.serialize(decode_tree(tree))