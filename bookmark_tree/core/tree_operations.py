"""
Tree traversal and structural mutation.

A tree is a list of top-level Node objects. Every function here takes the
tree explicitly, mutates it in place where the operation is a mutation, and
returns it; nothing is kept between calls. Traversals use an explicit stack
so deep folder nesting never hits the interpreter recursion limit.
"""

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..utils.error_handler import NotFoundError
from .data_models import ROOT_ID, Node, now_ms

logger = logging.getLogger(__name__)

Tree = List[Node]

# Parent ids that mean "top level" for move
TOP_LEVEL_SENTINELS = (ROOT_ID, "")

UPDATABLE_FIELDS = ("title", "url", "tags", "icon", "is_duplicate")

RELATIVE_POSITIONS = ("before", "after")


# ============================================================================
# Traversal
# ============================================================================


def iter_nodes(tree: Tree) -> Iterator[Node]:
    """Yield every node in pre-order (parents before children, siblings in order)."""
    stack = list(reversed(tree))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_with_depth(tree: Tree) -> Iterator[Tuple[Node, int]]:
    """Yield (node, depth) pairs in pre-order; top-level nodes have depth 0."""
    stack = [(node, 0) for node in reversed(tree)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.children))


def find_by_id(tree: Tree, node_id: str) -> Optional[Node]:
    """
    Find a node by id.

    Args:
        tree: Tree to search
        node_id: Id to look for

    Returns:
        The first node in pre-order with that id, or None
    """
    for node in iter_nodes(tree):
        if node.id == node_id:
            return node
    return None


def collect_all(tree: Tree) -> List[Node]:
    """Flatten the tree in pre-order, folders included."""
    return list(iter_nodes(tree))


Slot = Tuple[List[Node], int, Optional[Node]]


def _find_slot(tree: Tree, is_target: Callable[[Node], bool]) -> Optional[Slot]:
    """
    Find where the first matching node in pre-order lives.

    Returns:
        (container list, index in container, parent node or None for top
        level), or None if nothing matches
    """
    stack = [(node, tree, index, None) for index, node in reversed(list(enumerate(tree)))]
    while stack:
        node, container, index, parent = stack.pop()
        if is_target(node):
            return container, index, parent
        for child_index in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[child_index], node.children, child_index, node))
    return None


def _locate(tree: Tree, node_id: str) -> Optional[Slot]:
    """Slot of the first node with the id, same match as find_by_id."""
    return _find_slot(tree, lambda node: node.id == node_id)


def _contains(node: Node, node_id: str) -> bool:
    """Check whether node_id names the node itself or one of its descendants."""
    return node.id == node_id or find_by_id(node.children, node_id) is not None


# ============================================================================
# Field updates
# ============================================================================


def update(tree: Tree, node_id: str, fields: Dict[str, Any]) -> Tree:
    """
    Apply a partial update to one node.

    Only keys present in ``fields`` are applied: title, url (None clears it
    and turns the node into a folder), tags (replaced wholesale), icon (None
    clears it) and is_duplicate (forced, no recomputation). Unknown keys are
    ignored. ``last_modified`` is stamped whenever the node is found.

    A missing node is a no-op.
    """
    node = find_by_id(tree, node_id)
    if node is None:
        logger.debug(f"Update skipped, node not found: {node_id}")
        return tree

    for key, value in fields.items():
        if key not in UPDATABLE_FIELDS:
            logger.debug(f"Ignoring unknown update field: {key}")
            continue
        if key == "tags":
            value = list(value)
        setattr(node, key, value)

    node.last_modified = now_ms()
    return tree


def add_tag(tree: Tree, node_id: str, tag: str) -> Tree:
    """Add a tag to a node unless it already has it. Missing node is a no-op."""
    node = find_by_id(tree, node_id)
    if node is not None and tag not in node.tags:
        node.tags.append(tag)
    return tree


def remove_tag(tree: Tree, node_id: str, tag: str) -> Tree:
    """Remove every occurrence of a tag from a node. Missing node is a no-op."""
    node = find_by_id(tree, node_id)
    if node is not None:
        node.tags = [existing for existing in node.tags if existing != tag]
    return tree


def rename_tag(tree: Tree, old_tag: str, new_tag: str) -> Tuple[Tree, int]:
    """
    Rename a tag on every node that carries it.

    Returns:
        (tree, number of nodes changed)
    """
    affected = 0
    for node in iter_nodes(tree):
        if old_tag not in node.tags:
            continue
        renamed: List[str] = []
        for tag in node.tags:
            tag = new_tag if tag == old_tag else tag
            if tag not in renamed:
                renamed.append(tag)
        node.tags = renamed
        affected += 1

    logger.info(f"Renamed tag '{old_tag}' to '{new_tag}' on {affected} node(s)")
    return tree, affected


def delete_tag(tree: Tree, tag: str) -> Tuple[Tree, int]:
    """
    Remove a tag from every node.

    Returns:
        (tree, number of nodes changed)
    """
    affected = 0
    for node in iter_nodes(tree):
        if tag in node.tags:
            node.tags = [existing for existing in node.tags if existing != tag]
            affected += 1

    logger.info(f"Deleted tag '{tag}' from {affected} node(s)")
    return tree, affected


# ============================================================================
# Structural mutation
# ============================================================================


def mint_id(tree: Tree) -> str:
    """Mint a fresh node id from the current time, unique within the tree."""
    base = f"node_{now_ms()}"
    existing = {node.id for node in iter_nodes(tree)}
    candidate = base
    suffix = 1
    while candidate in existing:
        candidate = f"{base}_{suffix}"
        suffix += 1
    return candidate


def add(tree: Tree, parent_id: Optional[str], new_node: Node) -> Tree:
    """
    Insert a new node as the last child of a folder.

    The node gets a freshly minted id. When ``parent_id`` does not name a
    folder in the tree the node is appended at the top level instead.
    """
    new_node.id = mint_id(tree)
    timestamp = now_ms()
    if not new_node.add_date:
        new_node.add_date = timestamp
    new_node.last_modified = timestamp
    for child in new_node.children:
        child.parent_id = new_node.id

    parent = find_by_id(tree, parent_id) if parent_id else None
    if parent is not None and parent.is_folder:
        new_node.parent_id = parent.id
        parent.children.append(new_node)
    else:
        if parent is not None:
            logger.warning(
                f"Parent {parent_id} is a bookmark, adding {new_node.id} at top level"
            )
        else:
            logger.debug(f"Parent {parent_id} not found, adding {new_node.id} at top level")
        new_node.parent_id = None
        tree.append(new_node)

    return tree


def add_folder(tree: Tree, parent_id: Optional[str], title: str) -> Tree:
    """Add an empty folder named ``title`` under ``parent_id``."""
    return add(tree, parent_id, Node(id="", title=title))


def delete(tree: Tree, node_id: str) -> Tree:
    """
    Remove a node and its whole subtree.

    Raises:
        NotFoundError: If no node has the id
    """
    location = _locate(tree, node_id)
    if location is None:
        raise NotFoundError(node_id)

    container, index, _ = location
    removed = container.pop(index)
    logger.debug(f"Deleted {removed.id} ({len(collect_all([removed]))} node(s))")
    return tree


def remove_node(tree: Tree, target: Node) -> Tree:
    """
    Remove this exact node object and its subtree.

    Unlike delete, the match is by identity, so trees that repeat an id
    (two merged parses both start at node_0) lose the intended node.

    Raises:
        NotFoundError: If the node is not in the tree
    """
    location = _find_slot(tree, lambda node: node is target)
    if location is None:
        raise NotFoundError(target.id)

    container, index, _ = location
    container.pop(index)
    logger.debug(f"Removed {target.id} ({len(collect_all([target]))} node(s))")
    return tree


def _detach(tree: Tree, node_id: str) -> Node:
    location = _locate(tree, node_id)
    if location is None:
        raise NotFoundError(node_id)
    container, index, _ = location
    return container.pop(index)


def _attach_top_level(tree: Tree, node: Node) -> None:
    node.parent_id = None
    tree.append(node)


def move(tree: Tree, node_id: str, new_parent_id: Optional[str]) -> Tree:
    """
    Move a subtree to the end of another folder's children.

    ``new_parent_id`` of "root", "" or None means the top level. If the
    destination does not exist the node is re-attached at the top level
    before the error is raised, so it is never lost.

    Raises:
        NotFoundError: If the node or the destination parent is missing
        ValueError: If the destination is the node itself, one of its
            descendants, or a bookmark (checked before anything changes)
    """
    node = find_by_id(tree, node_id)
    if node is None:
        raise NotFoundError(node_id)

    if new_parent_id is None or new_parent_id in TOP_LEVEL_SENTINELS:
        _attach_top_level(tree, _detach(tree, node_id))
        return tree

    if _contains(node, new_parent_id):
        raise ValueError(f"Cannot move {node_id} into itself or its own descendant")

    parent = find_by_id(tree, new_parent_id)
    if parent is not None and not parent.is_folder:
        raise ValueError(f"Cannot move {node_id} into bookmark {new_parent_id}")

    moved = _detach(tree, node_id)
    if parent is None:
        logger.warning(
            f"Move target {new_parent_id} not found, {node_id} placed at top level"
        )
        _attach_top_level(tree, moved)
        raise NotFoundError(new_parent_id, role="parent")

    moved.parent_id = parent.id
    parent.children.append(moved)
    return tree


def move_relative(tree: Tree, node_id: str, sibling_id: str, position: str) -> Tree:
    """
    Move a subtree next to another node.

    Args:
        tree: Tree to modify
        node_id: Node to move
        sibling_id: Node to place it next to
        position: "before" or "after"

    Raises:
        NotFoundError: If the node or the sibling is missing (a node whose
            sibling is missing ends up at the top level)
        ValueError: For an unknown position or a sibling inside the moved
            subtree (checked before anything changes)
    """
    if position not in RELATIVE_POSITIONS:
        raise ValueError(f"Invalid position: {position}. Use 'before' or 'after'.")

    node = find_by_id(tree, node_id)
    if node is None:
        raise NotFoundError(node_id)

    if _contains(node, sibling_id):
        raise ValueError(f"Cannot move {node_id} next to itself or its own descendant")

    moved = _detach(tree, node_id)
    location = _locate(tree, sibling_id)
    if location is None:
        logger.warning(
            f"Sibling {sibling_id} not found, {node_id} placed at top level"
        )
        _attach_top_level(tree, moved)
        raise NotFoundError(sibling_id, role="sibling")

    container, index, parent = location
    moved.parent_id = parent.id if parent is not None else None
    container.insert(index if position == "before" else index + 1, moved)
    return tree
