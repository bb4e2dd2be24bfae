"""
Merging of bookmark trees.
"""

import logging

from .duplicate_detector import mark_duplicates
from .tree_operations import Tree

logger = logging.getLogger(__name__)


def merge(base: Tree, target: Tree) -> Tree:
    """
    Append ``target``'s top-level nodes to ``base`` and re-derive duplicates.

    Nothing is unified, renamed or removed: same-named folders stay separate
    and ids are kept as they are. Duplicate flags of the combined tree are
    recomputed, so url collisions within or across both inputs are flagged.

    Args:
        base: Tree receiving the nodes (modified in place)
        target: Tree whose top-level nodes are appended

    Returns:
        The combined tree
    """
    if target is base:
        target = [node.copy() for node in target]

    base.extend(target)
    logger.info(
        f"Merged {len(target)} top-level node(s), combined tree has {len(base)}"
    )
    return mark_duplicates(base)
