"""
Duplicate URL detection for bookmark trees.

Groups bookmarks by exact url and keeps the ``is_duplicate`` flags of a tree
in line with its current set of urls.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from .data_models import DuplicateGroup
from .tree_operations import Tree, collect_all, remove_node


@dataclass
class DuplicateDetectionResult:
    """Result of duplicate detection over a tree"""

    total_bookmarks: int
    unique_urls: int
    duplicate_groups: List[DuplicateGroup]
    duplicates_count: int
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "total_bookmarks": self.total_bookmarks,
            "unique_urls": self.unique_urls,
            "duplicate_groups_count": len(self.duplicate_groups),
            "duplicates_count": self.duplicates_count,
            "timestamp": self.timestamp.isoformat(),
        }

    def get_summary(self) -> str:
        """Get human-readable summary"""
        return (
            f"Duplicate Detection Summary:\n"
            f"  Total bookmarks: {self.total_bookmarks}\n"
            f"  Unique URLs: {self.unique_urls}\n"
            f"  Duplicate groups: {len(self.duplicate_groups)}\n"
            f"  Total duplicates: {self.duplicates_count}"
        )


class DuplicateDetector:
    """Detects bookmarks sharing an identical url"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def _group_by_url(self, tree: Tree) -> Dict[str, DuplicateGroup]:
        groups: Dict[str, DuplicateGroup] = {}
        for node in collect_all(tree):
            if node.url is None:
                continue

            if node.url not in groups:
                groups[node.url] = DuplicateGroup(url=node.url)

            groups[node.url].add_node(node)
        return groups

    def find_duplicates(self, tree: Tree) -> List[DuplicateGroup]:
        """
        Find groups of nodes sharing a url.

        Args:
            tree: Tree to inspect

        Returns:
            Groups with two or more members; members follow pre-order
        """
        groups = [
            group for group in self._group_by_url(tree).values() if len(group.nodes) > 1
        ]
        self.logger.debug(f"Found {len(groups)} duplicate group(s)")
        return groups

    def mark_duplicates(self, tree: Tree) -> Tree:
        """
        Recompute ``is_duplicate`` for every node in the tree.

        Flags are overwritten, so nodes that stopped being duplicates are
        cleared. Folders are always cleared.
        """
        duplicated = {
            url for url, group in self._group_by_url(tree).items() if len(group.nodes) > 1
        }

        marked = 0
        for node in collect_all(tree):
            node.is_duplicate = node.url is not None and node.url in duplicated
            marked += node.is_duplicate

        self.logger.info(
            f"Marked {marked} duplicate node(s) across {len(duplicated)} url(s)"
        )
        return tree

    def detect(self, tree: Tree) -> DuplicateDetectionResult:
        """Summarise duplicates in a tree without changing it."""
        groups = self._group_by_url(tree)
        duplicate_groups = [group for group in groups.values() if len(group.nodes) > 1]
        return DuplicateDetectionResult(
            total_bookmarks=sum(len(group.nodes) for group in groups.values()),
            unique_urls=len(groups),
            duplicate_groups=duplicate_groups,
            duplicates_count=sum(len(group.nodes) - 1 for group in duplicate_groups),
        )

    def resolve_duplicate(
        self, tree: Tree, group: DuplicateGroup, keep_id: str
    ) -> Tree:
        """
        Keep one member of a duplicate group and delete the others.

        Members are removed as node objects, not looked up by id, so a
        merged tree with repeated ids only loses the group's own nodes.
        If several members share keep_id, the first one is kept. Duplicate
        flags are recomputed afterwards.

        Raises:
            ValueError: If keep_id is not a member of the group
        """
        kept = next((node for node in group.nodes if node.id == keep_id), None)
        if kept is None:
            raise ValueError(f"Node {keep_id} is not part of the duplicate group")

        removed = [node for node in group.nodes if node is not kept]
        for node in removed:
            remove_node(tree, node)

        self.logger.info(
            f"Resolved duplicates for {group.url}: kept {keep_id}, "
            f"removed {len(removed)}"
        )
        return self.mark_duplicates(tree)


def find_duplicates(tree: Tree) -> List[DuplicateGroup]:
    """Find groups of nodes sharing a url."""
    return DuplicateDetector().find_duplicates(tree)


def mark_duplicates(tree: Tree) -> Tree:
    """Recompute every node's duplicate flag from the tree's current urls."""
    return DuplicateDetector().mark_duplicates(tree)


def resolve_duplicate(tree: Tree, group: DuplicateGroup, keep_id: str) -> Tree:
    """Delete every member of ``group`` except ``keep_id``."""
    return DuplicateDetector().resolve_duplicate(tree, group, keep_id)
