"""
Data models for the bookmark tree toolkit.

This module defines the node structure used to represent a bookmark
hierarchy, plus the read-only reporting types produced by queries over it.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Id and title of the synthetic node wrapping a parsed document
ROOT_ID = "root"
ROOT_TITLE = "Bookmarks"


def now_ms() -> int:
    """Current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass
class Node:
    """
    A folder or a bookmark in the tree.

    A node is a folder when ``url`` is None. Folders own their children
    exclusively; bookmarks never have children. ``is_duplicate`` is a
    derived flag and is only trustworthy right after duplicate flags were
    recomputed (mark_duplicates, merge).
    """

    id: str
    title: str = ""
    url: Optional[str] = None
    add_date: int = 0
    last_modified: int = 0
    icon: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    is_duplicate: bool = False
    children: List["Node"] = field(default_factory=list)
    parent_id: Optional[str] = None

    @property
    def is_folder(self) -> bool:
        return self.url is None

    @property
    def is_bookmark(self) -> bool:
        return self.url is not None

    def _shallow_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id}
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        data.update(
            {
                "title": self.title,
                "url": self.url,
                "addDate": self.add_date,
                "lastModified": self.last_modified,
                "icon": self.icon,
                "tags": list(self.tags),
                "isDuplicate": self.is_duplicate,
                "children": [],
            }
        )
        return data

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the node and its subtree to a boundary dictionary.

        Returns:
            Nested dictionary using the camelCase field names
        """
        root = self._shallow_dict()
        stack = [(self, root)]
        while stack:
            node, data = stack.pop()
            for child in node.children:
                child_data = child._shallow_dict()
                data["children"].append(child_data)
                stack.append((child, child_data))
        return root

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        """
        Create a node (and subtree) from a boundary dictionary.

        Raises:
            DecodeError: If the dictionary does not match the node shape
        """
        from .payload import decode_node

        return decode_node(data)

    def copy(self) -> "Node":
        """Create a deep copy of this node and its subtree."""
        clone = self.shallow_copy()
        stack = [(self, clone)]
        while stack:
            original, copied = stack.pop()
            for child in original.children:
                child_copy = child.shallow_copy()
                copied.children.append(child_copy)
                stack.append((child, child_copy))
        return clone

    def shallow_copy(self) -> "Node":
        """Copy of this node's own fields, without children."""
        return Node(
            id=self.id,
            title=self.title,
            url=self.url,
            add_date=self.add_date,
            last_modified=self.last_modified,
            icon=self.icon,
            tags=list(self.tags),
            is_duplicate=self.is_duplicate,
            parent_id=self.parent_id,
        )

    def __repr__(self) -> str:
        kind = "Folder" if self.is_folder else "Bookmark"
        return (
            f"Node({kind}, id={self.id!r}, title={self.title!r}, "
            f"children={len(self.children)})"
        )


def make_root(children: Optional[List[Node]] = None) -> Node:
    """Create the synthetic "Bookmarks" root wrapping a parsed document."""
    return Node(id=ROOT_ID, title=ROOT_TITLE, children=children or [])


def is_synthetic_root(node: Node) -> bool:
    """Check whether a node is the synthetic root produced by the parser."""
    return node.id == ROOT_ID and node.is_folder


@dataclass
class DuplicateGroup:
    """Nodes sharing an identical url. Reporting only, never stored in a tree."""

    url: str
    nodes: List[Node] = field(default_factory=list)

    def add_node(self, node: Node):
        self.nodes.append(node)

    @property
    def ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "nodes": [node.to_dict() for node in self.nodes]}


@dataclass
class TreeStats:
    """Summary counts for a tree."""

    total_nodes: int = 0
    bookmarks: int = 0
    folders: int = 0
    duplicates: int = 0
    unique_tags: int = 0
    max_depth: int = 0

    def __str__(self) -> str:
        return (
            f"TreeStats("
            f"nodes={self.total_nodes}, "
            f"bookmarks={self.bookmarks}, "
            f"folders={self.folders}, "
            f"duplicates={self.duplicates}, "
            f"tags={self.unique_tags}, "
            f"depth={self.max_depth})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "totalNodes": self.total_nodes,
            "bookmarks": self.bookmarks,
            "folders": self.folders,
            "duplicates": self.duplicates,
            "uniqueTags": self.unique_tags,
            "maxDepth": self.max_depth,
        }
