"""
Exception hierarchy for the bookmark tree toolkit.

All custom exceptions raised by the parser, the tree operations and the
boundary layer are defined here. Import them from
bookmark_tree.utils.error_handler.
"""

from typing import Any, Dict, List, Optional


class BookmarkTreeError(Exception):
    """Base exception for all bookmark tree errors."""

    pass


# ============================================================================
# Parsing Errors
# ============================================================================


class ParseError(BookmarkTreeError):
    """Raised when bookmark markup cannot be read or tokenized at all."""

    pass


# ============================================================================
# Tree Errors
# ============================================================================


class NotFoundError(BookmarkTreeError):
    """
    Raised when a node required by an operation does not exist.

    Attributes:
        node_id: The id that could not be resolved
        role: What the id was used for ("node", "parent" or "sibling")
        tree: Encoded tree after a failed move put the node back at the
            top level (set by the boundary layer, otherwise None)
    """

    def __init__(self, node_id: str, role: str = "node", message: Optional[str] = None):
        self.node_id = node_id
        self.role = role
        self.tree = None
        if message is None:
            message = f"{role.capitalize()} not found: {node_id!r}"
        super().__init__(message)


# ============================================================================
# Boundary Errors
# ============================================================================


class DecodeError(BookmarkTreeError):
    """
    Raised when a boundary payload does not match the expected node shape.

    Attributes:
        errors: Field level problems, one dict per problem with
            "location" and "message" keys
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        self.errors = errors or []
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.errors:
            return base
        details = "; ".join(
            f"{error['location']}: {error['message']}" for error in self.errors
        )
        return f"{base} ({details})"


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(BookmarkTreeError):
    """Configuration-related errors."""

    pass
