"""
JSON tree serializer.

Dumps the full tree with every node field, using the boundary's camelCase
names, and reads such documents back.
"""

import json
from typing import Union

from ..payload import decode_tree_json, encode_tree
from ..tree_operations import Tree
from .base import TreeSerializer


class JSONSerializer(TreeSerializer):
    """
    Serialize a tree to pretty-printed JSON.

    The document is a list of top-level node objects, each carrying its
    children, so load() of serialize() reproduces an equivalent tree.

    Example:
        >>> serializer = JSONSerializer(indent=2)
        >>> text = serializer.serialize(tree)
        >>> assert serializer.load(text) == tree
    """

    def __init__(
        self,
        indent: int = 2,
        ensure_ascii: bool = False,
        sort_keys: bool = False,
    ):
        """
        Initialize the JSON serializer.

        Args:
            indent: Number of spaces for indentation (0 for compact output)
            ensure_ascii: Whether to escape non-ASCII characters
            sort_keys: Whether to sort object keys
        """
        super().__init__()
        self.indent = indent or None
        self.ensure_ascii = ensure_ascii
        self.sort_keys = sort_keys

    @property
    def format_name(self) -> str:
        return "JSON"

    @property
    def file_extension(self) -> str:
        return "json"

    def serialize(self, tree: Tree) -> str:
        return json.dumps(
            encode_tree(tree),
            indent=self.indent,
            ensure_ascii=self.ensure_ascii,
            sort_keys=self.sort_keys,
        )

    def load(self, text: Union[str, bytes]) -> Tree:
        """
        Read a tree back from a JSON document.

        Raises:
            DecodeError: If the text is not a valid tree document
        """
        tree = decode_tree_json(text)
        self.logger.debug(f"Loaded {len(tree)} top-level node(s) from JSON")
        return tree
