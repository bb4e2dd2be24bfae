"""
Markdown tree serializer.

Renders folders as headings and bookmarks as a nested link list, suitable
for notes and documentation.
"""

from typing import List, Tuple

from ..data_models import Node
from ..tree_operations import Tree
from .base import TreeSerializer

# Markdown has no heading deeper than six
MAX_HEADING_LEVEL = 6


class MarkdownSerializer(TreeSerializer):
    """
    Serialize a tree to Markdown.

    The document opens with a "# Bookmarks" heading. A folder at depth d
    becomes a heading of level d + 2, a bookmark becomes a "- [title](url)"
    list item indented by two spaces per depth level. Depth counts from the
    top level of the tree, so a synthetic root is written as the "##"
    heading and its folders start at "###".
    """

    def __init__(self, title: str = "Bookmarks"):
        super().__init__()
        self.title = title

    @property
    def format_name(self) -> str:
        return "Markdown"

    @property
    def file_extension(self) -> str:
        return "md"

    def serialize(self, tree: Tree) -> str:
        lines = [f"# {self.title}", ""]

        stack: List[Tuple[Node, int]] = [(node, 0) for node in reversed(tree)]
        while stack:
            node, depth = stack.pop()
            if node.is_folder:
                # Keep a heading apart from the list above it
                if lines[-1]:
                    lines.append("")
                lines.append(f"{self._heading(depth)} {node.title}")
                lines.append("")
                stack.extend((child, depth + 1) for child in reversed(node.children))
            else:
                lines.append(f"{'  ' * depth}- {self._format_link(node)}")

        return "\n".join(lines) + "\n"

    def _heading(self, depth: int) -> str:
        return "#" * min(depth + 2, MAX_HEADING_LEVEL)

    def _format_link(self, bookmark: Node) -> str:
        title = bookmark.title.replace("[", "\\[").replace("]", "\\]")
        url = (bookmark.url or "").replace(" ", "%20").replace(")", "%29")
        return f"[{title}]({url})"
