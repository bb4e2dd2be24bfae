"""
Netscape bookmark HTML serializer.

Generates bookmark files that browsers can import, following the
Netscape-Bookmark-file-1 format. Dates are written in seconds, the unit the
parser reads back.
"""

from typing import List, Tuple, Union

from ..data_models import Node
from ..tree_operations import Tree
from .base import TreeSerializer

INDENT = "    "


class HTMLSerializer(TreeSerializer):
    """
    Serialize a tree to a Netscape bookmark file.

    Folders become <DT><H3> headings followed by a nested <DL> list,
    bookmarks become <DT><A> links. Output is deterministic for a given
    tree.
    """

    def __init__(self, title: str = "Bookmarks"):
        """
        Initialize the HTML serializer.

        Args:
            title: Text for the document's TITLE and H1 elements
        """
        super().__init__()
        self.title = title

    @property
    def format_name(self) -> str:
        return "HTML"

    @property
    def file_extension(self) -> str:
        return "html"

    def serialize(self, tree: Tree) -> str:
        """
        Generate the complete HTML document.

        Args:
            tree: List of top-level nodes

        Returns:
            Complete HTML content as string
        """
        html_parts = [
            "<!DOCTYPE NETSCAPE-Bookmark-file-1>",
            "<!-- This is an automatically generated file.",
            "     It will be read and overwritten.",
            "     DO NOT EDIT! -->",
            '<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">',
            f"<TITLE>{self._escape_html(self.title)}</TITLE>",
            f"<H1>{self._escape_html(self.title)}</H1>",
            "<DL><p>",
        ]

        html_parts.extend(self._generate_body(self.document_nodes(tree)))

        html_parts.append("</DL><p>")

        return "\n".join(html_parts) + "\n"

    def _generate_body(self, nodes: List[Node]) -> List[str]:
        """
        Walk the nodes in pre-order and emit one line per element.

        Args:
            nodes: Nodes forming the top list of the document

        Returns:
            List of HTML lines
        """
        html_lines = []
        stack: List[Tuple[Union[Node, None], int]] = [
            (node, 1) for node in reversed(nodes)
        ]

        while stack:
            node, depth = stack.pop()
            indent = INDENT * depth

            if node is None:
                # Closing marker for a folder list
                html_lines.append(f"{indent}</DL><p>")
                continue

            if node.is_folder:
                html_lines.append(f"{indent}<DT>{self._generate_folder_heading(node)}")
                html_lines.append(f"{indent}<DL><p>")
                stack.append((None, depth))
                stack.extend((child, depth + 1) for child in reversed(node.children))
            else:
                if node.children:
                    self.logger.warning(
                        f"Bookmark {node.id} has {len(node.children)} child node(s), "
                        f"children are not written"
                    )
                html_lines.append(f"{indent}<DT>{self._generate_bookmark_html(node)}")

        return html_lines

    def _generate_folder_heading(self, folder: Node) -> str:
        """Generate the H3 heading for a folder."""
        attrs = self._date_attributes(folder)
        return f'<H3 {" ".join(attrs)}>{self._escape_html(folder.title)}</H3>'

    def _generate_bookmark_html(self, bookmark: Node) -> str:
        """
        Generate HTML for a single bookmark.

        Args:
            bookmark: Bookmark node to generate HTML for

        Returns:
            HTML anchor tag as string
        """
        attrs = [f'HREF="{self._escape_html(bookmark.url)}"']
        attrs.extend(self._date_attributes(bookmark))

        if bookmark.icon:
            attrs.append(f'ICON="{self._escape_html(bookmark.icon)}"')

        if bookmark.tags:
            attrs.append(f'TAGS="{self._escape_html(self.join_tags(bookmark.tags, ","))}"')

        return f"<A {' '.join(attrs)}>{self._escape_html(bookmark.title)}</A>"

    def _date_attributes(self, node: Node) -> List[str]:
        """ADD_DATE and LAST_MODIFIED attributes, converted to seconds."""
        attrs = [f'ADD_DATE="{node.add_date // 1000}"']
        if node.last_modified:
            attrs.append(f'LAST_MODIFIED="{node.last_modified // 1000}"')
        return attrs

    def _escape_html(self, text: str) -> str:
        """
        Escape HTML special characters.

        Args:
            text: Text to escape

        Returns:
            HTML-escaped text
        """
        if not text:
            return ""

        text = text.replace("&", "&amp;")
        text = text.replace("<", "&lt;")
        text = text.replace(">", "&gt;")
        text = text.replace('"', "&quot;")
        text = text.replace("'", "&#x27;")

        return text
