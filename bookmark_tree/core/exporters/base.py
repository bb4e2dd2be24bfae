"""
Shared pieces of the tree serializers.

A serializer turns a tree into the text of one document format. Writing that
text to disk, with the checks and error wrapping around it, lives here so
every format behaves the same way.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from ..data_models import Node, is_synthetic_root
from ..tree_operations import Tree, collect_all


@dataclass
class ExportResult:
    """
    Outcome of writing one export file.

    Attributes:
        path: File that was written (extension added when it was missing)
        count: Nodes in the exported tree, folders included
        format_name: Format that produced the file
        file_size: Size of the written file in bytes
        warnings: Irregularities noticed in the tree; the file was still written
        exported_at: When the file was written
    """

    path: Path
    count: int
    format_name: str
    file_size: int = 0
    warnings: List[str] = field(default_factory=list)
    exported_at: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.format_name} export of {self.count} nodes to {self.path}"


class ExportError(Exception):
    """
    A tree could not be serialized or its export file could not be written.

    Attributes:
        message: What went wrong
        format_name: Format being produced, when known
        path: Target file, when known
        original_error: The exception that caused the failure, if any
    """

    def __init__(
        self,
        message: str,
        format_name: Optional[str] = None,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.format_name = format_name
        self.path = path
        self.original_error = original_error
        super().__init__(self._describe())

    def _describe(self) -> str:
        text = f"{self.format_name} export failed: {self.message}" if self.format_name else self.message
        if self.path:
            text += f" [{self.path}]"
        if self.original_error:
            text += f" ({type(self.original_error).__name__}: {self.original_error})"
        return text


class TreeSerializer(ABC):
    """
    Base class of the tree serializers.

    ``serialize`` is pure: it returns the document text and never touches the
    tree. ``export`` writes that text to a file and reports what it wrote.

    Example:
        >>> text = JSONSerializer().serialize(tree)
        >>> result = MarkdownSerializer().export(tree, "bookmarks")  # bookmarks.md
    """

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Display name, e.g. "JSON"."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Extension without the dot, e.g. "md"."""

    @abstractmethod
    def serialize(self, tree: Tree) -> str:
        """Render the tree as a complete document."""

    def export(self, tree: Tree, output_path: Union[str, Path]) -> ExportResult:
        """
        Serialize a tree and write it to a UTF-8 file.

        Missing parent directories are created, and the format's extension is
        appended when the path does not already end with it.

        Raises:
            ExportError: If serialization fails or the file cannot be written
        """
        path = Path(output_path)
        if path.suffix.lower() != f".{self.file_extension}":
            path = path.with_name(f"{path.name}.{self.file_extension}")

        warnings = self.check_tree(tree)

        try:
            content = self.serialize(tree)
        except ExportError:
            raise
        except Exception as e:
            raise self._error("could not serialize tree", path, e) from e

        self._write_text(path, content)

        count = len(collect_all(tree))
        self.logger.info(f"Exported {count} nodes to {path}")
        return ExportResult(
            path=path,
            count=count,
            format_name=self.format_name,
            file_size=path.stat().st_size,
            warnings=warnings,
        )

    def check_tree(self, tree: Tree) -> List[str]:
        """List irregularities worth reporting; an empty list means none."""
        if not tree:
            return ["Tree is empty"]

        nodes = collect_all(tree)
        problems = []

        # Only folders may own children
        with_children = sum(1 for n in nodes if n.is_bookmark and n.children)
        if with_children:
            problems.append(f"{with_children} bookmark(s) have child nodes")

        untitled = sum(1 for n in nodes if not n.title)
        if untitled:
            problems.append(f"{untitled} node(s) have no title")

        return problems

    def document_nodes(self, tree: Tree) -> List[Node]:
        """
        Top-level nodes of the document body.

        A synthetic "Bookmarks" root is replaced by its children so that
        re-parsing the output yields the same shape as the original parse.
        """
        nodes: List[Node] = []
        for node in tree:
            if is_synthetic_root(node):
                nodes.extend(node.children)
            else:
                nodes.append(node)
        return nodes

    @staticmethod
    def join_tags(tags: List[str], separator: str) -> str:
        return separator.join(tags)

    def _write_text(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except PermissionError as e:
            raise self._error("permission denied", path, e) from e
        except OSError as e:
            raise self._error("could not write file", path, e) from e

    def _error(self, message: str, path: Path, cause: Exception) -> ExportError:
        return ExportError(message, format_name=self.format_name, path=path, original_error=cause)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
