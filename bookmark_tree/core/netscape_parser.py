"""
Netscape bookmark file parser.

This module rebuilds the folder/bookmark hierarchy of a Netscape bookmark
export (the HTML format written by Chrome, Firefox, Edge and Safari). The
parser is tolerant: unclosed tags, stray text and unknown elements degrade
to dropped items rather than errors.

Exports disagree on where a folder's contents live. Most browsers nest the
content <DL> inside the folder's <DT>; older Netscape-style files place it
as the next sibling of the <DT>. Both layouts are handled.
"""

import codecs
import itertools
import logging
import re
from pathlib import Path
from typing import Iterator, List, Optional, Union

import chardet
from bs4 import BeautifulSoup, FeatureNotFound, Tag

from ..utils.error_handler import ParseError
from .data_models import ROOT_ID, Node, make_root


class NetscapeHTMLParser:
    """
    Parser for Netscape bookmark exports.

    Every created node receives an id "node_<n>" from a counter that starts
    at 0 for each parse call and is shared across the whole descent, so ids
    follow document (pre-order) order. The result is always wrapped in a
    synthetic root with id "root" and title "Bookmarks".
    """

    DOCTYPE_PATTERN = r"<!DOCTYPE\s+NETSCAPE-Bookmark-file-1>"
    SUPPORTED_ENCODINGS = ["utf-8", "utf-16", "iso-8859-1"]

    def __init__(
        self,
        features: str = "html5lib",
        folder_tag: str = "h3",
        item_tag: str = "dt",
        list_tag: str = "dl",
        link_tag: str = "a",
    ):
        """
        Initialize the parser.

        Args:
            features: BeautifulSoup tree builder ("html5lib" or "html.parser")
            folder_tag: Element marking a folder heading
            item_tag: Element wrapping a single list item
            list_tag: Element defining a list of items
            link_tag: Element carrying a bookmark link
        """
        self.logger = logging.getLogger(__name__)
        self.features = features
        self.folder_tag = folder_tag.lower()
        self.item_tag = item_tag.lower()
        self.list_tag = list_tag.lower()
        self.link_tag = link_tag.lower()

    def parse(self, markup: Union[str, bytes]) -> Node:
        """
        Parse bookmark markup into a tree.

        Args:
            markup: Netscape bookmark HTML, as text or raw bytes

        Returns:
            Synthetic root node holding the top-level items

        Raises:
            ParseError: If the input cannot be decoded or tokenized at all
        """
        if isinstance(markup, bytes):
            markup = self._decode(markup)
        elif not isinstance(markup, str):
            raise ParseError(
                f"Bookmark markup must be text, got {type(markup).__name__}"
            )

        soup = self._build_soup(markup)

        root = make_root()
        outer_list = soup.find(self.list_tag)
        if outer_list is None:
            self.logger.warning("No bookmark list found, returning empty tree")
            return root

        ids = itertools.count()
        for item in self._list_items(outer_list):
            node = self._process_item(item, ROOT_ID, ids)
            if node is not None:
                root.children.append(node)

        self.logger.info(
            f"Parsed {next(ids)} nodes ({len(root.children)} top-level items)"
        )
        return root

    def parse_file(self, file_path: Union[str, Path]) -> Node:
        """
        Read and parse a bookmark export file.

        Args:
            file_path: Path to the HTML bookmark file

        Returns:
            Synthetic root node holding the top-level items

        Raises:
            ParseError: If the file cannot be read or parsed
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            raw = file_path.read_bytes()
        except OSError as e:
            raise ParseError(f"Error reading file {file_path}: {e}") from e

        self.logger.debug(f"Read {len(raw)} bytes from {file_path}")
        return self.parse(raw)

    def validate_markup(self, markup: str) -> bool:
        """
        Check if text looks like a Netscape bookmark export.

        Args:
            markup: Text to check

        Returns:
            True if the DOCTYPE or a bookmark list is present
        """
        if not isinstance(markup, str):
            return False
        if re.search(self.DOCTYPE_PATTERN, markup, re.IGNORECASE):
            return True
        return re.search(rf"<{self.list_tag}[\s>]", markup, re.IGNORECASE) is not None

    def _decode(self, raw: bytes) -> str:
        """
        Decode raw bytes with encoding detection.

        Raises:
            ParseError: If no supported encoding can decode the data
        """
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass

        candidates = []
        if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
            candidates.append("utf-16")
        detected = chardet.detect(raw).get("encoding")
        if detected:
            candidates.append(detected)
        # iso-8859-1 maps every byte, so it is the last resort
        candidates.append(self.SUPPORTED_ENCODINGS[-1])

        for encoding in candidates:
            try:
                text = raw.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                continue
            self.logger.debug(f"Decoded bookmark markup as {encoding}")
            return text

        raise ParseError("Unable to decode bookmark markup with supported encodings")

    def _build_soup(self, markup: str) -> BeautifulSoup:
        try:
            return BeautifulSoup(markup, self.features)
        except FeatureNotFound as e:
            raise ParseError(f"HTML tree builder not available: {self.features}") from e
        except Exception as e:
            raise ParseError(f"Unable to tokenize bookmark markup: {e}") from e

    def _list_items(self, list_element: Tag) -> Iterator[Tag]:
        """Direct item children of a list element, in document order."""
        for child in list_element.children:
            if isinstance(child, Tag) and child.name == self.item_tag:
                yield child

    def _process_item(
        self, item: Tag, parent_id: str, ids: Iterator[int]
    ) -> Optional[Node]:
        """
        Turn one list item into a node.

        Args:
            item: The list item element
            parent_id: Id of the node that will own the result
            ids: Shared id counter for this parse call

        Returns:
            Folder or bookmark node, or None if the item is neither
        """
        heading = item.find(self.folder_tag)
        if heading is not None:
            add_date = self._parse_timestamp(heading.get("add_date"))
            folder = Node(
                id=f"node_{next(ids)}",
                title=heading.get_text(),
                add_date=add_date,
                last_modified=self._parse_timestamp(heading.get("last_modified"))
                or add_date,
                parent_id=parent_id,
            )

            content_list = self._find_content_list(item)
            if content_list is not None:
                for child_item in self._list_items(content_list):
                    child = self._process_item(child_item, folder.id, ids)
                    if child is not None:
                        folder.children.append(child)
            return folder

        link = item.find(self.link_tag)
        if link is not None:
            add_date = self._parse_timestamp(link.get("add_date"))
            return Node(
                id=f"node_{next(ids)}",
                title=link.get_text(),
                url=link.get("href"),
                add_date=add_date,
                last_modified=self._parse_timestamp(link.get("last_modified"))
                or add_date,
                icon=link.get("icon"),
                tags=self._parse_tags(link.get("tags")),
                parent_id=parent_id,
            )

        self.logger.debug("Dropping list item with neither heading nor link")
        return None

    def _find_content_list(self, item: Tag) -> Optional[Tag]:
        """
        Find the list holding a folder's contents.

        Looks inside the folder item first. Failing that, scans the item's
        following siblings, skipping text, and stops at the first element
        that starts another item or heading.
        """
        for child in item.children:
            if isinstance(child, Tag) and child.name == self.list_tag:
                return child

        for sibling in item.next_siblings:
            if not isinstance(sibling, Tag):
                continue
            if sibling.name == self.list_tag:
                return sibling
            if sibling.name in (self.item_tag, self.folder_tag):
                return None

        return None

    def _parse_timestamp(self, value: Optional[str]) -> int:
        """
        Convert a seconds timestamp attribute to milliseconds.

        Absent, unparseable or negative values become 0.
        """
        if not value:
            return 0

        try:
            seconds = int(str(value).strip())
        except ValueError:
            self.logger.debug(f"Invalid timestamp format: {value!r}")
            return 0

        return seconds * 1000 if seconds >= 0 else 0

    @staticmethod
    def _parse_tags(value: Optional[str]) -> List[str]:
        """Split a comma separated TAGS attribute, dropping blanks and repeats."""
        if not value:
            return []

        tags: List[str] = []
        for tag in str(value).split(","):
            tag = tag.strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags


def parse(markup: Union[str, bytes], features: str = "html5lib") -> Node:
    """Parse bookmark markup with a default-configured parser."""
    return NetscapeHTMLParser(features=features).parse(markup)
