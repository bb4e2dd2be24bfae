"""
CSV tree serializer.

Flattens the tree (pre-order, folders included) into one row per node.
"""

import csv

import pandas as pd

from ..tree_operations import Tree, collect_all
from .base import TreeSerializer


class CSVSerializer(TreeSerializer):
    """
    Serialize a tree to CSV.

    Columns are fixed: Title, URL (empty for folders), Add Date
    (milliseconds), Tags and Type ("Folder" or "Bookmark"). The header row
    is always written, even for an empty tree. Text fields are quoted, with
    embedded double quotes doubled.
    """

    COLUMNS = ["Title", "URL", "Add Date", "Tags", "Type"]

    def __init__(self, tag_separator: str = ";"):
        """
        Initialize the CSV serializer.

        Args:
            tag_separator: String placed between tags in the Tags column
        """
        super().__init__()
        self.tag_separator = tag_separator

    @property
    def format_name(self) -> str:
        return "CSV"

    @property
    def file_extension(self) -> str:
        return "csv"

    def serialize(self, tree: Tree) -> str:
        df = self.tree_to_dataframe(tree)
        body = df.to_csv(
            index=False,
            header=False,
            quoting=csv.QUOTE_NONNUMERIC,
            lineterminator="\n",
        )
        return ",".join(self.COLUMNS) + "\n" + body

    def tree_to_dataframe(self, tree: Tree) -> pd.DataFrame:
        """
        Flatten a tree into a DataFrame with the export columns.

        Args:
            tree: Tree to flatten

        Returns:
            DataFrame with one row per node, in pre-order
        """
        rows = [
            {
                "Title": node.title,
                "URL": node.url or "",
                "Add Date": node.add_date,
                "Tags": self.join_tags(node.tags, self.tag_separator),
                "Type": "Folder" if node.is_folder else "Bookmark",
            }
            for node in collect_all(tree)
        ]

        df = pd.DataFrame(rows, columns=self.COLUMNS)
        self.logger.debug(f"Flattened tree into {len(df)} CSV rows")
        return df
