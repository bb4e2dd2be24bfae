"""
Command-line interface for the Bookmark Tree toolkit.

Converts bookmark exports between formats, reports duplicates, searches,
merges exports and prints tree statistics.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from bookmark_tree import __version__
from bookmark_tree.config.pydantic_config import (
    BookmarkTreeConfig,
    ConfigurationManager,
    ExportConfig,
)
from bookmark_tree.core.duplicate_detector import DuplicateDetector
from bookmark_tree.core.exporters import (
    CSVSerializer,
    ExportError,
    HTMLSerializer,
    JSONSerializer,
    MarkdownSerializer,
    TreeSerializer,
)
from bookmark_tree.core.merge import merge
from bookmark_tree.core.netscape_parser import NetscapeHTMLParser
from bookmark_tree.core.search import search
from bookmark_tree.core.tree_operations import Tree, find_by_id
from bookmark_tree.core.tree_utils import get_node_path_string, get_path_string_for, tree_stats
from bookmark_tree.utils.error_handler import BookmarkTreeError, ParseError
from bookmark_tree.utils.logging_setup import setup_logging

FORMATS = ["html", "json", "csv", "markdown"]


class CLIInterface:
    """Command line interface for bookmark tree operations."""

    def __init__(self):
        self.parser = self._create_parser()
        self.logger = logging.getLogger(__name__)

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser with one sub-command per operation."""
        parser = argparse.ArgumentParser(
            prog="bookmark-tree",
            description="Bookmark Tree - parse, search, deduplicate, merge "
            "and convert browser bookmark exports",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  bookmark-tree convert bookmarks.html --format json -o bookmarks.json
  bookmark-tree convert bookmarks.json --format markdown
  bookmark-tree duplicates bookmarks.html
  bookmark-tree search bookmarks.html "tag:work"
  bookmark-tree merge chrome.html firefox.html -o merged.html
  bookmark-tree stats bookmarks.html

Input files ending in .json are read as JSON exports written by this tool;
anything else is parsed as a Netscape bookmark HTML file.

Configuration:
  Settings are read from bookmark_tree.toml (or .json) in the current
  directory, or from the file given with --config. Environment variables
  BOOKMARK_TREE_LOG_LEVEL and BOOKMARK_TREE_PARSER override the file.
            """,
        )

        parser.add_argument(
            "--version", "-V", action="version", version=f"%(prog)s {__version__}"
        )
        parser.add_argument(
            "--config",
            "-c",
            help="Configuration file (TOML or JSON)",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable debug logging",
        )
        parser.add_argument(
            "--create-config",
            metavar="PATH",
            help="Write a sample configuration file (TOML, or JSON for a .json path) and exit",
        )

        subparsers = parser.add_subparsers(dest="command")

        convert = subparsers.add_parser("convert", help="Convert a bookmark file")
        convert.add_argument("input", help="Input bookmark file")
        convert.add_argument(
            "--format", "-f", choices=FORMATS, help="Output format (default from config)"
        )
        convert.add_argument(
            "--output", "-o", help="Output file (printed to stdout when omitted)"
        )

        duplicates = subparsers.add_parser(
            "duplicates", help="List bookmarks sharing a url"
        )
        duplicates.add_argument("input", help="Input bookmark file")

        search_cmd = subparsers.add_parser("search", help="Search titles, urls and tags")
        search_cmd.add_argument("input", help="Input bookmark file")
        search_cmd.add_argument("query", help='Search text; prefix with "tag:" for tags only')

        merge_cmd = subparsers.add_parser("merge", help="Merge two bookmark files")
        merge_cmd.add_argument("base", help="Base bookmark file")
        merge_cmd.add_argument("target", help="Bookmark file appended to the base")
        merge_cmd.add_argument(
            "--format", "-f", choices=FORMATS, help="Output format (default from config)"
        )
        merge_cmd.add_argument(
            "--output", "-o", help="Output file (printed to stdout when omitted)"
        )

        stats = subparsers.add_parser("stats", help="Print tree statistics")
        stats.add_argument("input", help="Input bookmark file")

        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command line arguments."""
        return self.parser.parse_args(args)

    def process_arguments(self, parsed_args: argparse.Namespace) -> BookmarkTreeConfig:
        """
        Load configuration, apply command line overrides and set up logging.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        manager = ConfigurationManager(parsed_args.config)
        manager.update_from_cli_args(
            {
                "verbose": parsed_args.verbose,
                "format": getattr(parsed_args, "format", None),
            }
        )
        setup_logging(manager.config.logging)
        return manager.config

    def _handle_create_config(self, output: str) -> int:
        """Handle creation of a sample configuration file."""
        output_path = Path(output)
        config_format = "json" if output_path.suffix.lower() == ".json" else "toml"

        try:
            manager = ConfigurationManager()
            manager.create_sample_config(output_path, config_format)
        except (BookmarkTreeError, OSError) as e:
            print(f"Error creating configuration file: {e}", file=sys.stderr)
            return 1

        print(f"Created configuration file: {output_path}")
        return 0

    def load_tree(self, input_path: str, config: BookmarkTreeConfig) -> Tree:
        """
        Read a bookmark file into a tree.

        Raises:
            ParseError: If the file cannot be read or parsed
            DecodeError: If a JSON file does not hold a valid tree
        """
        path = Path(input_path)
        if path.suffix.lower() == ".json":
            try:
                raw = path.read_bytes()
            except OSError as e:
                raise ParseError(f"Error reading file {path}: {e}") from e
            return JSONSerializer().load(raw)

        parser = NetscapeHTMLParser(
            features=config.parser.features,
            folder_tag=config.parser.folder_tag,
            item_tag=config.parser.item_tag,
            list_tag=config.parser.list_tag,
        )
        return [parser.parse_file(path)]

    def create_serializer(self, format_name: str, export_config: ExportConfig) -> TreeSerializer:
        """Build the serializer for a format from the export settings."""
        if format_name == "html":
            return HTMLSerializer(title=export_config.html_title)
        if format_name == "json":
            return JSONSerializer(indent=export_config.json_indent)
        if format_name == "csv":
            return CSVSerializer(tag_separator=export_config.csv_tag_separator)
        if format_name == "markdown":
            return MarkdownSerializer()
        raise ValueError(f"Unsupported export format: {format_name}")

    def write_tree(
        self, tree: Tree, format_name: Optional[str], output: Optional[str], config: BookmarkTreeConfig
    ) -> int:
        """Serialize a tree to a file, or to stdout when no file is given."""
        serializer = self.create_serializer(
            format_name or config.export.default_format, config.export
        )

        if output is None:
            sys.stdout.write(serializer.serialize(tree))
            return 0

        result = serializer.export(tree, output)
        for warning in result.warnings:
            self.logger.warning(warning)
        print(f"Wrote {result.count} nodes to {result.path} ({result.format_name})")
        return 0

    def _run_convert(self, args: argparse.Namespace, config: BookmarkTreeConfig) -> int:
        tree = self.load_tree(args.input, config)
        return self.write_tree(tree, args.format, args.output, config)

    def _run_duplicates(self, args: argparse.Namespace, config: BookmarkTreeConfig) -> int:
        tree = self.load_tree(args.input, config)
        result = DuplicateDetector().detect(tree)

        print(result.get_summary())
        for group in result.duplicate_groups:
            print()
            print(group.url)
            for node in group.nodes:
                print(f"  {node.id}  {get_path_string_for(tree, node)}")
        return 0

    def _run_search(self, args: argparse.Namespace, config: BookmarkTreeConfig) -> int:
        tree = self.load_tree(args.input, config)
        matches = search(tree, args.query)

        for node_id in matches:
            node = find_by_id(tree, node_id)
            url = f"  {node.url}" if node.url else ""
            print(f"{node_id}  {get_node_path_string(tree, node_id)}{url}")
        print(f"{len(matches)} match(es)")
        return 0

    def _run_merge(self, args: argparse.Namespace, config: BookmarkTreeConfig) -> int:
        base = self.load_tree(args.base, config)
        target = self.load_tree(args.target, config)
        merged = merge(base, target)
        return self.write_tree(merged, args.format, args.output, config)

    def _run_stats(self, args: argparse.Namespace, config: BookmarkTreeConfig) -> int:
        tree = self.load_tree(args.input, config)
        stats = tree_stats(tree)

        print(f"Total nodes: {stats.total_nodes}")
        print(f"Bookmarks: {stats.bookmarks}")
        print(f"Folders: {stats.folders}")
        print(f"Duplicates: {stats.duplicates}")
        print(f"Unique tags: {stats.unique_tags}")
        print(f"Max depth: {stats.max_depth}")
        return 0

    def run(self, args=None) -> int:
        """Execute CLI interface."""
        parsed_args = self.parse_args(args)

        if parsed_args.create_config:
            return self._handle_create_config(parsed_args.create_config)

        if not parsed_args.command:
            self.parser.print_help(sys.stderr)
            return 1

        commands = {
            "convert": self._run_convert,
            "duplicates": self._run_duplicates,
            "search": self._run_search,
            "merge": self._run_merge,
            "stats": self._run_stats,
        }

        try:
            config = self.process_arguments(parsed_args)
            self.logger.debug(f"Running command: {parsed_args.command}")
            return commands[parsed_args.command](parsed_args, config)

        except (BookmarkTreeError, ExportError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            self.logger.exception("Unexpected error in CLI")
            return 1


def main(args=None):
    """Main entry point for the CLI."""
    cli = CLIInterface()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
