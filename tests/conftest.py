"""
Pytest configuration and shared fixtures for bookmark tree tests.

This module provides common fixtures (sample markup, sample trees and
temporary directories) shared across the test modules.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest

from bookmark_tree.core.data_models import Node
from bookmark_tree.core.netscape_parser import NetscapeHTMLParser
from tests.fixtures.test_data import (
    CHROME_BOOKMARKS_HTML,
    SIBLING_DIALECT_HTML,
    create_sample_tree,
)

# ============================================================================
# Pytest Configuration
# ============================================================================

ENV_OVERRIDES = ("BOOKMARK_TREE_LOG_LEVEL", "BOOKMARK_TREE_PARSER")


def pytest_runtest_setup(item):
    """Set up before each test."""
    # Skip slow tests unless specifically requested
    if "slow" in item.keywords and not item.config.getoption(
        "--runslow", default=False
    ):
        pytest.skip("need --runslow option to run")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--runslow", action="store_true", default=False, help="run slow tests"
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep configuration overrides from the shell out of the tests."""
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)


# ============================================================================
# Temporary Directory and File Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp(prefix="bookmark_tree_test_"))
    try:
        yield temp_path
    finally:
        if temp_path.exists():
            shutil.rmtree(temp_path)


@pytest.fixture
def chrome_html_file(temp_dir: Path) -> Path:
    """Chrome bookmark export written to disk."""
    path = temp_dir / "chrome_bookmarks.html"
    path.write_text(CHROME_BOOKMARKS_HTML, encoding="utf-8")
    return path


@pytest.fixture
def in_temp_dir(temp_dir: Path) -> Generator[Path, None, None]:
    """Run the test with the temporary directory as working directory."""
    previous = os.getcwd()
    os.chdir(temp_dir)
    try:
        yield temp_dir
    finally:
        os.chdir(previous)


# ============================================================================
# Markup and Tree Fixtures
# ============================================================================


@pytest.fixture
def chrome_html() -> str:
    return CHROME_BOOKMARKS_HTML


@pytest.fixture
def sibling_html() -> str:
    return SIBLING_DIALECT_HTML


@pytest.fixture
def parser() -> NetscapeHTMLParser:
    return NetscapeHTMLParser()


@pytest.fixture
def chrome_tree(parser: NetscapeHTMLParser) -> List[Node]:
    """Parsed Chrome export as a one-root tree."""
    return [parser.parse(CHROME_BOOKMARKS_HTML)]


@pytest.fixture
def sample_tree() -> List[Node]:
    """Hand-built tree; see create_sample_tree for its shape."""
    return create_sample_tree()
