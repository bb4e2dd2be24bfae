"""
Unit tests for the duplicate detector module.

Tests exact-url grouping, duplicate flag recomputation and resolution of
duplicate groups.
"""

import pytest

from bookmark_tree.core.data_models import DuplicateGroup, Node
from bookmark_tree.core.duplicate_detector import (
    DuplicateDetectionResult,
    DuplicateDetector,
    find_duplicates,
    mark_duplicates,
    resolve_duplicate,
)
from bookmark_tree.core.merge import merge
from bookmark_tree.core.netscape_parser import parse
from bookmark_tree.core.tree_operations import collect_all, find_by_id, update
from tests.fixtures.test_data import OVERLAP_BASE_HTML, OVERLAP_TARGET_HTML

pytestmark = pytest.mark.unit


@pytest.fixture
def duplicate_detector():
    """Create a duplicate detector with default settings"""
    return DuplicateDetector()


def flags(tree):
    return {node.id: node.is_duplicate for node in collect_all(tree)}


class TestFindDuplicates:
    """Grouping by url"""

    def test_groups_exact_urls(self, sample_tree):
        groups = find_duplicates(sample_tree)

        assert len(groups) == 1
        assert groups[0].url == "https://docs.python.org"
        # Members in pre-order
        assert groups[0].ids == ["b1", "b3"]

    def test_no_duplicates(self):
        tree = [
            Node(id="a", title="A", url="http://a.com"),
            Node(id="b", title="B", url="http://b.com"),
        ]
        assert find_duplicates(tree) == []

    def test_exact_string_equality_only(self):
        tree = [
            Node(id="a", title="A", url="http://a.com"),
            Node(id="b", title="B", url="http://a.com/"),
            Node(id="c", title="C", url="HTTP://A.COM"),
        ]
        assert find_duplicates(tree) == []

    def test_folders_never_grouped(self):
        tree = [Node(id="f1", title="Same"), Node(id="f2", title="Same")]
        assert find_duplicates(tree) == []

    def test_three_way_group(self):
        tree = [Node(id=str(n), title=str(n), url="http://a.com") for n in range(3)]

        groups = find_duplicates(tree)
        assert len(groups) == 1
        assert groups[0].ids == ["0", "1", "2"]

    def test_group_to_dict(self, sample_tree):
        data = find_duplicates(sample_tree)[0].to_dict()

        assert data["url"] == "https://docs.python.org"
        assert [node["id"] for node in data["nodes"]] == ["b1", "b3"]


class TestMarkDuplicates:
    """Flag recomputation"""

    def test_marks_duplicates(self, sample_tree):
        mark_duplicates(sample_tree)

        result = flags(sample_tree)
        assert result["b1"] is True
        assert result["b3"] is True
        assert result["b2"] is False
        assert result["f1"] is False

    def test_clears_stale_flags(self, sample_tree):
        mark_duplicates(sample_tree)
        update(sample_tree, "b3", {"url": "https://docs.python.org/3/"})

        mark_duplicates(sample_tree)

        assert find_by_id(sample_tree, "b1").is_duplicate is False
        assert find_by_id(sample_tree, "b3").is_duplicate is False

    def test_clears_forced_flag_on_folder(self, sample_tree):
        find_by_id(sample_tree, "f2").is_duplicate = True

        mark_duplicates(sample_tree)

        assert find_by_id(sample_tree, "f2").is_duplicate is False

    def test_depends_only_on_url_multiset(self):
        first = [
            Node(id="x", title="X", url="http://a.com"),
            Node(id="f", title="F", children=[Node(id="y", title="Y", url="http://a.com")]),
            Node(id="z", title="Z", url="http://b.com", is_duplicate=True),
        ]
        second = [
            Node(id="z", title="Z", url="http://b.com"),
            Node(id="x", title="X", url="http://a.com", is_duplicate=False),
            Node(id="f", title="F", children=[Node(id="y", title="Y", url="http://a.com")]),
        ]

        assert flags(mark_duplicates(first)) == flags(mark_duplicates(second))

    def test_returns_same_tree(self, sample_tree):
        assert mark_duplicates(sample_tree) is sample_tree


class TestDuplicateDetector:
    """Test the DuplicateDetector class"""

    def test_detect_summary(self, duplicate_detector, chrome_tree):
        result = duplicate_detector.detect(chrome_tree)

        assert isinstance(result, DuplicateDetectionResult)
        assert result.total_bookmarks == 4
        assert result.unique_urls == 3
        assert len(result.duplicate_groups) == 1
        assert result.duplicates_count == 1

        summary = result.get_summary()
        assert "Total bookmarks: 4" in summary
        assert "Duplicate groups: 1" in summary

    def test_detect_does_not_mark(self, duplicate_detector, chrome_tree):
        duplicate_detector.detect(chrome_tree)

        assert not any(flags(chrome_tree).values())

    def test_result_to_dict(self, duplicate_detector, sample_tree):
        data = duplicate_detector.detect(sample_tree).to_dict()

        assert data["duplicate_groups_count"] == 1
        assert data["duplicates_count"] == 1
        assert "timestamp" in data


class TestResolveDuplicate:
    def test_keeps_one(self, sample_tree):
        group = find_duplicates(sample_tree)[0]

        resolve_duplicate(sample_tree, group, "b3")

        assert find_by_id(sample_tree, "b1") is None
        kept = find_by_id(sample_tree, "b3")
        assert kept is not None
        assert kept.is_duplicate is False

    def test_keep_id_outside_group(self, sample_tree):
        group = find_duplicates(sample_tree)[0]

        with pytest.raises(ValueError):
            resolve_duplicate(sample_tree, group, "b4")

        assert find_by_id(sample_tree, "b1") is not None

    def test_other_groups_keep_their_flags(self):
        tree = [
            Node(id="a1", title="A", url="http://a.com"),
            Node(id="a2", title="A", url="http://a.com"),
            Node(id="b1", title="B", url="http://b.com"),
            Node(id="b2", title="B", url="http://b.com"),
        ]
        mark_duplicates(tree)
        group = DuplicateGroup(url="http://a.com", nodes=[tree[0], tree[1]])

        resolve_duplicate(tree, group, "a1")

        assert flags(tree) == {"a1": False, "b1": True, "b2": True}

    def test_merged_tree_with_repeated_ids(self):
        merged = merge([parse(OVERLAP_BASE_HTML)], [parse(OVERLAP_TARGET_HTML)])
        group = find_duplicates(merged)[0]
        assert group.ids == ["node_0", "node_1"]

        resolve_duplicate(merged, group, "node_0")

        titles = [node.title for node in collect_all(merged)]
        assert titles == ["Bookmarks", "A-dup", "A-precious", "Bookmarks", "B-other"]
        assert not any(node.is_duplicate for node in collect_all(merged))

    def test_repeated_keep_id_keeps_first_member(self):
        first = Node(id="x", title="First", url="http://a.com")
        second = Node(id="x", title="Second", url="http://a.com")
        tree = [first, second]
        group = find_duplicates(tree)[0]

        resolve_duplicate(tree, group, "x")

        assert tree == [first]
        assert tree[0] is first
