"""
Unit tests for tree search.
"""

import pytest

from bookmark_tree.core.data_models import Node
from bookmark_tree.core.search import search

pytestmark = pytest.mark.unit


class TestSearch:
    """Substring search over titles, urls and tags"""

    def setup_method(self):
        self.tree = [
            Node(
                id="root",
                title="Bookmarks",
                children=[
                    Node(
                        id="f1",
                        title="Work Projects",
                        children=[
                            Node(
                                id="b1",
                                title="Tracker",
                                url="https://tracker.example.com",
                                tags=["Work", "Personal"],
                            ),
                            Node(id="b2", title="Wiki", url="https://wiki.example.com/work"),
                        ],
                    ),
                    Node(id="b3", title="Recipes", url="https://food.example.org", tags=["cooking"]),
                    Node(id="f2", title="Reading", tags=["homework"]),
                ],
            )
        ]

    def test_tag_prefix_matches_tags_only(self):
        # f1's title and b2's url contain "work" but carry no such tag
        assert search(self.tree, "tag:work") == ["b1", "f2"]

    def test_tag_prefix_case_insensitive(self):
        assert search(self.tree, "tag:PERSONAL") == ["b1"]
        assert search(self.tree, "TAG:cooking") == ["b3"]

    def test_tag_prefix_without_remainder_matches_tagged_nodes(self):
        assert search(self.tree, "tag:") == ["b1", "b3", "f2"]

    def test_general_query_matches_title_url_and_tags(self):
        assert search(self.tree, "WORK") == ["f1", "b1", "b2", "f2"]

    def test_url_match(self):
        assert search(self.tree, "example.org") == ["b3"]

    def test_folders_are_searchable(self):
        assert search(self.tree, "reading") == ["f2"]

    def test_no_match(self):
        assert search(self.tree, "nothing here") == []

    def test_results_in_pre_order(self):
        assert search(self.tree, "e") == ["f1", "b1", "b2", "b3", "f2"]

    def test_empty_query_matches_everything(self):
        assert search(self.tree, "") == ["root", "f1", "b1", "b2", "b3", "f2"]

    def test_tagged_bookmark_scenario(self):
        tree = [Node(id="n", title="Team board", url="http://x.com", tags=["Work", "Personal"])]

        assert search(tree, "tag:work") == ["n"]
        assert search(tree, "WORK") == ["n"]
