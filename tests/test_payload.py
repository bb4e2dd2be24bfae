"""
Tests for boundary payload decoding.
"""

import pytest

from bookmark_tree.core.data_models import Node
from bookmark_tree.core.payload import (
    decode_new_node,
    decode_node,
    decode_tree,
    decode_tree_json,
    decode_updates,
    encode_duplicate_groups,
    encode_tree,
)
from bookmark_tree.core.duplicate_detector import find_duplicates
from bookmark_tree.utils.error_handler import DecodeError

pytestmark = pytest.mark.unit


class TestDecodeNode:
    def test_minimal_node(self):
        node = decode_node({"id": "a", "title": "A"})

        assert node == Node(id="a", title="A")
        assert node.is_folder

    def test_full_node(self):
        node = decode_node(
            {
                "id": "a",
                "parentId": "f",
                "title": "A",
                "url": "http://a.com",
                "addDate": 10,
                "lastModified": 20,
                "icon": "data:,",
                "tags": ["x"],
                "isDuplicate": True,
                "children": [],
            }
        )

        assert node.parent_id == "f"
        assert node.add_date == 10
        assert node.last_modified == 20
        assert node.tags == ["x"]
        assert node.is_duplicate is True

    def test_snake_case_names_accepted(self):
        node = decode_node({"id": "a", "title": "A", "add_date": 5, "is_duplicate": True})

        assert node.add_date == 5
        assert node.is_duplicate is True

    def test_unknown_keys_ignored(self):
        node = decode_node({"id": "a", "title": "A", "color": "red"})

        assert node.title == "A"

    def test_nested_children(self):
        node = decode_node(
            {"id": "f", "title": "F", "children": [{"id": "c", "title": "C", "url": "http://c.com"}]}
        )

        assert [child.id for child in node.children] == ["c"]
        assert node.children[0].is_bookmark

    def test_from_dict(self):
        assert Node.from_dict({"id": "a", "title": "A"}).id == "a"

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "no id"},
            {"id": "a"},
            {"id": 5, "title": "A"},
            {"id": "a", "title": "A", "addDate": "10"},
            {"id": "a", "title": "A", "addDate": -1},
            {"id": "a", "title": "A", "tags": "x,y"},
            {"id": "a", "title": "A", "isDuplicate": "yes"},
            {"id": "a", "title": "A", "children": [{"id": "c"}]},
            "not a node",
        ],
    )
    def test_invalid_payloads(self, payload):
        with pytest.raises(DecodeError):
            decode_node(payload)

    def test_error_details(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_node({"id": "a", "title": 7})

        error = exc_info.value
        assert error.errors[0]["location"] == "title"
        assert "title:" in str(error)


class TestDecodeTree:
    def test_round_trip(self, sample_tree):
        assert decode_tree(encode_tree(sample_tree)) == sample_tree

    def test_single_dict_is_one_element_tree(self):
        tree = decode_tree({"id": "a", "title": "A"})

        assert [node.id for node in tree] == ["a"]

    def test_empty_tree(self):
        assert decode_tree([]) == []

    def test_error_location_includes_index(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_tree([{"id": "a", "title": "A"}, {"id": "b"}])

        assert exc_info.value.errors[0]["location"] == "1.title"

    def test_decode_tree_json(self):
        tree = decode_tree_json('[{"id": "a", "title": "A", "url": "http://a.com"}]')

        assert tree[0].url == "http://a.com"

    def test_decode_tree_json_bytes(self):
        assert decode_tree_json(b'[{"id": "a", "title": "A"}]')[0].id == "a"

    def test_decode_tree_json_invalid(self):
        with pytest.raises(DecodeError, match="Invalid JSON document"):
            decode_tree_json("[{")


class TestDecodeNewNode:
    def test_id_is_optional(self):
        node = decode_new_node({"title": "New", "url": "http://n.com"})

        assert node.id == ""
        assert node.title == "New"

    def test_title_defaults_to_empty(self):
        assert decode_new_node({}).title == ""

    def test_wrong_type_rejected(self):
        with pytest.raises(DecodeError):
            decode_new_node({"url": 5})


class TestDecodeUpdates:
    def test_only_present_fields(self):
        assert decode_updates({"title": "New"}) == {"title": "New"}

    def test_null_clears(self):
        assert decode_updates({"url": None, "icon": None}) == {"url": None, "icon": None}

    def test_camel_case_mapped(self):
        assert decode_updates({"isDuplicate": True}) == {"is_duplicate": True}

    def test_unknown_keys_dropped(self):
        assert decode_updates({"addDate": 5, "color": "red"}) == {}

    def test_wrong_type(self):
        with pytest.raises(DecodeError):
            decode_updates({"tags": "x"})


def test_encode_duplicate_groups(sample_tree):
    data = encode_duplicate_groups(find_duplicates(sample_tree))

    assert len(data) == 1
    assert data[0]["url"] == "https://docs.python.org"
    assert [node["id"] for node in data[0]["nodes"]] == ["b1", "b3"]
