"""Tests for document query primitives."""

import pytest

from reality_setup.common.exceptions import TemplatePathNotFoundError
from reality_setup.common.query import (
    Match,
    find_node_by_field,
    format_path,
    get_node,
    remove_key,
    set_value,
)


@pytest.fixture
def document():
    return {
        "inbounds": [
            {"tag": "socks-in", "settings": {"auth": "noauth"}},
            {"tag": "http-in", "settings": {}},
        ],
        "outbounds": [
            {"tag": "direct", "protocol": "freedom"},
            {"tag": "proxy", "settings": {"vnext": [{"address": "", "users": [{"id": ""}]}]}},
        ],
        "log": {"loglevel": "warning"},
    }


class TestFindNodeByField:
    """Test tag-based node lookup."""

    def test_finds_node_regardless_of_position(self, document):
        """Test that the node is found by tag, not index."""
        node = find_node_by_field(document, ("outbounds",), "tag", "proxy")
        assert node is document["outbounds"][1]

    def test_returns_live_reference(self, document):
        """Test that mutating the returned node mutates the document."""
        node = find_node_by_field(document, ("inbounds",), "tag", "http-in")
        node["settings"]["accounts"] = []
        assert document["inbounds"][1]["settings"] == {"accounts": []}

    def test_first_match_wins(self):
        """Test that duplicate tags resolve to the first entry."""
        document = {"items": [{"tag": "a", "n": 1}, {"tag": "a", "n": 2}]}
        assert find_node_by_field(document, ("items",), "tag", "a")["n"] == 1

    def test_missing_tag(self, document):
        """Test that an unknown tag raises."""
        with pytest.raises(TemplatePathNotFoundError, match=r"outbounds\[tag=nope\]"):
            find_node_by_field(document, ("outbounds",), "tag", "nope")

    def test_missing_collection(self, document):
        """Test that a missing list raises."""
        with pytest.raises(TemplatePathNotFoundError, match="routing"):
            find_node_by_field(document, ("routing",), "tag", "proxy")

    def test_collection_not_a_list(self, document):
        """Test that a mapping cannot be searched by field."""
        with pytest.raises(TemplatePathNotFoundError, match="expected a list"):
            find_node_by_field(document, ("log",), "tag", "x")

    def test_non_mapping_entries_are_skipped(self):
        """Test that scalars inside the list are ignored."""
        document = {"items": ["tag", {"tag": "x"}]}
        assert find_node_by_field(document, ("items",), "tag", "x") == {"tag": "x"}


class TestGetNode:
    """Test path resolution."""

    def test_nested_path(self, document):
        """Test resolving keys, matches and indexes together."""
        path = ("outbounds", Match("tag", "proxy"), "settings", "vnext", 0, "users", 0, "id")
        assert get_node(document, path) == ""

    def test_empty_path_returns_document(self, document):
        """Test that the empty path is the document itself."""
        assert get_node(document, ()) is document

    def test_index_out_of_range(self, document):
        """Test that a missing index raises."""
        with pytest.raises(TemplatePathNotFoundError, match="index out of range"):
            get_node(document, ("inbounds", 5))

    def test_missing_key(self, document):
        """Test that a missing key raises with the full path."""
        with pytest.raises(TemplatePathNotFoundError) as exc_info:
            get_node(document, ("inbounds", Match("tag", "socks-in"), "streamSettings"))
        assert exc_info.value.path == "inbounds[tag=socks-in].streamSettings"


class TestSetValue:
    """Test value assignment."""

    def test_overwrites_existing_key_in_place(self, document):
        """Test that key order is preserved when overwriting."""
        set_value(document, ("inbounds", 0, "settings", "auth"), "password")
        assert document["inbounds"][0]["settings"] == {"auth": "password"}
        assert list(document) == ["inbounds", "outbounds", "log"]

    def test_creates_missing_leaf_key(self, document):
        """Test that the last key is created when absent."""
        set_value(document, ("inbounds", Match("tag", "http-in"), "settings", "accounts"), [])
        assert document["inbounds"][1]["settings"]["accounts"] == []

    def test_missing_parent_raises(self, document):
        """Test that intermediate nodes are never created."""
        with pytest.raises(TemplatePathNotFoundError):
            set_value(document, ("outbounds", Match("tag", "proxy"), "streamSettings", "x"), 1)
        assert "streamSettings" not in document["outbounds"][1]

    def test_sets_list_index(self, document):
        """Test replacing a list element by index."""
        set_value(document, ("outbounds", 0), {"tag": "direct"})
        assert document["outbounds"][0] == {"tag": "direct"}

    def test_list_index_must_exist(self, document):
        """Test that appending through an index is rejected."""
        with pytest.raises(TemplatePathNotFoundError):
            set_value(document, ("outbounds", 2), {})

    def test_replaces_matched_entry(self, document):
        """Test replacing a list element selected by field."""
        set_value(document, ("inbounds", Match("tag", "http-in")), {"tag": "http-in", "port": 1})
        assert document["inbounds"][1] == {"tag": "http-in", "port": 1}

    def test_empty_path(self, document):
        """Test that the document root cannot be replaced."""
        with pytest.raises(ValueError):
            set_value(document, (), {})

    def test_relative_to_located_node(self, document):
        """Test mutating a located node with errors reported from the document root."""
        base = ("outbounds", Match("tag", "proxy"))
        outbound = find_node_by_field(document, ("outbounds",), "tag", "proxy")

        set_value(outbound, ("settings", "vnext", 0, "address"), "vpn.example.com", base=base)
        assert document["outbounds"][1]["settings"]["vnext"][0]["address"] == "vpn.example.com"

        with pytest.raises(TemplatePathNotFoundError) as exc_info:
            set_value(outbound, ("streamSettings", "realitySettings", "shortId"), "ab", base=base)
        assert exc_info.value.path == "outbounds[tag=proxy].streamSettings"


class TestRemoveKey:
    """Test key removal."""

    def test_removes_existing_key(self, document):
        """Test removal of a present key."""
        assert remove_key(document, ("log", "loglevel")) is True
        assert document["log"] == {}

    def test_absent_key_is_noop(self, document):
        """Test removal of an absent key."""
        assert remove_key(document, ("log", "access")) is False

    def test_missing_parent_raises(self, document):
        """Test that the parent of the removed key must exist."""
        with pytest.raises(TemplatePathNotFoundError):
            remove_key(document, ("dns", "servers"))

    def test_missing_parent_reported_with_base(self, document):
        """Test that error paths include the location of the node."""
        base = ("inbounds", Match("tag", "http-in"))
        listener = find_node_by_field(document, ("inbounds",), "tag", "http-in")
        with pytest.raises(TemplatePathNotFoundError, match=r"inbounds\[tag=http-in\]\.sniffing"):
            remove_key(listener, ("sniffing", "enabled"), base=base)

    def test_only_keys_can_be_removed(self, document):
        """Test that list indexes are rejected."""
        with pytest.raises(ValueError, match="Only mapping keys"):
            remove_key(document, ("inbounds", 0))


class TestFormatPath:
    """Test path rendering."""

    def test_format(self):
        path = ("inbounds", Match("tag", "vless-in"), "settings", "clients", 0, "id")
        assert format_path(path) == "inbounds[tag=vless-in].settings.clients[0].id"

    def test_format_root(self):
        assert format_path(()) == "."
