"""Tests for searching the OID forest."""

import pytest

from search import MatchType, SearchOptions, classify_match, search_nodes
from tree import OIDNode


class TestMatchTypes:
    def test_exact_oid(self, search_tree):
        hits = search_nodes(search_tree, "1.2.3")
        assert len(hits) == 1
        assert hits[0].match_type is MatchType.EXACT
        assert hits[0].node.id == "n2"

    def test_name_case_insensitive(self, search_tree):
        hits = search_nodes(search_tree, "child")
        assert len(hits) == 1
        assert hits[0].match_type is MatchType.NAME

    def test_case_sensitive(self, search_tree):
        assert search_nodes(search_tree, "CHILD", SearchOptions(case_sensitive=True)) == []
        assert len(search_nodes(search_tree, "Child", SearchOptions(case_sensitive=True))) == 1

    def test_partial_oid(self, search_tree):
        hits = search_nodes(search_tree, "1.2")
        assert [(h.node.id, h.match_type) for h in hits] == [
            ("n1", MatchType.EXACT),
            ("n2", MatchType.OID),
        ]

    def test_description(self, search_tree):
        hits = search_nodes(search_tree, "a test")
        assert [(h.node.id, h.match_type) for h in hits] == [("n1", MatchType.DESCRIPTION)]

    def test_name_wins_over_description(self, search_tree):
        hits = search_nodes(search_tree, "test")
        assert hits[0].match_type is MatchType.NAME

    def test_no_match(self, search_tree):
        assert search_nodes(search_tree, "zzz") == []

    def test_empty_query(self, search_tree):
        assert search_nodes(search_tree, "") == []
        assert search_nodes([], "") == []


class TestOptions:
    def test_search_in_restricts_fields(self, search_tree):
        opts = SearchOptions(search_in=("description",))
        assert search_nodes(search_tree, "child", opts) == []
        assert [h.node.id for h in search_nodes(search_tree, "test node", opts)] == ["n1"]

    def test_exact_needs_oid_field(self, search_tree):
        opts = SearchOptions(search_in=("name",))
        assert search_nodes(search_tree, "1.2.3", opts) == []

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            SearchOptions(search_in=("comments",))


class TestResults:
    def test_results_carry_path(self, search_tree):
        hits = search_nodes(search_tree, "Child")
        assert hits[0].path == ["n1", "n2"]

    def test_results_in_preorder(self):
        roots = [
            OIDNode(id="a", oid="1", name="alpha", children=[OIDNode(id="b", oid="1.1", name="alphabet")]),
            OIDNode(id="c", oid="2", name="alpha two"),
        ]
        assert [h.node.id for h in search_nodes(roots, "alpha")] == ["a", "b", "c"]

    def test_to_dict(self, search_tree):
        data = search_nodes(search_tree, "1.2.3")[0].to_dict()
        assert data == {
            "node": {"id": "n2", "oid": "1.2.3", "name": "Child Node", "parent": "n1"},
            "path": ["n1", "n2"],
            "matchType": "exact",
        }

    def test_classify_node_without_description(self):
        node = OIDNode(id="x", oid="5", name="Five")
        assert classify_match(node, "nothing", SearchOptions()) is None
