"""Tests for the tree builder and navigator."""

from tree import (
    OIDNode,
    build_tree,
    count_nodes,
    find_by_id,
    find_by_oid,
    flatten,
    max_depth,
    path_to,
    with_child,
    with_patch,
    without,
)


class TestBuildTree:
    def test_nests_chain(self, flat_nodes):
        roots = build_tree(flat_nodes[:3])

        assert len(roots) == 1
        root = roots[0]
        assert root.oid == "1"
        assert [c.oid for c in root.children] == ["1.2"]
        assert [c.oid for c in root.children[0].children] == ["1.2.3"]
        assert [n.id for n in flatten(roots)] == ["1", "2", "3"]

    def test_sets_parent_ids(self, flat_nodes):
        roots = build_tree(flat_nodes)
        child = find_by_oid(roots, "1.2.3")
        assert child.parent == "2"

    def test_multiple_roots(self, flat_nodes):
        roots = build_tree(flat_nodes)
        assert [r.oid for r in roots] == ["1", "2"]

    def test_orphans_become_roots(self):
        roots = build_tree([
            OIDNode(id="a", oid="1", name="ISO"),
            OIDNode(id="b", oid="1.3.6", name="DoD"),
        ])
        assert [r.oid for r in roots] == ["1", "1.3.6"]
        assert roots[1].parent is None

    def test_children_keep_input_order(self):
        roots = build_tree([
            OIDNode(id="p", oid="1", name="P"),
            OIDNode(id="c10", oid="1.10", name="Ten"),
            OIDNode(id="c2", oid="1.2", name="Two"),
        ])
        assert [c.id for c in roots[0].children] == ["c10", "c2"]

    def test_child_before_parent_in_input(self):
        roots = build_tree([
            OIDNode(id="c", oid="1.2", name="Child"),
            OIDNode(id="p", oid="1", name="Parent"),
        ])
        assert [r.id for r in roots] == ["p"]
        assert roots[0].children[0].id == "c"

    def test_skips_malformed_oid(self):
        roots = build_tree([
            OIDNode(id="a", oid="1", name="ISO"),
            OIDNode(id="bad", oid="1..2", name="Broken"),
            OIDNode(id="b", oid="1.2", name="Member"),
        ])
        assert [n.id for n in flatten(roots)] == ["a", "b"]

    def test_does_not_mutate_input(self, flat_nodes):
        build_tree(flat_nodes)
        assert all(n.children == [] for n in flat_nodes)
        assert all(n.parent is None for n in flat_nodes)

    def test_duplicate_oid_first_one_is_parent(self):
        roots = build_tree([
            OIDNode(id="a", oid="1", name="First"),
            OIDNode(id="b", oid="1", name="Second"),
            OIDNode(id="c", oid="1.1", name="Child"),
        ])
        assert [r.id for r in roots] == ["a", "b"]
        assert [c.id for c in roots[0].children] == ["c"]
        assert roots[1].children == []

    def test_empty_input(self):
        assert build_tree([]) == []


class TestNavigator:
    def test_find_by_id(self, search_tree):
        assert find_by_id(search_tree, "n2").name == "Child Node"
        assert find_by_id(search_tree, "missing") is None

    def test_find_by_id_first_in_preorder(self):
        roots = [
            OIDNode(id="x", oid="1", name="First", children=[OIDNode(id="dup", oid="1.1", name="Deep")]),
            OIDNode(id="dup", oid="2", name="Shallow"),
        ]
        assert find_by_id(roots, "dup").name == "Deep"

    def test_find_by_oid(self, search_tree):
        assert find_by_oid(search_tree, "1.2.3").id == "n2"
        assert find_by_oid(search_tree, "9") is None

    def test_path_to(self, flat_nodes):
        roots = build_tree(flat_nodes)
        assert path_to(roots, "3") == ["1", "2", "3"]
        assert path_to(roots, "4") == ["4"]

    def test_path_to_missing_is_empty(self, flat_nodes):
        assert path_to(build_tree(flat_nodes), "nope") == []

    def test_flatten_preorder(self):
        roots = [
            OIDNode(id="a", oid="1", name="A", children=[
                OIDNode(id="a1", oid="1.1", name="A1", children=[OIDNode(id="a11", oid="1.1.1", name="A11")]),
                OIDNode(id="a2", oid="1.2", name="A2"),
            ]),
            OIDNode(id="b", oid="2", name="B"),
        ]
        assert [n.id for n in flatten(roots)] == ["a", "a1", "a11", "a2", "b"]

    def test_counts(self, flat_nodes):
        assert count_nodes(build_tree(flat_nodes)) == 4
        assert max_depth(flat_nodes) == 2
        assert max_depth([]) == 0


class TestRebuildHelpers:
    def test_with_child_leaves_original_alone(self, flat_nodes):
        roots = build_tree(flat_nodes)
        new_roots, parent = with_child(roots, "1.2", OIDNode(id="x", oid="1.2.9", name="New"))

        assert parent.id == "2"
        assert [c.id for c in find_by_id(new_roots, "2").children] == ["3", "x"]
        assert [c.id for c in find_by_id(roots, "2").children] == ["3"]
        # untouched sibling subtrees are shared
        assert new_roots[1] is roots[1]

    def test_with_child_missing_parent(self, flat_nodes):
        roots = build_tree(flat_nodes)
        new_roots, parent = with_child(roots, "7", OIDNode(id="x", oid="7.1", name="New"))
        assert parent is None
        assert new_roots is roots

    def test_with_patch_keeps_children(self, flat_nodes):
        roots = build_tree(flat_nodes)
        new_roots, hit = with_patch(roots, "2", {"name": "Renamed"})
        assert hit
        node = find_by_id(new_roots, "2")
        assert node.name == "Renamed"
        assert [c.id for c in node.children] == ["3"]
        assert find_by_id(roots, "2").name == "Child"

    def test_without_drops_subtree(self, flat_nodes):
        roots = build_tree(flat_nodes)
        new_roots, removed = without(roots, "2")
        assert removed.id == "2"
        assert [n.id for n in flatten(new_roots)] == ["1", "4"]
        assert [n.id for n in flatten(roots)] == ["1", "2", "3", "4"]
