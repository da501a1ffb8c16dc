"""
Tests for the Node and Tree models.

Focus Areas:
1. Adoption and back-references
2. Enter/leave state changes
3. Child regeneration and nested trees
4. Jumplist eviction
"""

import gc

import pytest
from pydantic import ValidationError

from snipforest.core import Mark, Node, NodeType
from snipforest.exceptions import DanglingReferenceError, StructuralInconsistencyError
from tests.builders import make_node, make_tree


class TestAdoption:
    """Test that trees adopt their nodes on construction."""

    def test_children_know_their_tree(self):
        leaf = make_node(NodeType.TEXT, 1, 2)
        inner = make_node(NodeType.SNIPPET_NODE, 0, 4, children=[leaf])
        tree = make_tree(0, 4, [inner])

        assert inner.owning_tree() is tree
        assert leaf.owning_tree() is tree
        assert tree.owning_tree() is tree

    def test_paths_are_stamped(self):
        leaf = make_node(NodeType.TEXT, 1, 2)
        inner = make_node(NodeType.SNIPPET_NODE, 0, 4, children=[make_node(NodeType.TEXT, 0, 1), leaf])
        tree = make_tree(0, 4, [inner])

        assert tree.path == ()
        assert inner.path == (0,)
        assert leaf.path == (0, 1)

    def test_children_are_kept_by_identity(self):
        leaf = make_node(NodeType.TEXT, 0, 1)
        tree = make_tree(0, 1, [leaf])
        assert tree.children[0] is leaf

    def test_unadopted_node_has_no_tree(self):
        node = make_node(NodeType.TEXT, 0, 1)
        with pytest.raises(DanglingReferenceError):
            node.owning_tree()

    def test_collected_tree_leaves_dangling_reference(self):
        leaf = make_node(NodeType.TEXT, 0, 1)
        tree = make_tree(0, 1, [leaf])
        del tree
        gc.collect()
        with pytest.raises(DanglingReferenceError):
            leaf.owning_tree()

    def test_negative_path_rejected(self):
        with pytest.raises(ValidationError):
            Node(node_type=NodeType.TEXT, mark=Mark((0, 0), (0, 1)), path=(0, -1))

    def test_equality_is_identity(self):
        a = make_node(NodeType.TEXT, 0, 1)
        b = make_node(NodeType.TEXT, 0, 1)
        assert a != b
        assert a == a
        assert len({a, b}) == 2


class TestResolveChild:
    """Test child lookup by path index."""

    def test_resolves_index(self):
        first = make_node(NodeType.TEXT, 0, 1)
        second = make_node(NodeType.INSERT, 1, 2)
        tree = make_tree(0, 2, [first, second])
        assert tree.resolve_child(1) is second

    def test_out_of_range_index_raises(self):
        tree = make_tree(0, 2, [make_node(NodeType.TEXT, 0, 1)])
        with pytest.raises(StructuralInconsistencyError):
            tree.resolve_child(1)
        with pytest.raises(StructuralInconsistencyError):
            tree.resolve_child(-1)


class TestEnterLeave:
    """Test single-node transitions."""

    def test_enter_and_leave_toggle_state(self):
        node = make_node(NodeType.INSERT, 0, 1)
        tree = make_tree(0, 1, [node])

        node.enter()
        assert node.active and node.mark.active
        node.leave()
        assert not node.active and not node.mark.active
        assert tree.children[0] is node

    def test_children_flags(self):
        node = make_node(NodeType.INSERT, 0, 1)
        tree = make_tree(0, 1, [node])
        node.enter_children()
        assert node.inner_active
        node.leave_children()
        assert not node.inner_active
        assert tree.children[0] is node

    def test_entering_exit_node_deactivates_tree(self):
        exit_node = make_node(NodeType.EXIT, 1, 1)
        tree = make_tree(0, 1, [make_node(NodeType.INSERT, 0, 1), exit_node])
        tree.enter()
        assert tree.active

        exit_node.enter()
        assert exit_node.active
        assert not tree.active

    def test_leave_with_invalidated_mark_raises(self):
        node = make_node(NodeType.INSERT, 0, 1)
        tree = make_tree(0, 1, [node])
        node.enter()
        node.mark.invalidate()
        with pytest.raises(StructuralInconsistencyError):
            node.leave()
        assert node.active
        assert tree.children[0] is node


class TestRegeneration:
    """Test replacing the children of a container."""

    def test_replace_children_restamps_only_subtree(self):
        sibling_leaf = make_node(NodeType.TEXT, 0, 1)
        sibling = make_node(NodeType.SNIPPET_NODE, 0, 2, children=[sibling_leaf])
        dynamic = make_node(NodeType.DYNAMIC, 2, 6, children=[make_node(NodeType.TEXT, 2, 6)])
        tree = make_tree(0, 6, [sibling, dynamic])

        fresh = [make_node(NodeType.INSERT, 2, 4), make_node(NodeType.TEXT, 4, 6)]
        dynamic.replace_children(fresh)

        assert [child.path for child in dynamic.children] == [(1, 0), (1, 1)]
        assert all(child.owning_tree() is tree for child in fresh)
        assert sibling_leaf.path == (0, 0)
        assert tree.resolve_child(1).resolve_child(0) is fresh[0]

    def test_replace_children_without_path_rejected(self):
        old_child = make_node(NodeType.TEXT, 2, 6)
        dynamic = make_node(NodeType.DYNAMIC, 2, 6, children=[old_child])
        tree = make_tree(0, 6, [dynamic])
        dynamic.path = None

        with pytest.raises(StructuralInconsistencyError, match="without a path"):
            dynamic.replace_children([make_node(NodeType.INSERT, 2, 6)])

        assert dynamic.children == [old_child]
        assert tree.children[0] is dynamic


class TestNestedTrees:
    """Test hosting trees inside nodes."""

    def test_attach_sets_enclosing_node(self):
        host = make_node(NodeType.INSERT, 0, 5)
        outer = make_tree(0, 5, [host])
        inner = make_tree(1, 3, [make_node(NodeType.INSERT, 1, 3)])

        host.attach_tree(inner)

        assert inner.enclosing_node() is host
        assert inner.children[0].enclosing_node() is host
        assert outer.enclosing_node() is None
        assert inner.depth() == 1
        assert inner.root_tree() is outer

    def test_attach_twice_rejected(self):
        host = make_node(NodeType.INSERT, 0, 5)
        outer = make_tree(0, 5, [host])
        inner = make_tree(1, 3, [])
        host.attach_tree(inner)
        with pytest.raises(StructuralInconsistencyError):
            host.attach_tree(inner)
        assert outer.children[0] is host

    def test_detach(self):
        host = make_node(NodeType.INSERT, 0, 5)
        outer = make_tree(0, 5, [host])
        inner = make_tree(1, 3, [])
        host.attach_tree(inner)
        host.detach_tree(inner)
        assert host.nested_trees == []
        assert inner.enclosing_node() is None
        assert outer.children[0] is host

    def test_iter_trees_in_text_order(self):
        first_host = make_node(NodeType.INSERT, 0, 5)
        second_host = make_node(NodeType.INSERT, 5, 10)
        outer = make_tree(0, 10, [first_host, second_host])
        a = make_tree(1, 2, [])
        b = make_tree(6, 7, [])
        second_host.attach_tree(b)
        first_host.attach_tree(a)

        assert list(outer.iter_trees()) == [outer, a, b]


class TestJumplist:
    """Test focus history eviction."""

    def test_eviction_cascades_to_nested_trees(self):
        host = make_node(NodeType.INSERT, 0, 5)
        outer = make_tree(0, 5, [host])
        inner = make_tree(1, 3, [])
        host.attach_tree(inner)

        outer.remove_from_jumplist()

        assert not outer.in_jumplist
        assert not inner.in_jumplist

    def test_eviction_of_inner_keeps_outer(self):
        host = make_node(NodeType.INSERT, 0, 5)
        outer = make_tree(0, 5, [host])
        inner = make_tree(1, 3, [])
        host.attach_tree(inner)

        inner.remove_from_jumplist()

        assert outer.in_jumplist
        assert not inner.in_jumplist
