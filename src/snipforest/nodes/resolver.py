"""
Path resolution between nodes.

Inside a single tree, nodes are related through their paths. Across trees,
they are related through the chain of enclosing nodes that leads from a
nested tree up to a forest root. This module walks both relations.
"""

from typing import TYPE_CHECKING, Optional

from attrs import field, frozen

from snipforest.exceptions import StructuralInconsistencyError

if TYPE_CHECKING:
    from snipforest.core.node import Node, Tree


def nodes_between(ancestor: "Node", descendant: "Node") -> list["Node"]:
    """
    Nodes on the path from `ancestor` (exclusive) down to `descendant` (inclusive).

    Params:
        ancestor: Node whose path is a prefix of `descendant`'s path
        descendant: Node in the same tree as `ancestor`

    Returns:
        Ordered list of nodes, topmost first. `[descendant]` if `descendant`
        has no path.
    """
    if descendant.path is None:
        return [descendant]

    nodes = []
    prev = ancestor
    for index in descendant.path[len(ancestor.path or ()):]:
        prev = prev.resolve_child(index)
        nodes.append(prev)
    return nodes


def leave_nodes_between(ancestor: "Node", descendant: "Node", no_move: bool = False) -> None:
    """
    Leave every node between `ancestor` and `descendant`, deepest first.

    Assumes the children of `descendant` are already inactive.
    """
    nodes = nodes_between(ancestor, descendant)
    if not nodes:
        return
    for i in range(len(nodes) - 1, 0, -1):
        nodes[i].leave(no_move)
        nodes[i - 1].leave_children()
    nodes[0].leave(no_move)


def enter_nodes_between(ancestor: "Node", descendant: "Node", no_move: bool = False) -> None:
    """Enter every node between `ancestor` and `descendant`, topmost first."""
    nodes = nodes_between(ancestor, descendant)
    if not nodes:
        return
    for node in nodes[:-1]:
        node.enter(no_move)
        node.enter_children()
    nodes[-1].enter(no_move)


def first_common_node(a: "Node", b: "Node") -> "Node":
    """
    Deepest node whose subtree contains both `a` and `b`.

    Walks both paths from the owning tree for as long as they agree. If `a`
    and `b` are the same node, its parent is returned (the tree itself for
    the tree root).

    Raises:
        StructuralInconsistencyError: If `a` and `b` belong to different trees
    """
    tree = a.owning_tree()
    if b.owning_tree() is not tree:
        raise StructuralInconsistencyError(b, f"not in the same tree as {a.label}")

    a_path = a.path or ()
    b_path = b.path or ()
    if a is b:
        a_path = a_path[:-1]

    last_common = tree
    for a_index, b_index in zip(a_path, b_path):
        if a_index != b_index:
            break
        last_common = last_common.resolve_child(a_index)
    return last_common


def tree_depth(tree: "Tree") -> int:
    """Number of enclosing-tree hops from `tree` to its forest root."""
    depth = 0
    parent_node = tree.enclosing_node()
    while parent_node is not None:
        depth += 1
        parent_node = parent_node.owning_tree().enclosing_node()
    return depth


@frozen
class TreeAncestry:
    """
    Relation of two trees in the forest.

    Params:
        common_tree: First tree both inputs share on their way to the root,
            or None if they are in unrelated trees
        a_path: Enclosing nodes traversed from `a`, innermost first
        b_path: Enclosing nodes traversed from `b`, innermost first
    """

    common_tree: Optional["Tree"]
    a_path: list["Node"] = field(factory=list)
    b_path: list["Node"] = field(factory=list)


def first_common_tree_ancestor_path(
    a: Optional["Node"], b: Optional["Node"]
) -> TreeAncestry:
    """
    Find the first tree shared by the ancestor chains of `a` and `b`.

    Nodes are replaced by their owning tree. The deeper tree is walked up
    until both are at the same depth, then both are walked up in lock-step
    until they meet or both reach a forest root. The last entry of a path
    is therefore the enclosing node that lies inside the common tree (or in
    the root tree when there is none).

    Params:
        a: Node or tree, or None for "no node"
        b: Node or tree, or None for "no node"

    Returns:
        TreeAncestry. A None input yields an empty path for that side and no
        common tree.
    """
    a_path: list["Node"] = []
    b_path: list["Node"] = []
    a_tree = a.owning_tree() if a is not None else None
    b_tree = b.owning_tree() if b is not None else None

    a_depth = tree_depth(a_tree) if a_tree is not None else 0
    b_depth = tree_depth(b_tree) if b_tree is not None else 0

    # the deeper side is never None, so its whole upward walk happens below
    if b_tree is None or (a_tree is not None and a_depth > b_depth):
        deeper, deeper_path, other, other_path = a_tree, a_path, b_tree, b_path
    else:
        deeper, deeper_path, other, other_path = b_tree, b_path, a_tree, a_path

    for _ in range(abs(a_depth - b_depth)):
        parent_node = deeper.enclosing_node()
        deeper_path.append(parent_node)
        deeper = parent_node.owning_tree()

    if other is None:
        return TreeAncestry(None, a_path, b_path)

    while deeper is not other:
        deeper_parent = deeper.enclosing_node()
        if deeper_parent is None:
            return TreeAncestry(None, a_path, b_path)
        other_parent = other.enclosing_node()
        deeper_path.append(deeper_parent)
        other_path.append(other_parent)
        deeper = deeper_parent.owning_tree()
        other = other_parent.owning_tree()

    return TreeAncestry(deeper, a_path, b_path)
