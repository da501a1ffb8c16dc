"""
Structural validity of node ranges.

A tree is valid when every range below it can be read, siblings start in
order, and every child stays inside its parent. Containers that hold a single
generated tree must span exactly the same text as that tree.
"""

import logging
from typing import TYPE_CHECKING, Optional

from snipforest.core.types import NodeType, pos_cmp
from snipforest.exceptions import StructuralInconsistencyError

if TYPE_CHECKING:
    from snipforest.core.node import Node

logger = logging.getLogger(__name__)

# hosts whose nested tree replaces their whole content
_EXACT_EXTENT_HOSTS = (NodeType.DYNAMIC, NodeType.CHOICE)


def ranges_consistent(node: "Node", child: "Node") -> bool:
    """
    Check that `child` spans exactly `node`'s range and is itself valid.

    Params:
        node: Host node
        child: Node (or tree) expected to cover the host completely

    Returns:
        True if both ranges are readable, equal, and `child` is valid
    """
    try:
        node_from, node_to = node.mark.range()
        child_from, child_to = child.mark.range()
    except StructuralInconsistencyError:
        return False
    if pos_cmp(node_from, child_from) != 0 or pos_cmp(node_to, child_to) != 0:
        return False
    return find_invalid_node(child) is None


def find_invalid_node(node: "Node", nested: bool = True) -> Optional["Node"]:
    """
    Find the first node below (and including) `node` with an invalid range.

    Params:
        node: Subtree root to check
        nested: Also check trees nested inside the subtree's nodes

    Returns:
        The offending node, or None if the whole subtree is valid
    """
    try:
        node_from, node_to = node.mark.range()
    except StructuralInconsistencyError:
        return node
    if pos_cmp(node_from, node_to) > 0:
        return node

    prev_from = None
    for child in node.children:
        try:
            child_from, child_to = child.mark.range()
        except StructuralInconsistencyError:
            return child
        if pos_cmp(child_from, node_from) < 0 or pos_cmp(child_to, node_to) > 0:
            logger.debug("%s escapes the range of %s", child.label, node.label)
            return child
        if prev_from is not None and pos_cmp(child_from, prev_from) < 0:
            logger.debug("%s starts before its left sibling", child.label)
            return child
        prev_from = child_from
        invalid = find_invalid_node(child, nested)
        if invalid is not None:
            return invalid

    if not nested:
        return None

    for tree in node.nested_trees:
        if node.node_type in _EXACT_EXTENT_HOSTS:
            if not ranges_consistent(node, tree):
                return find_invalid_node(tree) or tree
            continue
        try:
            tree_from, tree_to = tree.mark.range()
        except StructuralInconsistencyError:
            return tree
        if pos_cmp(tree_from, node_from) < 0 or pos_cmp(tree_to, node_to) > 0:
            return tree
        invalid = find_invalid_node(tree)
        if invalid is not None:
            return invalid

    return None


def describe_tree(node: "Node", indent: int = 0) -> str:
    """
    Render `node` and everything below it, one line per node.

    Each line shows the label, type, path, range, and activity flags; nested
    trees are shown indented below their host node. Unreadable ranges are
    rendered as `<invalid>`.
    """
    try:
        begin, end = node.mark.range()
        extent = f"{begin}-{end}"
    except StructuralInconsistencyError:
        extent = "<invalid>"
    flags = "".join(
        flag for flag, on in (("A", node.active), ("C", node.inner_active)) if on
    )
    path = list(node.path) if node.path is not None else None
    lines = [f"{'  ' * indent}{node.label} [{node.node_type.tag}] {path} {extent} {flags}".rstrip()]
    for child in node.children:
        lines.append(describe_tree(child, indent + 1))
    for tree in node.nested_trees:
        lines.append(describe_tree(tree, indent + 2))
    return "\n".join(lines)
