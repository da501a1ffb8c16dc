"""
Algorithms over node trees.

This package provides path assignment, position lookup, path resolution
between nodes and trees, range validity checks, and focus transitions.
"""

from snipforest.nodes.focus import LeaveOutcome, refocus
from snipforest.nodes.locator import (
    BINARYSEARCH_PREFERENCE,
    SearchResult,
    SearchStatus,
    binarysearch_pos,
    prefer_nodes,
)
from snipforest.nodes.paths import assign_paths
from snipforest.nodes.resolver import (
    TreeAncestry,
    enter_nodes_between,
    first_common_node,
    first_common_tree_ancestor_path,
    leave_nodes_between,
    nodes_between,
    tree_depth,
)
from snipforest.nodes.validity import describe_tree, find_invalid_node, ranges_consistent

__all__ = [
    "assign_paths",
    "binarysearch_pos",
    "prefer_nodes",
    "BINARYSEARCH_PREFERENCE",
    "SearchResult",
    "SearchStatus",
    "nodes_between",
    "leave_nodes_between",
    "enter_nodes_between",
    "first_common_node",
    "first_common_tree_ancestor_path",
    "tree_depth",
    "TreeAncestry",
    "refocus",
    "LeaveOutcome",
    "find_invalid_node",
    "ranges_consistent",
    "describe_tree",
]
