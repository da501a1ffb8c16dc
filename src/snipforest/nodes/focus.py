"""
Focus transitions across a node forest.

`refocus` moves the active state from one node to another, possibly in a
different tree at a different nesting depth. It leaves everything from the
old node up to the first node shared with the new one, then enters
everything from there down to the new node. All transitions are done without
moving the cursor; placing the cursor once at the target is the caller's job.

The old node's side may already be broken (its text deleted, its ranges
invalidated). Leaving it is therefore done in branches of fallible steps: a
failing branch is abandoned and its tree evicted from the focus history.
The target's side is required to be valid and errors there propagate.
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Optional

from attrs import field, frozen

from snipforest.core.types import NodeType
from snipforest.exceptions import StructuralInconsistencyError
from snipforest.nodes.resolver import (
    enter_nodes_between,
    first_common_node,
    first_common_tree_ancestor_path,
    leave_nodes_between,
)

if TYPE_CHECKING:
    from snipforest.core.node import Node, Tree

logger = logging.getLogger(__name__)


@frozen
class LeaveOutcome:
    """
    Result of leaving one tree of the old focus path.

    Params:
        tree: Tree that was being left
        error: First error raised while leaving, None on success
    """

    tree: "Tree"
    error: StructuralInconsistencyError | None = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None


def _leave_branch(
    tree: "Tree", steps: list[Callable[[], None]]
) -> LeaveOutcome:
    for step in steps:
        try:
            step()
        except StructuralInconsistencyError as e:
            logger.debug("Leaving %s failed: %s", tree.label, e)
            return LeaveOutcome(tree, e)
    return LeaveOutcome(tree)


def _leave_from_path(from_node: "Node", enclosing: list["Node"]) -> list[LeaveOutcome]:
    """
    Leave `from_node` and the enclosing nodes above it, innermost first.

    Each tree is one branch: its nodes down to the focus node are left, then
    the tree itself; for enclosing nodes their children are left first.
    """
    outcomes = []
    try:
        from_tree = from_node.owning_tree()
    except StructuralInconsistencyError as e:
        logger.debug("Focus node %s lost its tree: %s", from_node.label, e)
        from_tree = None
    if from_tree is not None:
        outcomes.append(
            _leave_branch(
                from_tree,
                [
                    lambda: leave_nodes_between(from_tree, from_node, True),
                    lambda: from_tree.leave(True),
                ],
            )
        )
    for node in enclosing:
        tree = node.owning_tree()
        outcomes.append(
            _leave_branch(
                tree,
                [
                    node.leave_children,
                    lambda node=node, tree=tree: leave_nodes_between(tree, node, True),
                    lambda tree=tree: tree.leave(True),
                ],
            )
        )
    return outcomes


def _evict_failed(outcomes: list[LeaveOutcome]) -> Optional["Tree"]:
    failed = [outcome for outcome in outcomes if not outcome.ok]
    if not failed:
        return None
    # outcomes run innermost first, so the last failure is the outermost tree
    evicted = failed[-1].tree
    logger.warning(
        "Could not leave %s cleanly (%s), removing it from the jumplist",
        evicted.label,
        failed[-1].error,
    )
    evicted.remove_from_jumplist()
    return evicted


def refocus(from_node: Optional["Node"], to_node: Optional["Node"]) -> None:
    """
    Move focus from `from_node` to `to_node`.

    Params:
        from_node: Currently focused node, or None if nothing is focused
        to_node: Node to focus, or None to drop focus entirely

    Requires that `from_node` is currently entered and that no tree between
    `to_node` and its forest root is invalid. Failures while leaving the old
    focus are recovered by evicting the affected tree from the jumplist;
    failures on the target side propagate.
    """
    if from_node is None and to_node is None:
        return

    try:
        ancestry = first_common_tree_ancestor_path(from_node, to_node)
    except StructuralInconsistencyError as e:
        # the old focus cannot even be placed in the forest anymore, so
        # there is nothing left to leave
        logger.warning("Dropping unreachable focus %s: %s", from_node, e)
        from_node = None
        ancestry = first_common_tree_ancestor_path(None, to_node)

    # first entry: the node itself, then enclosing nodes, innermost first
    from_path = ([from_node] if from_node is not None else []) + ancestry.a_path
    to_path = ([to_node] if to_node is not None else []) + ancestry.b_path

    final_leave_node = first_enter_node = common_node = None
    if ancestry.common_tree is not None:
        # the last entries lie inside the common tree, which stays entered
        final_leave_node = from_path.pop()
        first_enter_node = to_path.pop()
        common_node = first_common_node(first_enter_node, final_leave_node)

    logger.debug(
        "Refocus %s -> %s via %s",
        from_node.label if from_node is not None else None,
        to_node.label if to_node is not None else None,
        common_node.label if common_node is not None else "forest root",
    )

    if from_path:
        _evict_failed(_leave_from_path(from_path[0], from_path[1:]))

    if common_node is not None:
        final_leave_node.leave_children()
        leave_nodes_between(common_node, final_leave_node, True)

        # an exit node leaves its tree inactive, so the common node has to
        # be re-entered when moving away from it, and left when moving onto it
        leaving_exit = final_leave_node.type_tag() is NodeType.EXIT
        entering_exit = first_enter_node.type_tag() is NodeType.EXIT
        if leaving_exit and not entering_exit:
            common_node.enter(True)
        if entering_exit and not leaving_exit:
            common_node.leave(True)

        enter_nodes_between(common_node, first_enter_node, True)
        first_enter_node.enter_children()

    for node in reversed(to_path[1:]):
        tree = node.owning_tree()
        tree.enter(True)
        enter_nodes_between(tree, node, True)
        node.enter_children()
    if to_path:
        to_tree = to_node.owning_tree()
        to_tree.enter(True)
        enter_nodes_between(to_tree, to_node, True)
