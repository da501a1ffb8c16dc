"""
Forest of independently rooted trees in one buffer.

The forest keeps its root trees in text order, answers "which node is at
this position" queries, and owns the single focus of the buffer. Focus
changes go through `refocus`; the forest adds the checks around it (target
validity, re-entrancy) and the final cursor placement.
"""

import logging
import weakref
from collections.abc import Callable, Sequence

from snipforest.config import ForestSettings
from snipforest.core.node import Node, TransitionEvent, Tree
from snipforest.core.types import Position, pos_cmp
from snipforest.exceptions import (
    ReentrantFocusError,
    StructuralInconsistencyError,
    TreePlacementError,
)
from snipforest.nodes.focus import refocus
from snipforest.nodes.locator import SearchResult, binarysearch_pos
from snipforest.nodes.validity import find_invalid_node

logger = logging.getLogger(__name__)

TransitionListener = Callable[[TransitionEvent], None]


class Forest:
    """
    Root trees of a buffer plus its focus state.

    Params:
        settings: Lookup settings, defaults to `ForestSettings()`
    """

    def __init__(self, settings: ForestSettings | None = None):
        self.settings = settings or ForestSettings()
        self.roots: list[Tree] = []
        self.focused: Node | None = None
        self.cursor: Position | None = None
        self._listeners: list[TransitionListener] = []
        self._in_transition = False

    def subscribe(self, listener: TransitionListener) -> None:
        """Register `listener` for every enter/leave transition in this forest."""
        self._listeners.append(listener)

    def dispatch(self, event: TransitionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def add_tree(self, tree: Tree, host: Node | None = None) -> int:
        """
        Place `tree` as a root, or nest it inside `host`.

        Params:
            tree: Tree to place; must not be placed anywhere yet
            host: Node of a tree in this forest to nest `tree` in

        Returns:
            Index of the tree among its new siblings

        Raises:
            TreePlacementError: If `tree` starts inside an existing sibling tree,
                or reaches outside of `host`
            StructuralInconsistencyError: If a sibling's range cannot be read
        """
        if tree.enclosing_node() is not None or tree._forest_ref is not None:
            raise TreePlacementError(f"{tree.label} is already placed")

        begin, end = tree.mark.range()
        if host is not None:
            host_begin, host_end = host.mark.range()
            if pos_cmp(begin, host_begin) < 0 or pos_cmp(end, host_end) > 0:
                raise TreePlacementError(
                    f"{tree.label} reaches outside of its host {host.label}"
                )
        siblings = host.nested_trees if host is not None else self.roots
        result = binarysearch_pos(siblings, begin, False, "outside")
        if result.failed:
            raise StructuralInconsistencyError(
                result.node, "range unreadable while placing a tree"
            ) from result.error
        if result.found:
            raise TreePlacementError(f"{tree.label} starts inside {result.node.label}")

        if host is not None:
            host.attach_tree(tree, result.index)
        else:
            tree._forest_ref = weakref.ref(self)
            self.roots.insert(result.index, tree)
        logger.debug("Placed %s at index %d", tree.label, result.index)
        return result.index

    def remove_tree(self, tree: Tree) -> None:
        """
        Remove `tree` (and everything nested in it) from the forest.

        A focus inside `tree` is dropped first, so the nodes and trees
        enclosing it are left while they can still be reached.
        """
        if self.focused is not None and self._contains(tree, self.focused):
            self.focus(None)
        host = tree.enclosing_node()
        if host is not None:
            host.detach_tree(tree)
        else:
            self.roots = [root for root in self.roots if root is not tree]
            tree._forest_ref = None
        tree.remove_from_jumplist()

    def jumplist(self) -> list[Tree]:
        """Trees still eligible as focus targets, in text order."""
        return [
            tree for root in self.roots for tree in root.iter_trees() if tree.in_jumplist
        ]

    def tree_at(self, pos: Position) -> Tree | None:
        """
        Root tree containing `pos`, or None.

        Raises:
            StructuralInconsistencyError: If a root's range cannot be read and
                `prune_invalid_trees` is off
        """
        while True:
            result = binarysearch_pos(
                self.roots,
                pos,
                self.settings.respect_boundary_gravity,
                self.settings.tree_policy,
            )
            if not result.failed:
                return result.node if result.found else None
            if not self.settings.prune_invalid_trees:
                self._raise_failed(result)
            logger.warning("Pruning %s, its range is no longer valid", result.node.label)
            self.remove_tree(result.node)

    def node_at(self, pos: Position) -> Node | None:
        """
        Most specific node whose range contains `pos`, or None.

        Descends from the root tree through children (with `node_policy`) and
        nested trees (with `tree_policy`) until nothing more specific matches.
        Nested trees of a node are searched when none of its children match.
        """
        node = self.tree_at(pos)
        if node is None:
            return None
        while True:
            result = None
            if node.children:
                result = self._search(node.children, pos, self.settings.node_policy)
            if (result is None or not result.found) and node.nested_trees:
                result = self._search(node.nested_trees, pos, self.settings.tree_policy)
            if result is None or not result.found:
                return node
            node = result.node

    def focus(self, to: Node | None) -> None:
        """
        Move the focus to `to` (None to drop it) and place the cursor there.

        Raises:
            ReentrantFocusError: If called while another focus change runs
            StructuralInconsistencyError: If a tree on `to`'s way to its root
                is invalid
        """
        if self._in_transition:
            raise ReentrantFocusError()
        if to is not None:
            self._check_target(to)

        self._in_transition = True
        try:
            refocus(self.focused, to)
        finally:
            self._in_transition = False

        self.focused = to
        self.cursor = to.mark.range()[0] if to is not None else None

    def _check_target(self, to: Node) -> None:
        tree = to.owning_tree()
        if tree.forest is not self:
            raise StructuralInconsistencyError(to, "not part of this forest")
        while tree is not None:
            invalid = find_invalid_node(tree, nested=False)
            if invalid is not None:
                raise StructuralInconsistencyError(invalid, "invalid range on the focus path")
            host = tree.enclosing_node()
            tree = host.owning_tree() if host is not None else None

    def _search(self, nodes: Sequence[Node], pos: Position, policy: str) -> SearchResult:
        result = binarysearch_pos(
            nodes, pos, self.settings.respect_boundary_gravity, policy
        )
        if result.failed:
            self._raise_failed(result)
        return result

    @staticmethod
    def _raise_failed(result: SearchResult) -> None:
        raise StructuralInconsistencyError(
            result.node, f"range unreadable at index {result.index}"
        ) from result.error

    @staticmethod
    def _contains(tree: Tree, node: Node) -> bool:
        try:
            current = node.owning_tree()
            while current is not None:
                if current is tree:
                    return True
                host = current.enclosing_node()
                current = host.owning_tree() if host is not None else None
        except StructuralInconsistencyError:
            return True
        return False
