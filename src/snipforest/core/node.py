"""
Node and Tree models for snipforest.

A `Tree` owns its nodes and each node owns its direct children. Trees may be
nested inside nodes of an outer tree; the outer node owns them as well.
Everything pointing the other way (a node's owning tree, a tree's enclosing
node, a root tree's forest) is a weak reference that is checked whenever it
is followed.
"""

import logging
import weakref
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Optional

from attrs import frozen
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from snipforest.core.marks import RangeTracker
from snipforest.core.types import NodePath, NodeType
from snipforest.exceptions import DanglingReferenceError, StructuralInconsistencyError
from snipforest.nodes.paths import assign_paths
from snipforest.nodes.resolver import tree_depth
from snipforest.nodes.validity import find_invalid_node

if TYPE_CHECKING:
    from snipforest.forest import Forest

logger = logging.getLogger(__name__)


@frozen
class TransitionEvent:
    """A single enter/leave transition reported to forest listeners."""

    action: str  # "enter", "leave", "enter_children" or "leave_children"
    node: "Node"
    no_move: bool = False


def _deref(ref: Any, what: str) -> Any:
    target = ref()
    if target is None:
        raise DanglingReferenceError(f"{what} no longer exists")
    return target


class Node(BaseModel):
    """
    Single unit of an interactive tree.

    Params:
        node_type: Variant of the node
        mark: Range tracker following the node's text
        children: Directly owned child nodes, in text order
        nested_trees: Trees expanded inside this node, in text order
        name: Optional label for logs and debugging
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    node_type: NodeType
    mark: RangeTracker
    children: list["Node"] = Field(default_factory=list)
    nested_trees: list["Tree"] = Field(default_factory=list)
    name: str | None = None
    path: NodePath | None = None
    active: bool = False
    inner_active: bool = False

    _tree_ref: Any = PrivateAttr(default=None)

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: NodePath | None) -> NodePath | None:
        if value is not None and any(index < 0 for index in value):
            raise ValueError(f"path indices must be non-negative, got {value}")
        return value

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label})"

    __str__ = __repr__

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        return f"{self.node_type.tag}@{list(self.path) if self.path is not None else '?'}"

    def type_tag(self) -> NodeType:
        return self.node_type

    def owning_tree(self) -> "Tree":
        """
        Tree this node belongs to.

        Raises:
            DanglingReferenceError: If the node was never adopted or its tree is gone
        """
        if self._tree_ref is None:
            raise DanglingReferenceError(f"owning tree of {self.label}")
        return _deref(self._tree_ref, f"owning tree of {self.label}")

    def enclosing_node(self) -> Optional["Node"]:
        """Node of the outer tree hosting this node's tree, None for forest roots."""
        return self.owning_tree().enclosing_node()

    def resolve_child(self, index: int) -> "Node":
        if not 0 <= index < len(self.children):
            raise StructuralInconsistencyError(self, f"no child at index {index}")
        return self.children[index]

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all descendants, pre-order, without nested trees."""
        yield self
        for child in self.children:
            yield from child.walk()

    def is_range_valid(self) -> bool:
        return find_invalid_node(self) is None

    def enter(self, no_move: bool = False) -> None:
        tree = self.owning_tree()
        self.mark.set_active(True)
        self.active = True
        if self.node_type is NodeType.EXIT:
            # the exit point sits outside of its tree's interactive region
            tree.active = False
        self._emit(tree, "enter", no_move)

    def leave(self, no_move: bool = False) -> None:
        tree = self.owning_tree()
        self.mark.set_active(False)
        self.active = False
        self._emit(tree, "leave", no_move)

    def enter_children(self) -> None:
        self.inner_active = True
        self._emit(self.owning_tree(), "enter_children")

    def leave_children(self) -> None:
        self.inner_active = False
        self._emit(self.owning_tree(), "leave_children")

    def replace_children(self, children: list["Node"]) -> None:
        """
        Regenerate this node's children and re-stamp their paths.

        Only the subtree below this node is touched.

        Raises:
            StructuralInconsistencyError: If this node was never given a path
        """
        if self.path is None:
            raise StructuralInconsistencyError(self, "cannot regenerate children without a path")
        tree = self.owning_tree()
        self.children = list(children)
        self._adopt(tree)
        assign_paths(self, self.path)

    def attach_tree(self, tree: "Tree", index: int | None = None) -> None:
        """Host `tree` inside this node, at `index` of `nested_trees` (default: last)."""
        if tree.enclosing_node() is not None:
            raise StructuralInconsistencyError(tree, "tree is already nested")
        tree._parent_node_ref = weakref.ref(self)
        if index is None:
            self.nested_trees.append(tree)
        else:
            self.nested_trees.insert(index, tree)

    def detach_tree(self, tree: "Tree") -> None:
        self.nested_trees = [t for t in self.nested_trees if t is not tree]
        tree._parent_node_ref = None

    def _adopt(self, tree: "Tree") -> None:
        for child in self.children:
            child._tree_ref = weakref.ref(tree)
            child._adopt(tree)

    def _emit(self, tree: "Tree", action: str, no_move: bool = False) -> None:
        logger.debug("%s %s (no_move=%s)", action, self.label, no_move)
        forest = tree.forest
        if forest is not None:
            forest.dispatch(TransitionEvent(action, self, no_move))


class Tree(Node):
    """
    Node that owns a child forest and can hold focus.

    A tree is its own owning tree and has the empty path. A nested tree
    points back to the node of the outer tree it was expanded in.

    Params:
        in_jumplist: Whether the tree is still part of the focus history
    """

    node_type: NodeType = NodeType.SNIPPET
    in_jumplist: bool = True

    _parent_node_ref: Any = PrivateAttr(default=None)
    _forest_ref: Any = PrivateAttr(default=None)

    def model_post_init(self, __context: Any) -> None:
        self._adopt(self)
        assign_paths(self, ())

    def owning_tree(self) -> "Tree":
        return self

    def enclosing_node(self) -> Optional[Node]:
        if self._parent_node_ref is None:
            return None
        return _deref(self._parent_node_ref, f"enclosing node of {self.label}")

    def depth(self) -> int:
        return tree_depth(self)

    def root_tree(self) -> "Tree":
        tree = self
        parent_node = tree.enclosing_node()
        while parent_node is not None:
            tree = parent_node.owning_tree()
            parent_node = tree.enclosing_node()
        return tree

    @property
    def forest(self) -> Optional["Forest"]:
        root = self.root_tree()
        if root._forest_ref is None:
            return None
        return root._forest_ref()

    def iter_trees(self) -> Iterator["Tree"]:
        """Yield this tree and every tree nested below it, in text order."""
        yield self
        for node in self.walk():
            for tree in node.nested_trees:
                yield from tree.iter_trees()

    def remove_from_jumplist(self) -> None:
        """Evict this tree and all trees nested in it from the focus history."""
        for tree in self.iter_trees():
            if tree.in_jumplist:
                tree.in_jumplist = False
                logger.warning("Evicted %s from the jumplist", tree.label)


Node.model_rebuild()
Tree.model_rebuild()
