"""
Position lookup over ordered node lists.

`binarysearch_pos` finds the node whose range contains the left edge of a
buffer position. The left edge is used because text inserted at a position
pushes the character at that position to the right.

How a position exactly on a boundary is treated is decided by a boundary
policy:

- `outside` treats boundary positions as lying between nodes. It is meant for
  lists of independent, possibly disjoint trees, where a new tree should be
  placed next to an existing one rather than inside it.
- `linkable` and `interactive` assume contiguous siblings and, on a shared
  boundary, prefer whichever neighbour can hold a nested tree or focus.
"""

import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

from attrs import frozen

from snipforest.core.types import Position, pos_cmp
from snipforest.exceptions import StructuralInconsistencyError

if TYPE_CHECKING:
    from snipforest.core.node import Node

logger = logging.getLogger(__name__)

BoundaryPolicy = Callable[[int, int, "Node"], tuple[bool, bool]]


class SearchStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@frozen
class SearchResult:
    """
    Outcome of a position search.

    Params:
        status: Whether a node was found, not found, or the search failed
        index: Index of the found node, the insertion index, or the index of
            the node whose range could not be read
        node: Found node, or the offending node on failure
        error: The range error that aborted the search
    """

    status: SearchStatus
    index: int
    node: Any = None
    error: StructuralInconsistencyError | None = None

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.FOUND

    @property
    def failed(self) -> bool:
        return self.status is SearchStatus.FAILED


def _outside(cmp_to: int, cmp_from: int, _mid: "Node") -> tuple[bool, bool]:
    return cmp_to >= 0, cmp_from <= 0


def prefer_nodes(
    prefer: Callable[["Node"], bool], reject: Callable[["Node"], bool]
) -> BoundaryPolicy:
    """
    Build a policy that resolves boundary ties towards preferred nodes.

    Params:
        prefer: Whether a node is certainly worth landing in
        reject: Whether a node is certainly not worth landing in

    Returns:
        Boundary policy returning (continue_behind, continue_before)
    """

    def policy(cmp_to: int, cmp_from: int, mid: "Node") -> tuple[bool, bool]:
        reject_mid = reject(mid)
        if cmp_to == 0 and reject_mid:
            return True, False
        if cmp_from == 0 and reject_mid:
            return False, True
        if (cmp_to == 0 or cmp_from == 0) and prefer(mid):
            return False, False
        return cmp_to >= 0, cmp_from < 0

    return policy


BINARYSEARCH_PREFERENCE: dict[str, BoundaryPolicy] = {
    "outside": _outside,
    "linkable": prefer_nodes(
        lambda node: node.type_tag().is_linkable,
        lambda node: node.type_tag().is_non_linkable,
    ),
    "interactive": prefer_nodes(
        lambda node: node.type_tag().is_interactive,
        lambda node: node.type_tag().is_non_interactive,
    ),
}


def resolve_policy(policy: str | BoundaryPolicy) -> BoundaryPolicy:
    """Look up a named boundary policy, passing callables through."""
    if callable(policy):
        return policy
    try:
        return BINARYSEARCH_PREFERENCE[policy]
    except KeyError:
        raise ValueError(
            f"Unknown boundary policy '{policy}'. "
            f"Available: {sorted(BINARYSEARCH_PREFERENCE)}"
        ) from None


def _effective_range(node: "Node", respect_boundary_gravity: bool) -> tuple[Position, Position]:
    begin, end = node.mark.range()
    if respect_boundary_gravity:
        # A right-gravity boundary sits on the right edge of its column, which
        # is the left edge of the next one.
        if node.mark.boundary_gravity(-1):
            begin = (begin[0], begin[1] + 1)
        if node.mark.boundary_gravity(1):
            end = (end[0], end[1] + 1)
    return begin, end


def binarysearch_pos(
    nodes: Sequence["Node"],
    pos: Position,
    respect_boundary_gravity: bool = False,
    policy: str | BoundaryPolicy = "outside",
) -> SearchResult:
    """
    Find the node in `nodes` that the left edge of `pos` lies in.

    Params:
        nodes: Nodes ordered by range start; they need not be contiguous
        pos: (row, column) position to look up
        respect_boundary_gravity: Shift each boundary with right gravity one
            column to the right before comparing
        policy: Boundary policy name or callable

    Returns:
        SearchResult; FOUND with the node and its index, NOT_FOUND with the
        index a node at `pos` would be inserted at, or FAILED with the index
        of the node whose range could not be read.
    """
    resolve = resolve_policy(policy)
    if not nodes:
        return SearchResult(SearchStatus.NOT_FOUND, 0)

    left, right = 0, len(nodes) - 1
    while True:
        mid = left + (right - left) // 2
        mid_node = nodes[mid]
        try:
            mid_from, mid_to = _effective_range(mid_node, respect_boundary_gravity)
        except StructuralInconsistencyError as e:
            logger.debug("Search aborted at index %d: %s", mid, e)
            return SearchResult(SearchStatus.FAILED, mid, mid_node, e)

        cont_behind, cont_before = resolve(
            pos_cmp(pos, mid_to), pos_cmp(pos, mid_from), mid_node
        )
        if cont_behind:
            left = mid + 1
            if left > right:
                return SearchResult(SearchStatus.NOT_FOUND, mid + 1)
        elif cont_before:
            right = mid - 1
            if left > right:
                return SearchResult(SearchStatus.NOT_FOUND, mid)
        else:
            return SearchResult(SearchStatus.FOUND, mid, mid_node)
