"""
Range tracking for nodes.

A node does not own its text range; it reads it from a range tracker that
follows the text across buffer edits. This module declares the interface the
rest of the package consumes and provides `Mark`, an in-memory tracker whose
coordinates are moved explicitly by the owner of the buffer.
"""

from typing import Protocol, runtime_checkable

from snipforest.core.types import Position, pos_cmp
from snipforest.exceptions import StructuralInconsistencyError


@runtime_checkable
class RangeTracker(Protocol):
    """Live text range of a single node."""

    def range(self) -> tuple[Position, Position]:
        """Return (begin, end); raise StructuralInconsistencyError if unreadable."""
        ...

    def boundary_gravity(self, side: int) -> bool:
        """Whether the boundary on `side` (-1 left, 1 right) belongs to the following column."""
        ...

    def is_range_valid(self) -> bool: ...

    def set_active(self, active: bool) -> None: ...


class Mark:
    """
    In-memory range tracker.

    Params:
        begin: Start position (inclusive left edge)
        end: End position
        begin_gravity: Right gravity of the begin boundary
        end_gravity: Right gravity of the end boundary

    The begin boundary defaults to left gravity and the end boundary to right
    gravity, so text typed at the end of a node grows the node.
    """

    def __init__(
        self,
        begin: Position,
        end: Position,
        begin_gravity: bool = False,
        end_gravity: bool = True,
    ):
        self._begin = tuple(begin)
        self._end = tuple(end)
        self._gravity = {-1: begin_gravity, 1: end_gravity}
        self._valid = True
        self.active = False

    def __repr__(self) -> str:
        state = "" if self._valid else ", invalidated"
        return f"Mark({self._begin}, {self._end}{state})"

    def range(self) -> tuple[Position, Position]:
        if not self._valid:
            raise StructuralInconsistencyError(self, "tracked range was invalidated")
        return self._begin, self._end

    def boundary_gravity(self, side: int) -> bool:
        if side not in self._gravity:
            raise ValueError(f"side must be -1 or 1, got {side}")
        return self._gravity[side]

    def set_gravity(self, side: int, right_gravity: bool) -> None:
        if side not in self._gravity:
            raise ValueError(f"side must be -1 or 1, got {side}")
        self._gravity[side] = right_gravity

    def is_range_valid(self) -> bool:
        return self._valid and pos_cmp(self._begin, self._end) <= 0

    def set_active(self, active: bool) -> None:
        """
        Switch the tracked range between its active and passive state.

        Raises:
            StructuralInconsistencyError: If the range was invalidated
        """
        if not self._valid:
            raise StructuralInconsistencyError(self, "cannot update an invalidated range")
        self.active = active

    def move_to(self, begin: Position, end: Position) -> None:
        """Set new coordinates, as the buffer owner does after an edit."""
        self._begin = tuple(begin)
        self._end = tuple(end)

    def invalidate(self) -> None:
        """Mark the underlying range as lost (e.g. its text was deleted)."""
        self._valid = False
