"""
Exception classes for snipforest.

This module defines specific exception types for the error conditions that
can occur while searching a node forest or moving focus across it.
"""

from typing import Any


class SnipForestError(Exception):
    """Base exception for all snipforest-related errors."""

    pass


class StructuralInconsistencyError(SnipForestError):
    """Raised when a node's tracked range cannot be read or is inconsistent."""

    def __init__(self, node: Any, reason: str):
        """
        Initialize the exception.

        Params:
            node: The offending node (or None if it is no longer reachable)
            reason: Why the node is considered inconsistent
        """
        self.node = node
        self.reason = reason
        label = getattr(node, "label", None) or repr(node)
        super().__init__(f"Structural inconsistency at {label}: {reason}")


class DanglingReferenceError(StructuralInconsistencyError):
    """Raised when a non-owning back-reference points to a collected object."""

    def __init__(self, reason: str):
        """
        Initialize the exception.

        Params:
            reason: Which back-reference could not be resolved
        """
        super().__init__(None, reason)


class TreePlacementError(SnipForestError):
    """Raised when a tree cannot be placed into a forest or host node."""

    def __init__(self, reason: str):
        """
        Initialize the exception.

        Params:
            reason: Why the tree cannot be placed
        """
        self.reason = reason
        super().__init__(f"Cannot place tree: {reason}")


class ReentrantFocusError(SnipForestError):
    """Raised when a focus transition is started while another is in flight."""

    def __init__(self):
        super().__init__("Focus transition already in progress on this forest")
