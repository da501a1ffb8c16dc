"""
Core type definitions for snipforest.

This module contains the position and path aliases shared by every module,
and the closed enumeration of node types together with their linkability
and interactivity classification.
"""

from enum import Enum

Position = tuple[int, int]

NodePath = tuple[int, ...]


def pos_cmp(a: Position, b: Position) -> int:
    """
    Compare two (row, column) positions.

    Params:
        a: Left-hand position
        b: Right-hand position

    Returns:
        -1 if a is before b, 0 if equal, 1 if a is after b
    """
    if a[0] != b[0]:
        return -1 if a[0] < b[0] else 1
    if a[1] != b[1]:
        return -1 if a[1] < b[1] else 1
    return 0


class Affinity(Enum):
    """Whether a node type certainly has, certainly lacks, or may have a trait."""

    ALWAYS = "always"
    NEVER = "never"
    MAYBE = "maybe"  # depends on the node's current content


class NodeType(Enum):
    """
    Closed set of node variants.

    Every member declares its linkability (can hold a nested tree expanded
    at its position) and interactivity (can hold focus). A member without
    both declarations fails at class definition.
    """

    TEXT = ("text", Affinity.NEVER, Affinity.NEVER)
    FUNCTION = ("function", Affinity.NEVER, Affinity.NEVER)
    INSERT = ("insert", Affinity.ALWAYS, Affinity.ALWAYS)
    EXIT = ("exit", Affinity.ALWAYS, Affinity.ALWAYS)
    SNIPPET = ("snippet", Affinity.MAYBE, Affinity.MAYBE)
    SNIPPET_NODE = ("snippet_node", Affinity.MAYBE, Affinity.MAYBE)
    DYNAMIC = ("dynamic", Affinity.MAYBE, Affinity.MAYBE)
    CHOICE = ("choice", Affinity.MAYBE, Affinity.MAYBE)
    RESTORE = ("restore", Affinity.MAYBE, Affinity.MAYBE)

    def __init__(self, tag: str, linkability: Affinity, interactivity: Affinity):
        self.tag = tag
        self.linkability = linkability
        self.interactivity = interactivity

    @property
    def is_linkable(self) -> bool:
        return self.linkability is Affinity.ALWAYS

    @property
    def is_non_linkable(self) -> bool:
        return self.linkability is Affinity.NEVER

    @property
    def is_interactive(self) -> bool:
        return self.interactivity is Affinity.ALWAYS

    @property
    def is_non_interactive(self) -> bool:
        return self.interactivity is Affinity.NEVER
