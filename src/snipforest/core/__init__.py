"""
Core snipforest components.

This package provides the fundamental building blocks: position and path
types, the node type enumeration, range tracking, and the Node and Tree
models.
"""

from snipforest.core.marks import Mark, RangeTracker
from snipforest.core.node import Node, TransitionEvent, Tree
from snipforest.core.types import Affinity, NodePath, NodeType, Position, pos_cmp

__all__ = [
    "Node",
    "Tree",
    "TransitionEvent",
    "Mark",
    "RangeTracker",
    "NodeType",
    "Affinity",
    "Position",
    "NodePath",
    "pos_cmp",
]
