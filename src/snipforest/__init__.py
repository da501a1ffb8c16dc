"""
snipforest - search and focus management for nested interactive node trees

snipforest locates the node under a buffer position and moves input focus
between nodes of nested trees embedded in a text buffer.
"""

from importlib.metadata import version

from snipforest.config import ForestSettings
from snipforest.core import Mark, Node, NodeType, Tree
from snipforest.forest import Forest

__version__ = version("snipforest")

__all__ = [
    "__version__",
    "Forest",
    "ForestSettings",
    "Node",
    "Tree",
    "NodeType",
    "Mark",
]
