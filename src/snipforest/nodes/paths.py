"""
Path assignment for node trees.

Every node carries the sequence of child indices leading from its tree's
root to itself. Paths are stamped once per tree and again for a subtree
whenever a container regenerates its children.
"""

import logging
from typing import TYPE_CHECKING

from snipforest.core.types import NodePath

if TYPE_CHECKING:
    from snipforest.core.node import Node

logger = logging.getLogger(__name__)


def assign_paths(root: "Node", prefix: NodePath = ()) -> None:
    """
    Stamp `root` and every node below it with its path.

    Nested trees hosted by a node are separate trees and are not descended
    into; their own root keeps the empty path.

    Params:
        root: Subtree root to stamp
        prefix: Path of `root` itself
    """
    prefix = tuple(prefix)
    root.path = prefix
    for index, child in enumerate(root.children):
        assign_paths(child, prefix + (index,))
    if not prefix:
        logger.debug("Assigned paths below %s", root.label)
