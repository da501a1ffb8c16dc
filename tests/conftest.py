"""
Shared test fixtures for the snipforest test suite.
"""

import pytest

from snipforest import Forest, ForestSettings
from snipforest.core import NodeType
from tests.builders import make_node, make_tree


@pytest.fixture
def events():
    """List that collects (action, label) pairs from a forest."""
    return []


@pytest.fixture
def forest(events):
    """Forest without boundary gravity, recording all transitions into `events`."""
    f = Forest(ForestSettings(respect_boundary_gravity=False))
    f.subscribe(lambda event: events.append((event.action, event.node.label)))
    return f


@pytest.fixture
def nested_forest(forest):
    """
    Two root trees, the first hosting a nested tree.

    T [0-20]: t0 text [0-2], N insert [2-10], t2 text [10-12], E exit [12-20]
      U [3-8] nested in N: u0 insert [3-5], u1 text [5-8]
    R [30-40]: X insert [30-35], x1 text [35-40]
    """
    n = make_node(NodeType.INSERT, 2, 10, "N")
    t = make_tree(
        0,
        20,
        [
            make_node(NodeType.TEXT, 0, 2, "t0"),
            n,
            make_node(NodeType.TEXT, 10, 12, "t2"),
            make_node(NodeType.EXIT, 12, 20, "E"),
        ],
        "T",
    )
    u = make_tree(
        3,
        8,
        [make_node(NodeType.INSERT, 3, 5, "u0"), make_node(NodeType.TEXT, 5, 8, "u1")],
        "U",
    )
    r = make_tree(
        30,
        40,
        [make_node(NodeType.INSERT, 30, 35, "X"), make_node(NodeType.TEXT, 35, 40, "x1")],
        "R",
    )
    forest.add_tree(t)
    forest.add_tree(r)
    forest.add_tree(u, host=n)
    return {"forest": forest, "T": t, "N": n, "U": u, "R": r}
