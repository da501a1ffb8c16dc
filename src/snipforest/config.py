"""
Settings for forest lookups.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PolicyName = Literal["outside", "linkable", "interactive"]


class ForestSettings(BaseModel):
    """
    Lookup behaviour of a `Forest`.

    Params:
        respect_boundary_gravity: Treat right-gravity boundaries as belonging
            to the following column when locating positions
        tree_policy: Boundary policy for forest roots and nested trees
        node_policy: Boundary policy for the children of a tree
        prune_invalid_trees: Drop a root tree whose range cannot be read
            instead of failing the lookup
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    respect_boundary_gravity: bool = Field(default=True)
    tree_policy: PolicyName = Field(default="outside")
    node_policy: PolicyName = Field(default="interactive")
    prune_invalid_trees: bool = Field(default=False)
