"""
snipforest exception classes.

This package provides all exception types used throughout snipforest for
consistent error handling and reporting.
"""

from snipforest.exceptions.core import (
    DanglingReferenceError,
    ReentrantFocusError,
    SnipForestError,
    StructuralInconsistencyError,
    TreePlacementError,
)

__all__ = [
    "SnipForestError",
    "StructuralInconsistencyError",
    "DanglingReferenceError",
    "TreePlacementError",
    "ReentrantFocusError",
]
