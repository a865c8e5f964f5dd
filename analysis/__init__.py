"""Pure analysis package for dataVision.

This package contains deterministic, testable computations that operate on
in-memory row-sets. It must not import Django or perform any I/O.
"""

from .refinement import refine_rows
from .schema import classify_columns

__all__ = ["classify_columns", "refine_rows"]
