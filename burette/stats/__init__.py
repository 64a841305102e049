"""
Statistical utilities for titration curve diagnostics.

All functions operate on arrays and primitive types; no chemistry-specific
logic is included.

Modules:
    regression:
        Linear regression with standard error and Student-t confidence
        intervals.
"""

from .regression import linear_regression

__all__ = ["linear_regression"]
