"""Utility functions."""

from commutelogit.utils._validation import (
    check_finite,
    check_nonnegative,
    check_positive,
    require_columns,
)

__all__ = [
    "check_finite",
    "check_nonnegative",
    "check_positive",
    "require_columns",
]
