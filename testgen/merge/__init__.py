"""Reconcile generated test code with existing test classes."""

from .directives import (
    dependency_directives,
    extract_directives,
    find_dependency_units,
    merge_directives,
    missing_directives,
)
from .fragments import (
    extract_fragment_members,
    find_unit_closing_line,
    merge_fragment,
    merge_generated,
)

__all__ = [
    "dependency_directives",
    "extract_directives",
    "extract_fragment_members",
    "find_dependency_units",
    "find_unit_closing_line",
    "merge_directives",
    "merge_fragment",
    "merge_generated",
    "missing_directives",
]
