"""Structural scanning and declaration extraction for Java sources."""

from .extractor import (
    extract_class_name,
    extract_package_name,
    extract_test_methods,
    extract_unit_info,
)
from .scanner import EventKind, ScanEvent, ScanState, extract_members, scan, transition

__all__ = [
    "EventKind",
    "ScanEvent",
    "ScanState",
    "extract_class_name",
    "extract_members",
    "extract_package_name",
    "extract_test_methods",
    "extract_unit_info",
    "scan",
    "transition",
]
