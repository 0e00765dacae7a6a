"""Declaration extraction built on the structural scanner."""

from __future__ import annotations

import re
from typing import List, Optional

from ..models import UnitInfo
from .scanner import UNIT_DECLARATION, extract_members

_PACKAGE_DECLARATION = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_TEST_ANNOTATION = re.compile(r"^\s*@Test\b")
_TEST_METHOD = re.compile(r"^\s*(?:public|private|protected)?\s*void\s+(\w+)\s*\(")


def extract_package_name(source: str) -> str:
    """Return the declared package, or an empty string for the default package."""
    match = _PACKAGE_DECLARATION.search(source)
    return match.group(1) if match else ""


def extract_class_name(source: str) -> str:
    """Return the first declared class, interface, enum or record name."""
    for line in source.splitlines():
        match = UNIT_DECLARATION.match(line)
        if match:
            return match.group(1)
    return ""


def extract_unit_info(source: str) -> Optional[UnitInfo]:
    """Return the package, class name and methods of ``source``.

    Returns None when no type declaration is present.
    """
    name = extract_class_name(source)
    if not name:
        return None
    return UnitInfo(
        namespace=extract_package_name(source),
        name=name,
        members=tuple(extract_members(source)),
    )


def extract_test_methods(source: str) -> List[str]:
    """Return names of ``void`` methods annotated with ``@Test``, in file order."""
    names: List[str] = []
    awaiting_method = False
    for line in source.splitlines():
        if _TEST_ANNOTATION.match(line):
            awaiting_method = True
            continue
        if awaiting_method:
            match = _TEST_METHOD.match(line)
            if match:
                names.append(match.group(1))
                awaiting_method = False
    return names


__all__ = [
    "extract_class_name",
    "extract_package_name",
    "extract_test_methods",
    "extract_unit_info",
]
