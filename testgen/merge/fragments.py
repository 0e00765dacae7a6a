"""Splice generated test methods into an existing test class.

The splice point is the single closing brace of the outermost class. A
generated fragment holding several independently braced methods is not
validated member by member, so a malformed fragment can corrupt the merge.
"""

from __future__ import annotations

import re
from typing import Optional

from ..logging import get_logger
from ..parsing.scanner import UNIT_DECLARATION, brace_delta
from .directives import merge_directives

MERGE_MARKER = "    // Additional test methods"

_FRAGMENT_MEMBERS = re.compile(r"([ \t]*@Test[\s\S]*?)(?=\s*\}\s*$)")

logger = get_logger("merge.fragments")


def find_unit_closing_line(source: str) -> Optional[int]:
    """Return the 0-based index of the line closing the outermost class.

    Depth is tracked from the first class declaration; the last line on which
    it returns to zero wins. Returns None when no class closes.
    """
    closing: Optional[int] = None
    depth = 0
    started = False
    for index, line in enumerate(source.split("\n")):
        if not started and UNIT_DECLARATION.match(line):
            started = True
        if not started:
            continue
        depth += brace_delta(line)
        if depth == 0 and "}" in line:
            closing = index
    return closing


def extract_fragment_members(fragment: str) -> str:
    """Return the methods of a generated class, without its wrapper.

    Takes everything from the first ``@Test`` annotation up to the fragment's
    trailing closing brace. Fragments without ``@Test`` are returned whole.
    """
    match = _FRAGMENT_MEMBERS.search(fragment)
    return match.group(1) if match else fragment


def merge_fragment(existing: str, fragment: str) -> str:
    """Insert the fragment's methods before the existing class's final brace."""
    lines = existing.split("\n")
    closing = find_unit_closing_line(existing)
    if closing is None:
        logger.debug("No class closing brace found; appending fragment")
        return f"{existing}\n\n{fragment}"

    members = extract_fragment_members(fragment)
    return "\n".join([*lines[:closing], "", MERGE_MARKER, members, *lines[closing:]])


def merge_generated(existing: str, fragment: str) -> str:
    """Merge a generated test class into an existing one: imports, then methods."""
    return merge_fragment(merge_directives(existing, fragment), fragment)


__all__ = [
    "MERGE_MARKER",
    "extract_fragment_members",
    "find_unit_closing_line",
    "merge_fragment",
    "merge_generated",
]
