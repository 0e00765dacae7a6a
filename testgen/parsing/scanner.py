"""Line-oriented structural scanner for Java-like sources.

The scanner is a small finite-state machine. ``ScanState`` carries the
current phase plus the data needed to finish a pending method, and
``transition`` maps ``(state, line)`` to ``(state, event)``. It never raises:
malformed input simply yields fewer events.

Known limitations:

* braces inside string literals or comments on code lines are counted;
* a method whose declared return type equals its own name is treated as a
  constructor and dropped;
* a declaration whose parameter list spans several lines, or that follows an
  annotation with nested parentheses on the same line, is not recognised.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from ..models import MemberSignature

_MODIFIERS = (
    "public",
    "private",
    "protected",
    "static",
    "final",
    "abstract",
    "synchronized",
    "native",
    "strictfp",
    "default",
)

UNIT_DECLARATION = re.compile(
    r"^\s*(?:(?:public|private|protected|abstract|final|static|sealed|non-sealed|strictfp)\s+)*"
    r"(?:class|interface|enum|record)\s+(\w+)"
)

_MEMBER_DECLARATION = re.compile(
    r"^\s*((?:(?:" + "|".join(_MODIFIERS) + r")\s+)*)"
    r"(?:<[^()]*?>\s*)?"
    r"([\w.]+(?:<[^()]*?>)?(?:\[\])*)\s+"
    r"(\w+)\s*\(([^)]*)\)\s*"
    r"(?:throws\s+[\w\s,.]+)?"
)

_ANNOTATION = re.compile(r"^\s*@")
_LEADING_ANNOTATIONS = re.compile(r"^\s*(?:@[\w.]+(?:\([^)]*\))?\s*)+")

# Statement keywords that can look like "<type> <name>(" at the start of a line.
_STATEMENT_KEYWORDS = frozenset({"return", "new", "else", "throw", "case", "yield"})


class Phase(Enum):
    SEEKING_UNIT = "seeking_unit"
    SEEKING_MEMBER = "seeking_member"
    IN_BODY = "in_body"


class EventKind(Enum):
    MEMBER_START = "member_start"
    MEMBER_END = "member_end"
    SKIP = "skip"


@dataclass(frozen=True)
class ScanState:
    phase: Phase = Phase.SEEKING_UNIT
    depth: int = 0
    opened: bool = False
    pending: Optional[MemberSignature] = None


@dataclass(frozen=True)
class ScanEvent:
    kind: EventKind
    line: int
    member: Optional[MemberSignature] = None


INITIAL_STATE = ScanState()


def brace_delta(line: str) -> int:
    """Return the net change in brace depth contributed by ``line``."""
    return line.count("{") - line.count("}")


def is_comment_or_blank(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith(("//", "*", "/*"))


def match_member(line: str, line_number: int) -> Optional[MemberSignature]:
    """Return a candidate method declared on ``line``, or None.

    Constructors are filtered by the return-type-equals-name heuristic.
    """
    match = _MEMBER_DECLARATION.match(_LEADING_ANNOTATIONS.sub("", line, count=1))
    if not match:
        return None
    modifiers_text, result_type, name, parameters = match.groups()
    if result_type == name:
        return None
    # A modifier in the type slot means the declaration had no return type.
    if result_type in _MODIFIERS or result_type in _STATEMENT_KEYWORDS:
        return None
    modifiers = tuple(modifiers_text.split())
    return MemberSignature(
        name=name,
        modifiers=modifiers,
        result_type=result_type,
        parameters=parameters.strip(),
        start_line=line_number,
        end_line=line_number,
    )


def transition(
    state: ScanState, line: str, line_number: int
) -> Tuple[ScanState, Optional[ScanEvent]]:
    """Advance the scanner by one line."""
    if is_comment_or_blank(line):
        return state, ScanEvent(EventKind.SKIP, line_number)

    if state.phase is Phase.IN_BODY:
        return _advance_body(state, line, line_number)

    if UNIT_DECLARATION.match(_LEADING_ANNOTATIONS.sub("", line, count=1)):
        # Nested type openings are skipped once the outer class is found.
        return replace(state, phase=Phase.SEEKING_MEMBER), ScanEvent(EventKind.SKIP, line_number)

    if state.phase is Phase.SEEKING_UNIT:
        return state, ScanEvent(EventKind.SKIP, line_number)

    member = match_member(line, line_number)
    if member is None:
        if _ANNOTATION.match(line):
            return state, ScanEvent(EventKind.SKIP, line_number)
        return state, None

    if "{" in line:
        depth = brace_delta(line)
        if depth <= 0:
            return state, ScanEvent(EventKind.MEMBER_END, line_number, member)
        return (
            ScanState(phase=Phase.IN_BODY, depth=depth, opened=True, pending=member),
            ScanEvent(EventKind.MEMBER_START, line_number, member),
        )

    if line.rstrip().endswith(";"):
        # Abstract and interface methods have no body.
        return state, ScanEvent(EventKind.MEMBER_END, line_number, member)

    return (
        ScanState(phase=Phase.IN_BODY, depth=0, opened=False, pending=member),
        ScanEvent(EventKind.MEMBER_START, line_number, member),
    )


def _advance_body(
    state: ScanState, line: str, line_number: int
) -> Tuple[ScanState, Optional[ScanEvent]]:
    depth = state.depth + brace_delta(line)
    opened = state.opened or "{" in line
    if opened and depth <= 0 and state.pending is not None:
        finished = replace(state.pending, end_line=line_number)
        return (
            ScanState(phase=Phase.SEEKING_MEMBER),
            ScanEvent(EventKind.MEMBER_END, line_number, finished),
        )
    return replace(state, depth=max(depth, 0), opened=opened), None


def scan(source: str) -> Iterator[ScanEvent]:
    """Lazily yield scanner events for ``source``.

    A method still open when the input ends is dropped.
    """
    state = INITIAL_STATE
    for index, line in enumerate(source.splitlines()):
        state, event = transition(state, line, index + 1)
        if event is not None:
            yield event


def extract_members(source: str) -> List[MemberSignature]:
    """Return completed method signatures in declaration order."""
    return [
        event.member
        for event in scan(source)
        if event.kind is EventKind.MEMBER_END and event.member is not None
    ]


__all__ = [
    "EventKind",
    "INITIAL_STATE",
    "Phase",
    "ScanEvent",
    "ScanState",
    "UNIT_DECLARATION",
    "brace_delta",
    "extract_members",
    "is_comment_or_blank",
    "match_member",
    "scan",
    "transition",
]
