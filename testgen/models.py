"""Core data models shared across testgen components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple


@dataclass(frozen=True)
class MemberSignature:
    """A method declaration located by the structural scanner.

    Line numbers are 1-based and inclusive.
    """

    name: str
    modifiers: Tuple[str, ...]
    result_type: str
    parameters: str
    start_line: int
    end_line: int

    @property
    def signature(self) -> str:
        prefix = " ".join(self.modifiers)
        return f"{prefix} {self.result_type} {self.name}({self.parameters})".strip()


@dataclass(frozen=True)
class UnitInfo:
    """Top-level view of a class: package, name and methods in declaration order."""

    namespace: str
    name: str
    members: Tuple[MemberSignature, ...] = ()


@dataclass(frozen=True)
class LocationInfo:
    """Package and class metadata derived from a workspace-relative path."""

    namespace: str
    name: str
    is_counterpart: bool
    relative_path: str


@dataclass(frozen=True)
class DirectiveSet:
    """Ordered collection of unique import directives."""

    items: Tuple[str, ...] = ()

    @classmethod
    def from_iterable(cls, directives: Iterable[str]) -> "DirectiveSet":
        ordered = dict.fromkeys(directives)
        return cls(items=tuple(ordered))

    def difference(self, other: "DirectiveSet") -> "DirectiveSet":
        existing = set(other.items)
        return DirectiveSet(items=tuple(item for item in self.items if item not in existing))

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, item: object) -> bool:
        return item in self.items


@dataclass(frozen=True)
class BuildInvocation:
    """A single build tool command, executed without a shell."""

    command: str
    args: Tuple[str, ...]
    cwd: str
    timeout: float

    @property
    def argv(self) -> Sequence[str]:
        return [self.command, *self.args]


@dataclass(frozen=True)
class BuildResult:
    """Classified outcome of a completed build tool run."""

    output: str
    passed: bool
    summary: str
    tool: Optional[str] = None
