"""Derive a pass/fail verdict and a short summary from build tool output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..config import DEFAULT_SUMMARY_FALLBACK_CHARS, DEFAULT_SUMMARY_LINES
from ..models import BuildResult
from .tools import BuildTool

TRUNCATION_MARKER = "... (truncated)"

_SUMMARY_KEYWORDS: Sequence[str] = (
    "test",
    "passed",
    "failed",
    "success",
    "failure",
    "error",
    "build",
    "running",
)
_PROGRESS_PREFIX = ">"


@dataclass(frozen=True)
class SignalTable:
    """Lower-case keywords that decide the verdict for one build tool.

    Any success marker passes the run outright. The generic marker passes it
    when none of its vetoes appear. Otherwise the run passes only when no
    failure marker is present.
    """

    success_markers: Sequence[str] = ()
    generic_marker: Optional[str] = None
    generic_vetoes: Sequence[str] = ()
    failure_markers: Sequence[str] = ()

    def passed(self, lowered: str) -> bool:
        if any(marker in lowered for marker in self.success_markers):
            return True
        if (
            self.generic_marker is not None
            and self.generic_marker in lowered
            and not any(veto in lowered for veto in self.generic_vetoes)
            and not any(marker in lowered for marker in self.failure_markers)
        ):
            return True
        return not any(marker in lowered for marker in self.failure_markers)


SIGNAL_TABLES: Dict[BuildTool, SignalTable] = {
    BuildTool.GRADLE: SignalTable(
        success_markers=("build successful",),
        generic_marker="test",
        generic_vetoes=("failed", "failure"),
        failure_markers=("build failed", "test failed", "failures:"),
    ),
    BuildTool.MAVEN: SignalTable(
        success_markers=("build success",),
        failure_markers=("build failure", "tests run:", "failures:"),
    ),
    BuildTool.UNKNOWN: SignalTable(
        failure_markers=("fail", "error"),
    ),
}


def classify(output: str, tool: BuildTool | str | None) -> bool:
    """Return True when ``output`` indicates a passing test run."""
    table = SIGNAL_TABLES[_coerce_tool(tool)]
    return table.passed(output.lower())


def summarize(
    output: str,
    *,
    max_lines: int = DEFAULT_SUMMARY_LINES,
    fallback_chars: int = DEFAULT_SUMMARY_FALLBACK_CHARS,
) -> str:
    """Keep only test and build related lines, capped at ``max_lines``.

    Falls back to the head of the raw output when no line qualifies.
    """
    relevant: List[str] = []
    for line in output.split("\n"):
        lowered = line.lower()
        if any(keyword in lowered for keyword in _SUMMARY_KEYWORDS) or line.strip().startswith(
            _PROGRESS_PREFIX
        ):
            relevant.append(line)

    if len(relevant) > max_lines:
        return "\n".join(relevant[:max_lines]) + f"\n{TRUNCATION_MARKER}"
    return "\n".join(relevant) or output[:fallback_chars]


def build_result(
    output: str,
    tool: BuildTool | str | None,
    *,
    max_lines: int = DEFAULT_SUMMARY_LINES,
    fallback_chars: int = DEFAULT_SUMMARY_FALLBACK_CHARS,
) -> BuildResult:
    resolved = _coerce_tool(tool)
    return BuildResult(
        output=output,
        passed=classify(output, resolved),
        summary=summarize(output, max_lines=max_lines, fallback_chars=fallback_chars),
        tool=resolved.value,
    )


def _coerce_tool(tool: BuildTool | str | None) -> BuildTool:
    if isinstance(tool, BuildTool):
        return tool
    if tool is None:
        return BuildTool.UNKNOWN
    try:
        return BuildTool(tool.lower())
    except ValueError:
        return BuildTool.UNKNOWN


__all__ = [
    "SIGNAL_TABLES",
    "SignalTable",
    "TRUNCATION_MARKER",
    "build_result",
    "classify",
    "summarize",
]
