"""Build tool detection, target validation and command construction."""

from __future__ import annotations

import os
import re
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Tuple

from ..config import DEFAULT_BUILD_TIMEOUT
from ..errors import InvalidTargetNameError, UnknownBuildToolError
from ..models import BuildInvocation


class BuildTool(str, Enum):
    """Tool tag selecting the argument shape and the output keyword table."""

    GRADLE = "gradle"
    MAVEN = "maven"
    UNKNOWN = "unknown"


# Checked in order; the first descriptor present decides the tool.
BUILD_DESCRIPTORS: Sequence[Tuple[str, BuildTool]] = (
    ("build.gradle", BuildTool.GRADLE),
    ("build.gradle.kts", BuildTool.GRADLE),
    ("pom.xml", BuildTool.MAVEN),
)

MAX_TARGET_LENGTH = 256

_TARGET_NAME = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*(?:\.[A-Za-z_$][A-Za-z0-9_$]*)*\*?")


def is_valid_target_name(name: str) -> bool:
    """Return True for simple or qualified Java class names, optionally ending in ``*``."""
    return len(name) <= MAX_TARGET_LENGTH and _TARGET_NAME.fullmatch(name) is not None


def validate_target_name(name: str) -> str:
    """Return ``name`` unchanged or raise ``InvalidTargetNameError``."""
    if not is_valid_target_name(name):
        raise InvalidTargetNameError(name)
    return name


def detect_build_tool(root: Path) -> BuildTool:
    """Return the build tool whose descriptor sits at the project root."""
    root = Path(root)
    for descriptor, tool in BUILD_DESCRIPTORS:
        if (root / descriptor).is_file():
            return tool
    raise UnknownBuildToolError(f"No Maven or Gradle build file found in {root}")


def build_command(root: Path, tool: BuildTool) -> str:
    """Return the executable for ``tool``, preferring the project wrapper script."""
    root = Path(root)
    if tool is BuildTool.GRADLE:
        wrapper = "gradlew.bat" if _is_windows() else "./gradlew"
        if (root / "gradlew").exists() or (root / "gradlew.bat").exists():
            return wrapper
        return "gradle"
    if tool is BuildTool.MAVEN:
        wrapper = "mvnw.cmd" if _is_windows() else "./mvnw"
        if (root / "mvnw").exists() or (root / "mvnw.cmd").exists():
            return wrapper
        return "mvn"
    raise UnknownBuildToolError(f"No command known for build tool '{tool.value}'")


def build_arguments(tool: BuildTool, target: Optional[str] = None) -> Tuple[str, ...]:
    """Return the test task arguments, optionally narrowed to a single target."""
    if target is None:
        return ("test",)
    if tool is BuildTool.GRADLE:
        return ("test", "--tests", target, "--info")
    if tool is BuildTool.MAVEN:
        return ("test", f"-Dtest={target}")
    raise UnknownBuildToolError(f"No arguments known for build tool '{tool.value}'")


def build_invocation(
    root: Path,
    tool: BuildTool,
    target: Optional[str] = None,
    *,
    timeout: float = DEFAULT_BUILD_TIMEOUT,
) -> BuildInvocation:
    """Return the invocation running the tests of ``root`` (or one target) with ``tool``."""
    if target is not None:
        validate_target_name(target)
    return BuildInvocation(
        command=build_command(root, tool),
        args=build_arguments(tool, target),
        cwd=str(Path(root)),
        timeout=timeout,
    )


def _is_windows() -> bool:
    return os.name == "nt"


__all__ = [
    "BUILD_DESCRIPTORS",
    "BuildTool",
    "MAX_TARGET_LENGTH",
    "build_arguments",
    "build_command",
    "build_invocation",
    "detect_build_tool",
    "is_valid_target_name",
    "validate_target_name",
]
