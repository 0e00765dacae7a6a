"""Error taxonomy for testgen operations."""

from __future__ import annotations

from typing import Optional, Sequence


class TestGenError(RuntimeError):
    """Base class for fatal testgen conditions surfaced to the caller."""

    __test__ = False


class ConfigError(TestGenError):
    """Raised when the configuration file cannot be parsed."""


class PathResolutionError(TestGenError):
    """Raised when a path cannot be placed inside a known workspace root."""


class UnknownBuildToolError(TestGenError):
    """Raised when no Gradle or Maven build descriptor is present."""


class InvalidTargetNameError(TestGenError):
    """Raised before launch when a test target name is not a valid class name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Invalid test class name {name!r}. Only valid Java class names are allowed."
        )
        self.name = name


class LaunchError(TestGenError):
    """Raised when the build process cannot be started or produced nothing."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode


class BuildTimeoutError(TestGenError):
    """Raised after a build process is terminated for exceeding its timeout."""

    def __init__(self, timeout: float, *, command: Sequence[str] = ()) -> None:
        super().__init__(f"Command timed out after {_format_seconds(timeout)}")
        self.timeout = timeout
        self.command = list(command)


def _format_seconds(seconds: float) -> str:
    if seconds >= 60 and seconds % 60 == 0:
        minutes = int(seconds // 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    return f"{seconds:g} seconds"


__all__ = [
    "BuildTimeoutError",
    "ConfigError",
    "InvalidTargetNameError",
    "LaunchError",
    "PathResolutionError",
    "TestGenError",
    "UnknownBuildToolError",
]
