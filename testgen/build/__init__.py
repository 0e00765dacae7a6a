"""Run project tests through Gradle or Maven and classify the outcome."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from ..config import BuildConfig
from ..errors import BuildTimeoutError, LaunchError
from ..logging import BUILD_OUTPUT_LOGGER, get_logger
from ..models import BuildInvocation, BuildResult
from .classifier import build_result, classify, summarize
from .runner import ProcessRunner
from .tools import (
    BuildTool,
    build_invocation,
    detect_build_tool,
    is_valid_target_name,
    validate_target_name,
)

logger = get_logger("build")
output_logger = get_logger(BUILD_OUTPUT_LOGGER)

CommandRunner = Callable[[BuildInvocation], str]


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    LAUNCH_ERROR = "launch_error"


class TestRunner:
    """Drives one test run from validation to a classified ``BuildResult``.

    Validation and tool detection happen while ``IDLE``; their errors leave the
    state untouched. A failing build is returned as data, not raised.
    """

    __test__ = False

    def __init__(
        self,
        root: Path,
        *,
        config: BuildConfig | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.root = Path(root)
        self.config = config or BuildConfig()
        self._runner = runner or ProcessRunner().run
        self.state = RunState.IDLE

    def run(self, target: Optional[str] = None) -> BuildResult:
        if target is not None:
            validate_target_name(target)
        tool = detect_build_tool(self.root)
        invocation = build_invocation(self.root, tool, target, timeout=self.config.timeout)

        self.state = RunState.RUNNING
        logger.info("Running %s tests%s", tool.value, f" for {target}" if target else "")
        try:
            output = self._runner(invocation)
        except BuildTimeoutError:
            self.state = RunState.TIMED_OUT
            raise
        except LaunchError:
            self.state = RunState.LAUNCH_ERROR
            raise

        output_logger.debug("%s output:\n%s", tool.value, output)
        result = build_result(
            output,
            tool,
            max_lines=self.config.summary_lines,
            fallback_chars=self.config.summary_fallback_chars,
        )
        self.state = RunState.SUCCEEDED if result.passed else RunState.FAILED
        logger.info("Tests %s", "passed" if result.passed else "failed")
        return result


def run_tests(
    root: Path,
    target: Optional[str] = None,
    *,
    config: BuildConfig | None = None,
    runner: CommandRunner | None = None,
) -> BuildResult:
    """Run all tests of ``root``, or a single test class, and classify the output."""
    return TestRunner(root, config=config, runner=runner).run(target)


__all__ = [
    "BuildTool",
    "ProcessRunner",
    "RunState",
    "TestRunner",
    "build_invocation",
    "build_result",
    "classify",
    "detect_build_tool",
    "is_valid_target_name",
    "run_tests",
    "summarize",
    "validate_target_name",
]
