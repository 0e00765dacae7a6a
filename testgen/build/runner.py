"""Run build tool commands as direct child processes with a hard timeout."""

from __future__ import annotations

import os
import signal
import subprocess
from contextlib import contextmanager, suppress
from typing import Any, Callable, Dict, Iterator, Sequence

from ..errors import BuildTimeoutError, LaunchError
from ..logging import get_logger
from ..models import BuildInvocation

# Seconds to wait for a terminated process before killing it.
_TERMINATE_GRACE = 5.0

logger = get_logger("build.runner")

PopenFactory = Callable[..., subprocess.Popen]


class ProcessRunner:
    """Executes a ``BuildInvocation`` and returns its combined output.

    Arguments are passed as a list and never through a shell. A non-zero exit
    still returns output for classification; only a non-zero exit with no
    output at all is a launch failure.
    """

    def __init__(self, popen: PopenFactory = subprocess.Popen) -> None:
        self._popen = popen

    def run(self, invocation: BuildInvocation) -> str:
        argv = list(invocation.argv)
        logger.debug("Running %s in %s", " ".join(argv), invocation.cwd)
        with self._spawn(argv, invocation.cwd) as process:
            try:
                stdout, stderr = process.communicate(timeout=invocation.timeout)
            except subprocess.TimeoutExpired as exc:
                logger.warning(
                    "Command exceeded %.0f seconds; terminating: %s",
                    invocation.timeout,
                    " ".join(argv),
                )
                raise BuildTimeoutError(invocation.timeout, command=argv) from exc

        returncode = process.returncode
        if returncode != 0 and not stdout and not stderr:
            raise LaunchError(
                f"Command exited with code {returncode}",
                command=argv,
                returncode=returncode,
            )
        logger.debug("Command exited with code %s", returncode)
        return f"{stdout or ''}\n{stderr or ''}"

    @contextmanager
    def _spawn(self, argv: Sequence[str], cwd: str) -> Iterator[subprocess.Popen]:
        try:
            process = self._popen(
                list(argv),
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                shell=False,
                env=os.environ.copy(),
                **_group_options(),
            )
        except OSError as exc:
            raise LaunchError(
                f"Unable to start '{argv[0]}': {exc.strerror or exc}",
                command=argv,
            ) from exc
        completed = False
        try:
            yield process
            completed = True
        finally:
            _terminate(process, abandoned=not completed)


def _group_options() -> Dict[str, Any]:
    """Start the child as the leader of its own process group."""
    if _is_windows():
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def _terminate(process: subprocess.Popen, *, abandoned: bool = False) -> None:
    """Stop ``process`` and everything it spawned, then release its pipes.

    An abandoned run (timeout or error) always has its whole process group
    signalled, even when the leader already exited, since descendants can
    keep the output pipes open. Every wait here is bounded.
    """
    if abandoned or process.poll() is None:
        _signal_group(process, kill=False)
        try:
            process.wait(timeout=_TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            logger.debug("Process %s ignored termination; killing", process.pid)
        _signal_group(process, kill=True)
        try:
            process.communicate(timeout=_TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            logger.warning("Output pipes of process %s still open; closing them", process.pid)
    for stream in (process.stdout, process.stderr):
        if stream is not None and not stream.closed:
            stream.close()


def _signal_group(process: subprocess.Popen, *, kill: bool) -> None:
    if _is_windows():
        if kill:
            subprocess.run(
                ["taskkill", "/F", "/T", "/PID", str(process.pid)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        elif process.poll() is None:
            process.send_signal(signal.CTRL_BREAK_EVENT)
        return
    # The group id equals the leader's pid and outlives the leader while any
    # member is alive. macOS answers EPERM for a group holding only zombies.
    with suppress(ProcessLookupError, PermissionError):
        os.killpg(process.pid, signal.SIGKILL if kill else signal.SIGTERM)


def _is_windows() -> bool:
    return os.name == "nt"


__all__ = ["ProcessRunner"]
