"""Process executor: runs a command with discrete arguments and captures its output."""

import subprocess
import threading
from dataclasses import dataclass
from typing import Protocol, Sequence

import structlog

logger = structlog.get_logger()


class ProcessExecutionError(Exception):
    """Raised when a command cannot be started."""


class ProcessTimeoutError(ProcessExecutionError):
    """Raised when a command runs past its timeout and is killed."""


@dataclass(frozen=True)
class ProcessResult:
    stdout: str
    stderr: str
    returncode: int


class ProcessExecutor(Protocol):
    def execute(self, command: str, args: Sequence[str]) -> ProcessResult: ...


class SubprocessExecutor:
    """Run commands with subprocess.run, never through a shell.

    At most ``max_concurrency`` children run at once; extra callers block until
    a slot frees up. A non-zero exit code is returned in the result, not raised.
    """

    def __init__(self, timeout: float | None = None, max_concurrency: int | None = None) -> None:
        self.timeout = timeout
        self._slots = threading.BoundedSemaphore(max_concurrency) if max_concurrency else None

    def execute(self, command: str, args: Sequence[str]) -> ProcessResult:
        if self._slots is None:
            return self._run(command, args)
        with self._slots:
            return self._run(command, args)

    def _run(self, command: str, args: Sequence[str]) -> ProcessResult:
        argv = [command, *args]
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            logger.error("executor.timeout", command=command, timeout=self.timeout)
            raise ProcessTimeoutError(f"{command} timed out after {self.timeout}s") from e
        except OSError as e:
            logger.error("executor.start_failed", command=command, error=str(e))
            raise ProcessExecutionError(f"Could not start {command}: {e}") from e
        return ProcessResult(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )
