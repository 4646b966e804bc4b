"""External process capability used by every pipeline component.

All interaction with interpreters, pip and git goes through a
``ProcessRunner`` so the pipeline can be exercised with a fake runner.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence

from incubator.models import ProcessResult
from incubator.utils import run_command

logger = logging.getLogger(__name__)

#: Conventional shell exit status for "command not found".
EXIT_NOT_FOUND = 127


class ProcessRunner(Protocol):
    """Run one command to completion and capture its output.

    Implementations never raise for process failures; they report them
    through ``ProcessResult.exit_code`` and ``stderr``.
    """

    async def run(
        self,
        command: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> ProcessResult: ...


class SubprocessRunner:
    """``ProcessRunner`` backed by ``asyncio`` subprocesses."""

    def __init__(self, default_timeout: float = 900) -> None:
        self.default_timeout = default_timeout

    async def run(
        self,
        command: Sequence[str],
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        effective = timeout if timeout is not None else self.default_timeout
        logger.debug("Running %s (cwd=%s)", " ".join(command), cwd)
        try:
            code, stdout, stderr = await run_command(command, cwd=cwd, timeout=effective)
        except OSError as exc:
            return ProcessResult(
                exit_code=EXIT_NOT_FOUND,
                stderr=f"Could not start {command[0]!r}: {exc}",
            )
        return ProcessResult(exit_code=code, stdout=stdout, stderr=stderr)


def describe_failure(command: Sequence[str], result: ProcessResult) -> str:
    """Build a one-line message for a failed command."""
    detail = result.stderr or result.stdout or "no output"
    return f"{' '.join(command)} exited with {result.exit_code}: {detail}"
