"""mdsel CLI executor service."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from mdsel_claude.models import ExecutionRequest, ExecutionResult

logger = logging.getLogger(__name__)

# Exit code reported when the CLI could not be started at all.
SPAWN_FAILED_EXIT_CODE = -1


class CliExecutor:
    """Run the mdsel CLI and capture its output verbatim."""

    def __init__(self, binary: str = "mdsel") -> None:
        self.binary = binary

    async def execute(self, operation: str, args: Sequence[str]) -> ExecutionResult:
        """Run ``<binary> <operation> <args...>`` and wait for it to exit.

        Start failures come back as a failed ``ExecutionResult`` instead of
        raising. No timeout is applied here; if the awaiting task is
        cancelled the child is killed and reaped before the cancellation
        propagates.
        """
        request = ExecutionRequest(operation=operation, args=tuple(args))
        cmd = request.argv(self.binary)
        logger.debug("Running %s", cmd)

        # Use exec, not shell, so selectors and paths are passed literally
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            logger.warning("mdsel CLI not found: %s", self.binary)
            return ExecutionResult(
                stdout="",
                stderr=f"mdsel CLI not found: {self.binary}. Install with: npm install -g mdsel",
                exit_code=SPAWN_FAILED_EXIT_CODE,
            )
        except OSError as e:
            logger.warning("Failed to start mdsel CLI %s: %s", self.binary, e)
            return ExecutionResult(stdout="", stderr=str(e), exit_code=SPAWN_FAILED_EXIT_CODE)

        try:
            stdout_bytes, stderr_bytes = await proc.communicate()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()
            raise

        exit_code = proc.returncode if proc.returncode is not None else SPAWN_FAILED_EXIT_CODE
        if exit_code != 0:
            logger.info("mdsel %s exited with %d", operation, exit_code)

        return ExecutionResult(
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
            exit_code=exit_code,
        )
