"""asyncio subprocess implementation of ProcessRunner."""

import asyncio
from collections.abc import Sequence

from ephemeral_runner.core.protocols import ProcessResult
from ephemeral_runner.logger import get_logger

logger = get_logger(__name__)


class AsyncProcessRunner:
    """Run commands with asyncio.create_subprocess_exec.

    There is no timeout: installers and ``config.cmd`` run until they
    exit.
    """

    def __init__(self, redact: Sequence[str] = ()) -> None:
        """Initialize runner.

        Args:
            redact: Secret strings to mask when commands are logged

        """
        self._redact = tuple(secret for secret in redact if secret)

    def _display(self, command: Sequence[str]) -> str:
        shown = " ".join(command)
        for secret in self._redact:
            shown = shown.replace(secret, "***")
        return shown

    async def run(self, command: Sequence[str]) -> ProcessResult:
        """Run command to completion and capture its output.

        Raises:
            OSError: If the executable cannot be started

        """
        argv = tuple(str(part) for part in command)
        logger.debug("Running: %s", self._display(argv))

        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()

        result = ProcessResult(
            command=argv,
            returncode=process.returncode or 0,
            stdout=stdout.decode("utf-8", errors="ignore") if stdout else "",
            stderr=stderr.decode("utf-8", errors="ignore") if stderr else "",
        )
        logger.debug("   Exit code: %d", result.returncode)
        return result
