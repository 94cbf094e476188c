"""Command execution for the module tool.

fetch() talks to the external tool only through the CommandRunner protocol,
so tests can substitute a runner that returns canned output.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Raised when a command exits with a nonzero status."""

    def __init__(self, returncode: int, output: bytes):
        super().__init__(f"exit status {returncode}")
        self.returncode = returncode
        self.output = output


class CommandTimeoutError(Exception):
    """Raised when a command does not finish within its timeout."""

    def __init__(self, timeout: float, output: bytes = b""):
        super().__init__(f"command timed out after {timeout}s")
        self.timeout = timeout
        self.output = output


class CommandRunner(Protocol):
    """Runs the module tool and returns its combined output."""

    async def run(self, args: list[str], cwd: Path) -> bytes:
        """Run the tool with args in cwd.

        Raises:
            CommandError: Nonzero exit status
            CommandTimeoutError: Timeout expired
            OSError: The process could not be started
        """
        ...


class SubprocessRunner:
    """Runs an executable as an asyncio subprocess.

    stdout and stderr are merged into a single stream. The process is killed
    if the timeout expires or the awaiting task is cancelled.
    """

    def __init__(self, executable: str, timeout: float | None = None):
        self.executable = executable
        self.timeout = timeout

    async def run(self, args: list[str], cwd: Path) -> bytes:
        cmd = [self.executable, *args]
        logger.debug(f"Running: {shlex.join(cmd)} (cwd={cwd})")

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=str(cwd),
        )

        try:
            output, _ = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            await _terminate(proc)
            raise CommandTimeoutError(self.timeout or 0.0)
        except asyncio.CancelledError:
            await _terminate(proc)
            raise

        if proc.returncode != 0:
            raise CommandError(proc.returncode or -1, output or b"")

        return output or b""

    def __repr__(self) -> str:
        return f"SubprocessRunner({self.executable})"


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Kill a running process and reap it."""
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        return
    await proc.wait()
