"""
Asynchronous subprocess helpers for command-based probes.
"""

import asyncio
import shlex
from typing import NamedTuple


class CommandResult(NamedTuple):
    """Captured output of a finished command."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(command: str | list[str], timeout: float | None = None) -> CommandResult:
    """
    Run a command without a shell and capture its output.

    Args:
        command: Command line (split with shlex) or argument list
        timeout: Seconds to wait before killing the process

    Returns:
        CommandResult; a missing executable yields return code 127,
        a timeout yields -1.
    """
    argv = shlex.split(command) if isinstance(command, str) else list(command)
    if not argv:
        return CommandResult("", "Empty command", 127)

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        return CommandResult("", f"Command not found: {argv[0]}", 127)
    except PermissionError as e:
        return CommandResult("", str(e), 126)

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        return CommandResult("", "Command timed out", -1)
    except asyncio.CancelledError:
        # The caller gave up (probe timeout); do not leave the child running.
        proc.kill()
        await proc.wait()
        raise

    return CommandResult(
        stdout.decode(errors="replace"),
        stderr.decode(errors="replace").strip(),
        proc.returncode or 0,
    )
