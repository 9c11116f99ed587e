"""
Runs external tools as asyncio subprocesses.
"""

import asyncio
import logging
import shlex
from dataclasses import dataclass

from rich.markup import escape

log = logging.getLogger(__name__)

# Same convention as the shell for "command not found"
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(
    argv: list[str], *, capture_output: bool = False, quiet: bool = False
) -> CommandResult:
    """
    Runs a command and waits for it. Never raises for a failed or missing
    executable; the failure is reported through the result instead.

    Args:
        argv: Program and arguments. No shell is involved.
        capture_output: Collect stdout/stderr instead of inheriting the console.
        quiet: Discard the output entirely.

    If the awaiting task is cancelled the child process is killed.
    """
    # argv may hold '[...]' format selectors
    log.debug(f"Running: [dim]{escape(shlex.join(argv))}[/dim]")
    if capture_output:
        stdout = stderr = asyncio.subprocess.PIPE
    elif quiet:
        stdout = stderr = asyncio.subprocess.DEVNULL
    else:
        stdout = stderr = None

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv, stdout=stdout, stderr=stderr
        )
    except FileNotFoundError:
        log.debug(f"Executable not found: {argv[0]}")
        return CommandResult(EXIT_NOT_FOUND, "", f"{argv[0]}: command not found")
    except OSError as e:
        log.debug(f"Could not start {argv[0]}: {e}")
        return CommandResult(EXIT_NOT_FOUND, "", str(e))

    try:
        out, err = await proc.communicate()
    except asyncio.CancelledError:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        raise

    return CommandResult(
        proc.returncode,
        (out or b"").decode("utf-8", errors="replace"),
        (err or b"").decode("utf-8", errors="replace"),
    )
