"""
Builds and runs rclone command lines.
"""

import logging
import shlex
from pathlib import Path

from ytdlrc.utils.process import CommandResult, run_command
from ytdlrc.utils.version import extract_rclone_version

log = logging.getLogger(__name__)

# yt-dlp replaces this token in --exec with the shell-quoted file path
EXEC_PLACEHOLDER = "{}"


class Rclone:
    """Relocation engine: moves or copies staged files to the remote."""

    def __init__(
        self,
        config_path: Path,
        mode: str = "move",
        flags: list[str] | None = None,
        debug_args: list[str] | None = None,
        binary: str = "rclone",
    ):
        self.config_path = config_path
        self.mode = mode
        self.flags = list(flags or [])
        self.debug_args = list(debug_args or ["-q"])
        self.binary = binary

    @classmethod
    def from_config(cls, config) -> "Rclone":
        return cls(
            config.rclone_config_path,
            mode=config.rclone_command,
            flags=config.rclone_flags,
            debug_args=config.rclone_debug_args,
            binary=config.rclone_binary,
        )

    def _trailing_args(self) -> list[str]:
        return ["--config", str(self.config_path), *self.flags, *self.debug_args]

    def build_transfer_args(self, source: str, destination: str) -> list[str]:
        return [self.binary, self.mode, source, destination, *self._trailing_args()]

    def build_exec_command(self, destination: str) -> str:
        """
        Shell command for the fetch engine's per-file hook. Every token is
        quoted except the placeholder the engine substitutes itself.
        """
        head = shlex.join([self.binary, self.mode])
        tail = shlex.join([destination, *self._trailing_args()])
        return f"{head} {EXEC_PLACEHOLDER} {tail}"

    async def relocate(self, source: Path | str, destination: str) -> CommandResult:
        """Moves or copies `source` (file or directory) into `destination`."""
        return await run_command(self.build_transfer_args(str(source), destination))

    async def get_version(self) -> str | None:
        """Returns the raw version token reported by `rclone --version`."""
        result = await run_command([self.binary, "--version"], capture_output=True)
        if not result.ok:
            log.debug(f"rclone --version exited {result.returncode}")
            return None
        return extract_rclone_version(result.stdout)

    async def is_reachable(self, destination: str) -> bool:
        """Probes the remote with `rclone about`; only the exit code matters."""
        result = await run_command(
            [self.binary, "about", destination, "--config", str(self.config_path)],
            quiet=True,
        )
        return result.ok
