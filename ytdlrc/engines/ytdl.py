"""
Builds and runs yt-dlp (youtube-dl compatible) command lines.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ytdlrc.models.config import SubtitleOptions
from ytdlrc.utils.process import CommandResult, run_command

log = logging.getLogger(__name__)

# Forced on every call: some hosts have broken IPv6 routes to the source
NETWORK_ARGS = ["--force-ipv4"]


@dataclass(frozen=True)
class DownloadOptions:
    """Everything the fetch engine needs for one full download."""

    format: str
    output: Path
    archive_path: Path
    exec_command: str
    subtitles: SubtitleOptions = field(default_factory=SubtitleOptions)
    xattrs: bool = False
    debug_args: tuple[str, ...] = ("--quiet",)


class YoutubeDL:
    """Thin wrapper around the fetch engine executable."""

    def __init__(self, binary: str = "yt-dlp"):
        self.binary = binary

    def build_metadata_args(self, field_name: str, item_index: int, url: str) -> list[str]:
        """Arguments that print a single metadata field for one playlist item."""
        return [
            self.binary,
            *NETWORK_ARGS,
            "--ignore-config",
            "--get-filename",
            "--output",
            f"%({field_name})s",
            "--playlist-items",
            str(item_index),
            "--restrict-filenames",
            url,
        ]

    def build_download_args(self, options: DownloadOptions, url: str) -> list[str]:
        """Arguments for a best-effort download of every item behind `url`."""
        args = [
            self.binary,
            *NETWORK_ARGS,
            "--continue",
            "--download-archive",
            str(options.archive_path),
            "--exec",
            options.exec_command,
            "--format",
            options.format,
            "--ignore-config",
            "--ignore-errors",
            "--no-overwrites",
            "--output",
            str(options.output),
            "--restrict-filenames",
            "--write-description",
            "--write-info-json",
            "--write-thumbnail",
            *options.debug_args,
            *options.subtitles.to_args(),
        ]
        if options.xattrs:
            args.append("--xattrs")
        args.append(url)
        return args

    async def get_field(self, field_name: str, item_index: int, url: str) -> str:
        """
        Returns the value of `field_name` for the Nth item of `url`, or an empty
        string if the engine failed or printed nothing.
        """
        result = await run_command(
            self.build_metadata_args(field_name, item_index, url), capture_output=True
        )
        if not result.ok:
            log.debug(
                f"Metadata lookup exited {result.returncode}: "
                f"{result.stderr.strip() or 'no error output'}"
            )
            return ""
        for line in result.stdout.splitlines():
            if line.strip():
                return line.strip()
        return ""

    async def download(self, options: DownloadOptions, url: str) -> CommandResult:
        """Runs the download with the engine's output going to the console."""
        return await run_command(self.build_download_args(options, url))
