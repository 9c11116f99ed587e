"""
Downloads one queue entry and relocates everything it produced to the remote.
"""

import logging

from ytdlrc.core.environment import EnvironmentReport
from ytdlrc.engines.rclone import Rclone
from ytdlrc.engines.ytdl import DownloadOptions, YoutubeDL
from ytdlrc.models.config import ArchiveConfig
from ytdlrc.models.stats import RunStats
from ytdlrc.utils.path import is_empty_dir, remote_join
from ytdlrc.utils.structured_logger import EntryLogger

log = logging.getLogger(__name__)


class DownloadOrchestrator:
    """
    Drives download -> per-file relocation -> sidecar sweep -> staging cleanup
    for a single directory key. Engine failures are logged and counted but never
    stop the run.
    """

    def __init__(
        self,
        config: ArchiveConfig,
        report: EnvironmentReport,
        ytdl: YoutubeDL,
        rclone: Rclone,
        stats: RunStats,
        events: EntryLogger | None = None,
    ):
        self.config = config
        self.report = report
        self.ytdl = ytdl
        self.rclone = rclone
        self.stats = stats
        self.events = events

    def build_download_options(self, directory_key: str) -> DownloadOptions:
        destination = remote_join(self.config.rclone_destination, directory_key)
        return DownloadOptions(
            format=self.config.ytdl_format,
            output=self.config.download_path
            / directory_key
            / self.config.ytdl_output_template,
            archive_path=self.config.archive_list_path,
            exec_command=self.rclone.build_exec_command(destination),
            subtitles=self.config.subtitles,
            xattrs=self.report.xattrs,
            debug_args=tuple(self.config.ytdl_debug_args),
        )

    async def process(self, directory_key: str, url: str) -> None:
        destination = remote_join(self.config.rclone_destination, directory_key)
        staged_dir = self.config.download_path / directory_key

        result = await self.ytdl.download(self.build_download_options(directory_key), url)
        if not result.ok:
            # Best-effort mode: some items may still have been fetched
            self.stats.downloads_with_errors += 1
            log.debug(
                f"[yellow]Download of '{url}' exited with {result.returncode}.[/yellow]"
            )
        if self.events:
            self.events.download_finished(url, directory_key, result.returncode)

        # The engine's per-file hook only fires for media files
        if staged_dir.is_dir():
            log.debug(f"Uploading metadata to rclone remote '{destination}'...")
            relocation = await self.rclone.relocate(staged_dir, destination)
            if not relocation.ok:
                self.stats.relocations_with_errors += 1
                log.debug(
                    f"[yellow]rclone {self.rclone.mode} of '{staged_dir}' exited "
                    f"with {relocation.returncode}.[/yellow]"
                )
            if self.events:
                self.events.relocation_finished(
                    str(staged_dir), destination, relocation.returncode
                )

        self._cleanup_staging(staged_dir)

    def _cleanup_staging(self, staged_dir) -> None:
        # A copy never empties the source, so only move mode cleans up
        if self.rclone.mode != "move":
            return
        if not staged_dir.is_dir() or not is_empty_dir(staged_dir):
            return
        log.debug(f"Removing leftover download directory: [dim]{staged_dir}[/dim]")
        try:
            staged_dir.rmdir()
        except OSError as e:
            log.debug(f"Could not remove '{staged_dir}': {e}")
            return
        self.stats.staging_dirs_removed += 1
        if self.events:
            self.events.staging_removed(str(staged_dir))
