"""
The main orchestrator for a run: lock, validate, then stream the snatch list
through the per-entry pipeline (resolve -> normalize -> download -> relocate -> cleanup).
"""

import asyncio
import logging

from ytdlrc.engines.rclone import Rclone
from ytdlrc.engines.ytdl import YoutubeDL
from ytdlrc.models.config import ArchiveConfig
from ytdlrc.models.stats import RunStats
from ytdlrc.storage.lock import RunLock
from ytdlrc.utils.structured_logger import (
    EntryLogger,
    RunLogger,
    create_structured_logger,
)

from .environment import EnvironmentReport, EnvironmentValidator
from .orchestrator import DownloadOrchestrator
from .queue_stream import QueueStream
from .resolver import MetadataResolver

log = logging.getLogger(__name__)


class ArchivePipeline:
    """Processes every queue entry of the snatch list, strictly in file order."""

    def __init__(
        self,
        config: ArchiveConfig,
        report: EnvironmentReport,
        ytdl: YoutubeDL,
        rclone: Rclone,
        run_events: RunLogger | None = None,
        entry_events: EntryLogger | None = None,
    ):
        self.config = config
        self.stats = RunStats()
        self.run_events = run_events
        self.entry_events = entry_events
        self.resolver = MetadataResolver(config, ytdl)
        self.orchestrator = DownloadOrchestrator(
            config, report, ytdl, rclone, self.stats, entry_events
        )

    async def run(self) -> RunStats:
        if self.run_events:
            self.run_events.run_started(
                str(self.config.snatch_list_path),
                self.config.rclone_command,
                self.config.rclone_destination,
            )

        async with QueueStream(self.config.snatch_list_path) as stream:
            async for url in stream:
                await self.process_url(url)

        if self.run_events:
            self.run_events.run_completed(
                self.stats.elapsed_seconds, **self.stats.as_dict()
            )
        return self.stats

    async def process_url(self, url: str) -> None:
        """Runs the full pipeline for one queue entry."""
        self.stats.entries_seen += 1
        log.info(f"Processing [cyan]{url}[/cyan]...")
        if self.entry_events:
            self.entry_events.entry_started(url)

        try:
            directory_key = await self.resolver.resolve_directory_key(url)
            if directory_key is None:
                self.stats.entries_skipped += 1
                if self.entry_events:
                    self.entry_events.entry_skipped(url, "metadata_unavailable")
                return

            if directory_key == self.config.default_video_value:
                self.stats.default_keys_used += 1
            self.stats.directory_keys.append(directory_key)
            if self.entry_events:
                self.entry_events.directory_key_resolved(
                    url, directory_key, self.resolver.last_attempts
                )

            await self.orchestrator.process(directory_key, url)
            self.stats.entries_processed += 1
        except Exception as e:
            self.stats.entries_failed += 1
            log.error(f"[red]✗ Error processing {url}: {e}[/red]")
            log.debug("Full traceback:", exc_info=True)


async def _run_async(
    config: ArchiveConfig, ytdl: YoutubeDL, rclone: Rclone
) -> RunStats:
    report = await EnvironmentValidator(config, rclone).validate()
    base_logger, run_events, entry_events = create_structured_logger(
        config.json_log_path
    )
    base_logger.set_session_context(rclone_version=report.rclone_version)
    with base_logger:
        pipeline = ArchivePipeline(
            config, report, ytdl, rclone, run_events, entry_events
        )
        return await pipeline.run()


def run_batch(
    config: ArchiveConfig,
    *,
    ytdl: YoutubeDL | None = None,
    rclone: Rclone | None = None,
) -> RunStats:
    """
    Executes one complete run under the lock marker.

    Raises:
        LockHeldError: Another instance is running; nothing was done.
        LockError: The lock marker could not be created.
        EnvironmentCheckError: A startup check failed (lock already released).
    """
    ytdl = ytdl or YoutubeDL(config.ytdl_binary)
    rclone = rclone or Rclone.from_config(config)
    with RunLock(config.lock_path):
        return asyncio.run(_run_async(config, ytdl, rclone))


def check_environment(
    config: ArchiveConfig, *, rclone: Rclone | None = None
) -> EnvironmentReport:
    """Runs only the startup checks, under the lock marker."""
    rclone = rclone or Rclone.from_config(config)
    with RunLock(config.lock_path):
        return asyncio.run(EnvironmentValidator(config, rclone).validate())
