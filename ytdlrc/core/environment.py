"""
Startup checks that must all pass before any queue entry is processed.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from ytdlrc.engines.rclone import Rclone
from ytdlrc.exceptions import (
    EnvironmentCheckError,
    MissingToolError,
    RcloneVersionError,
    RemoteUnavailableError,
    XattrsUnsupportedError,
)
from ytdlrc.models.config import ArchiveConfig
from ytdlrc.utils.path import create_dir, create_file
from ytdlrc.utils.version import meets_minimum_version, normalize_version

log = logging.getLogger(__name__)

XATTR_TOOL = "setfattr"
XATTR_TEST_FILE = "ytdlrc_xattr_test"
XATTR_TEST_NAME = "user.testAttr"


@dataclass(frozen=True)
class EnvironmentReport:
    """Facts established by a successful validation."""

    rclone_version: str
    xattrs: bool = False


class EnvironmentValidator:
    """
    Runs the startup checks in a fixed order. The first failing check raises
    an EnvironmentCheckError carrying the exit code; later checks never run.
    """

    def __init__(self, config: ArchiveConfig, rclone: Rclone):
        self.config = config
        self.rclone = rclone

    async def validate(self) -> EnvironmentReport:
        self._ensure_download_dir()
        self._ensure_snatch_list()
        self._ensure_archive_list()
        self._check_dependencies()
        version = await self._check_rclone_version()
        self._check_rclone_config()
        await self._check_remote()
        xattrs = self._check_xattrs()
        return EnvironmentReport(rclone_version=version, xattrs=xattrs)

    def _ensure_download_dir(self) -> None:
        download_dir = self.config.download_path
        if download_dir.is_dir():
            return
        log.info(f"Creating download directory: [dim]{download_dir}[/dim]")
        try:
            create_dir(download_dir)
        except OSError as e:
            raise EnvironmentCheckError(
                f"Could not create download directory '{download_dir}': {e}"
            ) from e

    def _ensure_snatch_list(self) -> None:
        snatch_list = self.config.snatch_list_path
        if not snatch_list.is_file():
            log.info(f"Creating snatch list: [dim]{snatch_list}[/dim]")
            try:
                create_dir(snatch_list.parent)
                create_file(snatch_list)
            except OSError as e:
                raise EnvironmentCheckError(
                    f"Could not create snatch list '{snatch_list}': {e}"
                ) from e

        if snatch_list.stat().st_size == 0:
            raise EnvironmentCheckError(f"{snatch_list} is empty. Nothing to do.")

    def _ensure_archive_list(self) -> None:
        archive_list = self.config.archive_list_path
        if archive_list.is_file():
            return
        log.info(f"Creating archive list: [dim]{archive_list}[/dim]")
        try:
            create_dir(archive_list.parent)
            create_file(archive_list)
        except OSError as e:
            raise EnvironmentCheckError(
                f"Could not create archive list '{archive_list}': {e}"
            ) from e

    def _check_dependencies(self) -> None:
        log.debug("Checking required commands...")
        for cmd in self.config.required_tools:
            if shutil.which(cmd) is None:
                raise MissingToolError(cmd)
            log.debug(f"[green]✓[/green] Command found: {cmd}")

    async def _check_rclone_version(self) -> str:
        minimum = self.config.rclone_min_version
        log.debug(
            f"Checking if rclone meets minimum required version ({minimum})..."
        )
        raw_version = await self.rclone.get_version()
        if not raw_version:
            raise RcloneVersionError("Could not determine the installed rclone version.")

        version = normalize_version(raw_version)
        try:
            meets_minimum = meets_minimum_version(version, minimum)
        except ValueError as e:
            raise RcloneVersionError(
                f"Could not parse rclone version '{raw_version}'."
            ) from e

        if not meets_minimum:
            raise RcloneVersionError(
                "Rclone does not meet minimum required version. "
                f"Installed version: {version}. Minimum required version: {minimum}."
            )
        log.debug(f"[green]✓[/green] Installed rclone version: {version}")
        return version

    def _check_rclone_config(self) -> None:
        rclone_config = self.config.rclone_config_path
        if not rclone_config.is_file():
            raise EnvironmentCheckError(
                f"Rclone configuration not found: {rclone_config}"
            )
        log.debug(f"[green]✓[/green] Using rclone configuration: {rclone_config}")

    async def _check_remote(self) -> None:
        destination = self.config.rclone_destination
        log.debug("Checking rclone remote for any issues...")
        if not await self.rclone.is_reachable(destination):
            raise RemoteUnavailableError(
                f"Could not read rclone remote '{destination}'. If the remote looks "
                f"correct, check for issues by running: `rclone about {destination}`"
            )
        log.debug("[green]✓[/green] Remote exists. No issues found.")

    def _check_xattrs(self) -> bool:
        if not self.config.write_metadata_to_xattrs:
            return False

        if shutil.which(XATTR_TOOL) is None:
            raise MissingToolError(
                XATTR_TOOL,
                f"Command not found: {XATTR_TOOL}. Install the `attr` package or "
                "set `write_metadata_to_xattrs` to `false`.",
            )

        test_file = self.config.download_path / XATTR_TEST_FILE
        try:
            create_file(test_file)
        except OSError as e:
            raise XattrsUnsupportedError(
                f"Could not create xattrs test file. Does "
                f"{self.config.download_path} exist? You can bypass this by "
                "setting `write_metadata_to_xattrs` to `false`."
            ) from e

        try:
            _set_test_attribute(test_file)
        except OSError as e:
            raise XattrsUnsupportedError(
                "Extended attributes not supported. "
                "Please set `write_metadata_to_xattrs` to `false`."
            ) from e
        finally:
            test_file.unlink(missing_ok=True)

        log.debug("[green]✓[/green] Extended attributes supported.")
        return True


def _set_test_attribute(path: Path) -> None:
    if not hasattr(os, "setxattr"):
        raise OSError("extended attributes are not available on this platform")
    os.setxattr(path, XATTR_TEST_NAME, b"attribute value")
