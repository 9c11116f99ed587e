"""
Single-instance guard: an on-disk lock marker held for the duration of a run.
"""

import logging
import os
from pathlib import Path

from ytdlrc.exceptions import LockError, LockHeldError

log = logging.getLogger(__name__)


class RunLock:
    """
    Context manager around the lock marker file.

    Entering creates the marker (exclusive create) or raises LockHeldError when
    another instance owns it. Leaving removes the marker on every exit path,
    including KeyboardInterrupt.
    """

    def __init__(self, lock_path: Path):
        self.lock_path = lock_path
        self._acquired = False

    @property
    def acquired(self) -> bool:
        return self._acquired

    def acquire(self) -> None:
        """
        Creates the lock marker.

        Raises:
            LockHeldError: If the marker already exists.
            LockError: If the marker or its directory cannot be created.
        """
        if self.lock_path.exists():
            log.debug(f"Lock file exists: [dim]{self.lock_path}[/dim]")
            raise LockHeldError(f"Another instance holds '{self.lock_path}'.")

        parent = self.lock_path.parent
        if not parent.is_dir():
            log.debug(f"Lock directory '{parent}' not found. Attempting to create it...")
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise LockError(
                    f"Could not create temp directory '{parent}': {e}"
                ) from e

        try:
            fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError as e:
            raise LockHeldError(f"Another instance holds '{self.lock_path}'.") from e
        except OSError as e:
            raise LockError(f"Could not create lock file '{self.lock_path}': {e}") from e
        os.close(fd)

        self._acquired = True
        log.debug(f"Created lock file [dim]{self.lock_path}[/dim].")

    def release(self) -> None:
        """Removes the lock marker; a missing marker is only a warning."""
        self._acquired = False
        try:
            self.lock_path.unlink()
        except FileNotFoundError:
            log.warning(
                f"[yellow]Lock file doesn't exist: {self.lock_path}[/yellow]"
            )
            return
        except OSError as e:
            log.error(f"[red]Could not delete lock file {self.lock_path}: {e}[/red]")
            return
        log.debug("Lock file deleted.")

    def __enter__(self) -> "RunLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self._acquired:
            self.release()
        return False
