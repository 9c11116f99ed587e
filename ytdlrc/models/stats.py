"""
Dataclass for tracking the counters of one archive run.
"""

import time
from dataclasses import dataclass, field


@dataclass
class RunStats:
    """Tracks what happened to each queue entry during a run."""

    entries_seen: int = 0
    entries_processed: int = 0
    entries_skipped: int = 0
    entries_failed: int = 0
    default_keys_used: int = 0
    downloads_with_errors: int = 0
    relocations_with_errors: int = 0
    staging_dirs_removed: int = 0
    directory_keys: list[str] = field(default_factory=list)
    _started_at: float = field(default_factory=time.monotonic, repr=False)

    @property
    def elapsed_seconds(self) -> float:
        return time.monotonic() - self._started_at

    def as_dict(self) -> dict[str, int]:
        """Counters suitable for the structured event log."""
        return {
            "entries_seen": self.entries_seen,
            "entries_processed": self.entries_processed,
            "entries_skipped": self.entries_skipped,
            "entries_failed": self.entries_failed,
            "default_keys_used": self.default_keys_used,
            "downloads_with_errors": self.downloads_with_errors,
            "relocations_with_errors": self.relocations_with_errors,
            "staging_dirs_removed": self.staging_dirs_removed,
        }
