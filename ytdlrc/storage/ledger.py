"""
Read-only view of the download archive that yt-dlp maintains.

The archive is written exclusively by the fetch engine (one '<extractor> <id>'
line per downloaded item). This module only reads it for reporting.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)


class DownloadLedger:
    """Reports on the completion ledger without ever modifying it."""

    def __init__(self, archive_path: Path):
        self.archive_path = archive_path

    def _iter_entries(self):
        with open(self.archive_path, encoding="utf-8") as f:
            for line in f:
                parts = line.split()
                if len(parts) >= 2:
                    yield parts[0], parts[1]

    def get_stats(self) -> dict[str, Any] | None:
        """Returns the total entry count and counts per extractor."""
        if not self.archive_path.is_file():
            log.debug(f"Archive not found at '{self.archive_path}'.")
            return None
        try:
            counts = Counter(extractor for extractor, _ in self._iter_entries())
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"Failed to read archive '{self.archive_path}': {e}")
            return None
        return {
            "total_entries": sum(counts.values()),
            "extractors": counts.most_common(),
        }
