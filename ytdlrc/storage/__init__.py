"""
Storage Layer.

This package handles all on-disk state: the configuration file, the
single-instance lock marker, and read access to the download archive.
"""

from .config_manager import ConfigManager
from .ledger import DownloadLedger
from .lock import RunLock

__all__ = ["ConfigManager", "DownloadLedger", "RunLock"]
