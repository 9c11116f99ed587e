"""
Data Models Layer.

This package contains the models that define the core data structures
used throughout the application, such as configuration and run statistics.
"""

from .config import ArchiveConfig, SubtitleOptions
from .stats import RunStats

__all__ = ["ArchiveConfig", "RunStats", "SubtitleOptions"]
