"""
External Engines Layer.

This package wraps the two external programs the pipeline drives: the
fetch engine (yt-dlp) and the relocation engine (rclone).
"""

from .rclone import Rclone
from .ytdl import DownloadOptions, YoutubeDL

__all__ = ["DownloadOptions", "Rclone", "YoutubeDL"]
