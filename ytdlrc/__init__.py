"""
ytdlrc: archive media from a queue of URLs with yt-dlp and relocate it with rclone.
"""

__version__ = "2.0.0"
