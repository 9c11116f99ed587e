"""
Derives the directory key for a queue entry from the source's metadata.
"""

import logging

from ytdlrc.engines.ytdl import YoutubeDL
from ytdlrc.models.config import ArchiveConfig

log = logging.getLogger(__name__)

PLAYLIST_TITLE_FIELD = "playlist_title"
# Prefix the source platform adds to auto-generated upload playlists
UPLOADS_PREFIX = "Uploads_from_"


def normalize_directory_key(
    value: str, *, field: str, default: str, lowercase: bool
) -> str:
    """
    Cleans a resolved directory key. The default value is returned unchanged.

    'Uploads_from_SomeChannel' -> 'SomeChannel' (playlist titles only),
    then folded to lowercase when `lowercase` is set.
    """
    if value == default:
        return value

    if field == PLAYLIST_TITLE_FIELD and value.startswith(UPLOADS_PREFIX):
        log.debug(f"Trimming off '{UPLOADS_PREFIX}' from '{value}'...")
        value = value[len(UPLOADS_PREFIX) :]

    if lowercase:
        value = value.lower()

    return value


class MetadataResolver:
    """Looks up the configured metadata field with a two-attempt fallback."""

    def __init__(self, config: ArchiveConfig, ytdl: YoutubeDL):
        self.config = config
        self.ytdl = ytdl
        self.last_attempts = 0

    @property
    def default(self) -> str:
        return self.config.default_video_value

    async def resolve(self, field: str, item_index: int, url: str) -> str:
        """Returns `field` for the Nth item of `url`, or the configured default."""
        log.debug(f"Grabbing '{field}' from '{url}' (item {item_index})...")
        value = await self.ytdl.get_field(field, item_index, url)
        return value or self.default

    async def resolve_directory_key(self, url: str) -> str | None:
        """
        Resolves and normalizes the directory key for `url`.

        The first playlist item is tried, then the second one (the first may be
        private or removed). Returns None when both fail and skip_on_fail is set;
        otherwise falls back to the default value.
        """
        field = self.config.video_value

        self.last_attempts = 1
        value = await self.resolve(field, 1, url)
        if value == self.default:
            log.debug(
                f"Failed to grab '{field}' from '{url}'. Trying 2nd video instead..."
            )
            self.last_attempts = 2
            value = await self.resolve(field, 2, url)

        if value != self.default:
            log.debug(f"[green]✓[/green] '{field}' is '{value}'")
            key = normalize_directory_key(
                value,
                field=field,
                default=self.default,
                lowercase=self.config.lowercase_directories,
            )
            if key:
                return key
            # A bare 'Uploads_from_' normalizes to nothing
            log.debug(f"'{field}' of '{url}' is empty once normalized.")

        if self.config.skip_on_fail:
            log.debug(
                f"Failed to grab '{field}' from '{url}' after "
                f"{self.last_attempts} attempt(s). Skipping..."
            )
            return None
        log.debug(
            f"Unable to grab '{field}' from '{url}'. "
            f"Using default value '{self.default}' instead."
        )
        return self.default
