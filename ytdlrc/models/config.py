"""
Pydantic model for application configuration.
Provides robust validation for all settings and the typed option structs derived from them.
"""

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from pathvalidate import is_valid_filename
from pydantic import BaseModel, Field, field_validator

from ytdlrc.utils.version import normalize_version, parse_version

RELOCATION_MODES = ("move", "copy")
LOCK_FILE_NAME = "ytdlrc.lock"


def expand_path(value: str) -> Path:
    """Expands '~' and environment variables in a configured path."""
    return Path(os.path.expandvars(os.path.expanduser(value)))


@dataclass(frozen=True)
class SubtitleOptions:
    """Subtitle settings handed to the fetch engine."""

    write_subtitles: bool = True
    write_automatic_subtitles: bool = True
    write_all_subtitles: bool = False
    subtitle_format: str = "srt/best"
    subtitle_lang: str = "en"

    @property
    def enabled(self) -> bool:
        return self.write_subtitles or self.write_automatic_subtitles

    def to_args(self) -> list[str]:
        if not self.enabled:
            return []
        args = ["--sub-format", self.subtitle_format]
        if self.write_subtitles:
            args.append("--write-sub")
        if self.write_automatic_subtitles:
            args.append("--write-auto-sub")
        if self.write_all_subtitles:
            args.append("--all-subs")
        else:
            args.extend(["--sub-lang", self.subtitle_lang])
        return args


class ArchiveConfig(BaseModel):
    """A validated, immutable configuration model for one run."""

    # Directory Structure
    root_dir: str = "~/ytdlrc"
    download_dir: str = ""
    snatch_list: str = ""
    archive_list: str = ""
    temp_dir: str = "/tmp"

    # Fetch Engine Settings
    ytdl_binary: str = "yt-dlp"
    ytdl_format: str = "bestvideo[height<=1080]+bestaudio/best[height<=1080]"
    ytdl_output_template: str = (
        "%(uploader)s.%(upload_date)s.%(title)s.%(resolution)s.%(id)s.%(ext)s"
    )

    # Metadata and Subtitle Options
    write_metadata_to_xattrs: bool = False
    write_subtitles: bool = True
    write_automatic_subtitles: bool = True
    write_all_subtitles: bool = False
    subtitle_format: str = "srt/best"
    subtitle_lang: str = "en"

    # Organization Options
    video_value: str = "playlist_title"
    default_video_value: str = "unknown-playlist"
    skip_on_fail: bool = True
    lowercase_directories: bool = False

    # Rclone Settings
    rclone_binary: str = "rclone"
    rclone_config: str = "~/.config/rclone/rclone.conf"
    rclone_command: str = "move"
    rclone_destination: str = "remote:archive/youtube"
    rclone_flags: list[str] = Field(
        default_factory=lambda: ["--transfers", "8", "--checkers", "16"]
    )
    rclone_min_version: str = "1.43"

    # Diagnostics
    debug: bool = False
    json_log_dir: str = ""

    class Config:
        """Pydantic model configuration."""

        frozen = True
        str_strip_whitespace = True

    @field_validator("rclone_command")
    @classmethod
    def validate_rclone_command(cls, v: str) -> str:
        """Only whole-file relocation modes are supported."""
        v = v.lower()
        if v not in RELOCATION_MODES:
            raise ValueError(
                f"rclone_command must be one of {', '.join(RELOCATION_MODES)}, got '{v}'."
            )
        return v

    @field_validator("rclone_flags", mode="before")
    @classmethod
    def split_rclone_flags(cls, v):
        """Accepts flags as a shell-style string, as written in the INI file."""
        if isinstance(v, str):
            return shlex.split(v)
        return v

    @field_validator("rclone_min_version")
    @classmethod
    def validate_min_version(cls, v: str) -> str:
        parse_version(normalize_version(v))
        return v

    @field_validator("ytdl_output_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        """Validates the output file name template."""
        if not v:
            raise ValueError("Output template cannot be empty.")
        if ".." in v or v.startswith(("/", "\\")):
            raise ValueError(
                "Output template cannot contain relative '..' or absolute paths."
            )
        return v

    @field_validator("video_value", "ytdl_binary", "rclone_binary")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Value cannot be empty.")
        return v

    @field_validator("default_video_value")
    @classmethod
    def validate_default_video_value(cls, v: str) -> str:
        """The default directory key is used verbatim as a path segment."""
        if not is_valid_filename(v):
            raise ValueError(
                f"default_video_value '{v}' is not usable as a directory name."
            )
        return v

    # --- Derived values ---

    @property
    def root_path(self) -> Path:
        return expand_path(self.root_dir)

    @property
    def download_path(self) -> Path:
        if self.download_dir:
            return expand_path(self.download_dir)
        return self.root_path / "stage"

    @property
    def snatch_list_path(self) -> Path:
        if self.snatch_list:
            return expand_path(self.snatch_list)
        return self.root_path / "snatch.list"

    @property
    def archive_list_path(self) -> Path:
        if self.archive_list:
            return expand_path(self.archive_list)
        return self.root_path / "archive.list"

    @property
    def lock_path(self) -> Path:
        return expand_path(self.temp_dir) / LOCK_FILE_NAME

    @property
    def rclone_config_path(self) -> Path:
        return expand_path(self.rclone_config)

    @property
    def json_log_path(self) -> Path | None:
        return expand_path(self.json_log_dir) if self.json_log_dir else None

    @property
    def required_tools(self) -> list[str]:
        return list(dict.fromkeys([self.ytdl_binary, "ffmpeg", self.rclone_binary]))

    @property
    def subtitles(self) -> SubtitleOptions:
        return SubtitleOptions(
            write_subtitles=self.write_subtitles,
            write_automatic_subtitles=self.write_automatic_subtitles,
            write_all_subtitles=self.write_all_subtitles,
            subtitle_format=self.subtitle_format,
            subtitle_lang=self.subtitle_lang,
        )

    @property
    def ytdl_debug_args(self) -> list[str]:
        return ["--verbose"] if self.debug else ["--quiet"]

    @property
    def rclone_debug_args(self) -> list[str]:
        return ["-vv", "--stats", "1s", "--progress"] if self.debug else ["-q"]

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
