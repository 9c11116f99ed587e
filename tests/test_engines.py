import asyncio
import shlex
import shutil
from pathlib import Path

import pytest

from ytdlrc.engines.rclone import Rclone
from ytdlrc.engines.ytdl import DownloadOptions, YoutubeDL
from ytdlrc.models.config import SubtitleOptions
from ytdlrc.utils.process import EXIT_NOT_FOUND, run_command

URL = "https://www.youtube.com/playlist?list=PL123"


def _value_after(args, flag):
    return args[args.index(flag) + 1]


def test_metadata_args_force_ipv4_and_select_item():
    args = YoutubeDL("yt-dlp").build_metadata_args("playlist_title", 2, URL)

    assert args[0] == "yt-dlp"
    assert "--force-ipv4" in args
    assert "--restrict-filenames" in args
    assert "--get-filename" in args
    assert _value_after(args, "--output") == "%(playlist_title)s"
    assert _value_after(args, "--playlist-items") == "2"
    assert args[-1] == URL


def _options(**overrides):
    values = {
        "format": "best",
        "output": Path("/stage/SomeChannel/%(id)s.%(ext)s"),
        "archive_path": Path("/root/archive.list"),
        "exec_command": "rclone move {} remote:x",
        "subtitles": SubtitleOptions(write_subtitles=False, write_automatic_subtitles=False),
    }
    values.update(overrides)
    return DownloadOptions(**values)


def test_download_args_core_flags():
    args = YoutubeDL().build_download_args(_options(), URL)

    for flag in (
        "--force-ipv4",
        "--continue",
        "--ignore-config",
        "--ignore-errors",
        "--no-overwrites",
        "--restrict-filenames",
        "--write-description",
        "--write-info-json",
        "--write-thumbnail",
        "--quiet",
    ):
        assert flag in args
    assert _value_after(args, "--download-archive") == "/root/archive.list"
    assert _value_after(args, "--output") == "/stage/SomeChannel/%(id)s.%(ext)s"
    assert _value_after(args, "--exec") == "rclone move {} remote:x"
    assert "--xattrs" not in args
    assert "--sub-format" not in args
    assert args[-1] == URL


def test_download_args_subtitles_and_xattrs():
    options = _options(
        subtitles=SubtitleOptions(write_subtitles=True, write_automatic_subtitles=True),
        xattrs=True,
        debug_args=("--verbose",),
    )
    args = YoutubeDL().build_download_args(options, URL)

    assert _value_after(args, "--sub-format") == "srt/best"
    assert "--write-sub" in args
    assert "--write-auto-sub" in args
    assert _value_after(args, "--sub-lang") == "en"
    assert "--all-subs" not in args
    assert "--xattrs" in args
    assert "--verbose" in args
    assert args[-1] == URL


def test_all_subtitles_replace_language_selection():
    args = SubtitleOptions(
        write_subtitles=False, write_automatic_subtitles=True, write_all_subtitles=True
    ).to_args()
    assert args == ["--sub-format", "srt/best", "--write-auto-sub", "--all-subs"]


def test_rclone_transfer_args():
    rclone = Rclone(Path("/cfg/rclone.conf"), mode="copy", flags=["--transfers", "8"])
    assert rclone.build_transfer_args("/stage/x", "remote:dst/x") == [
        "rclone", "copy", "/stage/x", "remote:dst/x",
        "--config", "/cfg/rclone.conf", "--transfers", "8", "-q",
    ]


def test_exec_command_quotes_tokens_but_not_placeholder():
    rclone = Rclone(Path("/my cfg/rclone.conf"), flags=["--transfers", "8"])
    command = rclone.build_exec_command("remote:archive/It's Here")

    assert " {} " in command
    # Substituting a quoted path the way yt-dlp does yields the intended argv
    filled = command.replace("{}", shlex.quote("/stage/a b.mp4"))
    assert shlex.split(filled) == [
        "rclone", "move", "/stage/a b.mp4", "remote:archive/It's Here",
        "--config", "/my cfg/rclone.conf", "--transfers", "8", "-q",
    ]


def test_missing_executable_reports_not_found():
    result = asyncio.run(run_command(["ytdlrc-definitely-not-installed"]))
    assert result.returncode == EXIT_NOT_FOUND
    assert not result.ok


@pytest.mark.skipif(shutil.which("echo") is None, reason="needs echo")
def test_run_command_captures_output():
    result = asyncio.run(run_command(["echo", "Some_Playlist"], capture_output=True))
    assert result.ok
    assert result.stdout.strip() == "Some_Playlist"
