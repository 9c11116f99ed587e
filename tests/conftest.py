import shutil
import sys
from pathlib import Path

import pytest

# Ensure tests can import project packages regardless of how pytest is invoked.
ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from ytdlrc.engines.rclone import Rclone  # noqa: E402
from ytdlrc.engines.ytdl import YoutubeDL  # noqa: E402
from ytdlrc.models.config import ArchiveConfig  # noqa: E402
from ytdlrc.utils.process import CommandResult  # noqa: E402


class FakeYoutubeDL(YoutubeDL):
    """Records calls instead of running yt-dlp."""

    def __init__(
        self, fields=None, download_rc=0, files=("video.mp4",), create_stage=True
    ):
        super().__init__("yt-dlp")
        # (url, item_index) -> value printed by the engine
        self.fields = dict(fields or {})
        self.download_rc = download_rc
        self.files = files
        self.create_stage = create_stage
        self.field_calls: list[tuple[str, int, str]] = []
        self.downloads = []

    async def get_field(self, field_name, item_index, url):
        self.field_calls.append((field_name, item_index, url))
        return self.fields.get((url, item_index), "")

    async def download(self, options, url):
        self.downloads.append((options, url))
        if not self.create_stage:
            return CommandResult(self.download_rc)
        staged_dir = options.output.parent
        staged_dir.mkdir(parents=True, exist_ok=True)
        for name in self.files:
            (staged_dir / name).write_text("data", encoding="utf-8")
        return CommandResult(self.download_rc)


class FakeRclone(Rclone):
    """Records transfers; in move mode it empties the source like rclone would."""

    def __init__(
        self,
        config_path,
        mode="move",
        version="v1.65.0",
        reachable=True,
        relocate_rc=0,
    ):
        super().__init__(config_path, mode=mode, flags=["--transfers", "8"])
        self.version = version
        self.reachable = reachable
        self.relocate_rc = relocate_rc
        self.relocations: list[tuple[Path, str]] = []
        self.probed: list[str] = []

    async def relocate(self, source, destination):
        source = Path(source)
        self.relocations.append((source, destination))
        if self.mode == "move" and self.relocate_rc == 0 and source.is_dir():
            for child in source.iterdir():
                if child.is_dir():
                    shutil.rmtree(child)
                else:
                    child.unlink()
        return CommandResult(self.relocate_rc)

    async def get_version(self):
        return self.version

    async def is_reachable(self, destination):
        self.probed.append(destination)
        return self.reachable


@pytest.fixture
def make_config(tmp_path):
    """Builds an ArchiveConfig rooted in the test's temp directory."""
    rclone_conf = tmp_path / "rclone.conf"
    rclone_conf.write_text("[remote]\ntype = local\n", encoding="utf-8")

    def _make(**overrides) -> ArchiveConfig:
        values = {
            "root_dir": str(tmp_path / "ytdlrc"),
            "temp_dir": str(tmp_path / "tmp"),
            "rclone_config": str(rclone_conf),
            "rclone_destination": "remote:archive/youtube/",
        }
        values.update(overrides)
        return ArchiveConfig(**values)

    return _make


@pytest.fixture
def write_snatch_list():
    def _write(config: ArchiveConfig, *lines: str) -> Path:
        path = config.snatch_list_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def all_tools_present(monkeypatch):
    monkeypatch.setattr(
        "ytdlrc.core.environment.shutil.which", lambda cmd: f"/usr/bin/{cmd}"
    )


@pytest.fixture
def fake_ytdl_cls():
    return FakeYoutubeDL


@pytest.fixture
def fake_rclone_cls():
    return FakeRclone
