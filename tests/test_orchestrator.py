import asyncio

from ytdlrc.core.environment import EnvironmentReport
from ytdlrc.core.orchestrator import DownloadOrchestrator
from ytdlrc.models.stats import RunStats

URL = "https://www.youtube.com/@SomeChannel/videos"


def _orchestrator(config, ytdl, rclone, xattrs=False):
    stats = RunStats()
    report = EnvironmentReport(rclone_version="1.65.0", xattrs=xattrs)
    return DownloadOrchestrator(config, report, ytdl, rclone, stats), stats


def test_download_options_are_parameterized_by_key(
    make_config, fake_ytdl_cls, fake_rclone_cls
):
    config = make_config()
    rclone = fake_rclone_cls(config.rclone_config_path)
    orchestrator, _ = _orchestrator(config, fake_ytdl_cls(), rclone, xattrs=True)

    options = orchestrator.build_download_options("SomeChannel")

    assert options.output.parent == config.download_path / "SomeChannel"
    assert options.output.name == config.ytdl_output_template
    assert options.archive_path == config.archive_list_path
    assert "remote:archive/youtube/SomeChannel" in options.exec_command
    assert options.xattrs is True
    assert options.subtitles == config.subtitles


def test_move_sweeps_sidecars_and_removes_empty_stage(
    make_config, fake_ytdl_cls, fake_rclone_cls
):
    config = make_config(rclone_command="move")
    ytdl = fake_ytdl_cls(files=("video.mp4", "video.info.json", "video.jpg"))
    rclone = fake_rclone_cls(config.rclone_config_path, mode="move")
    orchestrator, stats = _orchestrator(config, ytdl, rclone)

    asyncio.run(orchestrator.process("SomeChannel", URL))

    staged_dir = config.download_path / "SomeChannel"
    assert [url for _, url in ytdl.downloads] == [URL]
    assert rclone.relocations == [(staged_dir, "remote:archive/youtube/SomeChannel")]
    assert not staged_dir.exists()
    assert stats.staging_dirs_removed == 1


def test_copy_never_removes_stage(make_config, fake_ytdl_cls, fake_rclone_cls):
    config = make_config(rclone_command="copy")
    rclone = fake_rclone_cls(config.rclone_config_path, mode="copy")
    orchestrator, stats = _orchestrator(config, fake_ytdl_cls(files=()), rclone)

    asyncio.run(orchestrator.process("SomeChannel", URL))

    staged_dir = config.download_path / "SomeChannel"
    # Even an empty staging directory stays under copy mode
    assert staged_dir.is_dir()
    assert stats.staging_dirs_removed == 0


def test_non_empty_stage_is_kept(make_config, fake_ytdl_cls, fake_rclone_cls):
    config = make_config()
    rclone = fake_rclone_cls(config.rclone_config_path, relocate_rc=1)
    orchestrator, stats = _orchestrator(config, fake_ytdl_cls(), rclone)

    asyncio.run(orchestrator.process("SomeChannel", URL))

    assert (config.download_path / "SomeChannel" / "video.mp4").exists()
    assert stats.relocations_with_errors == 1
    assert stats.staging_dirs_removed == 0


def test_no_sweep_when_nothing_was_staged(
    make_config, fake_ytdl_cls, fake_rclone_cls
):
    config = make_config()
    rclone = fake_rclone_cls(config.rclone_config_path)

    ytdl = fake_ytdl_cls(create_stage=False)
    orchestrator, _ = _orchestrator(config, ytdl, rclone)

    asyncio.run(orchestrator.process("SomeChannel", URL))

    assert rclone.relocations == []


def test_failed_download_still_relocates(make_config, fake_ytdl_cls, fake_rclone_cls):
    config = make_config()
    rclone = fake_rclone_cls(config.rclone_config_path)
    orchestrator, stats = _orchestrator(config, fake_ytdl_cls(download_rc=1), rclone)

    asyncio.run(orchestrator.process("SomeChannel", URL))

    assert stats.downloads_with_errors == 1
    assert len(rclone.relocations) == 1
