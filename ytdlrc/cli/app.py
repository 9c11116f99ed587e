"""
Defines the command-line interface for the application using Typer.
"""

import logging
import os
import signal
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from ytdlrc import __version__
from ytdlrc.core.pipeline import check_environment, run_batch
from ytdlrc.exceptions import LockHeldError, YtdlrcError
from ytdlrc.models.config import RELOCATION_MODES
from ytdlrc.storage.config_manager import ConfigManager
from ytdlrc.storage.ledger import DownloadLedger

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_environment_report,
    print_stats_table,
    print_summary_panel,
    print_validation_table,
)

console = Console()
err_console = Console(stderr=True)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("ytdlrc")

app = typer.Typer(
    name="ytdlrc",
    help=(
        "Archive media from a queue of URLs with yt-dlp and relocate it with"
        " rclone. Meant to be run periodically, e.g. from cron."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "ytdlrc"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _config_file(ctx: typer.Context) -> Path:
    return (ctx.obj or {}).get("config_file", CONFIG_FILE)


def _set_log_level(debug: bool) -> None:
    if debug:
        logging.getLogger("ytdlrc").setLevel("DEBUG")


def _fail(error: YtdlrcError) -> typer.Exit:
    err_console.print(format_error_with_suggestions(error))
    return typer.Exit(code=getattr(error, "exit_code", 1))


def _raise_keyboard_interrupt(signum, frame):
    raise KeyboardInterrupt


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config_file: Path = typer.Option(  # noqa: B008
        CONFIG_FILE,
        "--config",
        "-c",
        envvar="YTDLRC_CONFIG",
        help="Path to the INI configuration file.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """ytdlrc: yt-dlp + rclone archiver"""
    if version:
        console.print(f"[bold]ytdlrc[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("ytdlrc").setLevel(log_level)

    ctx.obj = {"config_file": config_file.expanduser()}

    if show_config:
        config_file = ctx.obj["config_file"]
        if not config_file.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]ytdlrc init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(config_file)
        config_manager.load_config()
        print_config(config_file, config_manager.get_config_as_dict())
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    ctx: typer.Context,
    destination: str | None = typer.Option(
        None, "--destination", "-d", help="rclone remote path, e.g. 'gdrive:youtube'."
    ),
    root_dir: str | None = typer.Option(
        None, "--root-dir", help="Directory holding the snatch list, archive and stage."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
):
    """Create a configuration file populated with defaults."""
    config_file = _config_file(ctx)
    if (
        config_file.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {}
    if destination:
        settings["rclone_destination"] = destination
    if root_dir:
        settings["root_dir"] = root_dir

    try:
        ConfigManager(config_file).save_new_config(settings)
    except YtdlrcError as e:
        raise _fail(e) from e

    console.print(f"\n[bold green]✓ Configuration saved to '{config_file}'[/bold green]")
    console.print(
        "Add URLs to the snatch list, then try: [cyan]ytdlrc run[/cyan]"
    )


@app.command(name="run")
def run_command(
    ctx: typer.Context,
    skip_on_fail: bool | None = typer.Option(
        None,
        "--skip-on-fail/--no-skip-on-fail",
        help="Skip URLs whose directory key cannot be resolved.",
    ),
    lowercase: bool | None = typer.Option(
        None,
        "--lowercase/--no-lowercase",
        help="Fold directory keys to lowercase.",
    ),
    mode: str | None = typer.Option(
        None,
        "--mode",
        "-m",
        help=f"rclone relocation mode: {' or '.join(RELOCATION_MODES)}.",
    ),
    debug: bool | None = typer.Option(
        None,
        "--debug/--no-debug",
        help="Verbose yt-dlp and rclone output plus debug logging.",
    ),
):
    """Process the snatch list once. Exits quietly if another run is active."""
    cli_options = {
        key: value
        for key, value in {
            "skip_on_fail": skip_on_fail,
            "lowercase_directories": lowercase,
            "rclone_command": mode,
            "debug": debug,
        }.items()
        if value is not None
    }

    try:
        config = ConfigManager(_config_file(ctx)).load_config(cli_options)
    except YtdlrcError as e:
        raise _fail(e) from e
    _set_log_level(config.debug)

    previous_handler = signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)
    try:
        stats = run_batch(config)
    except LockHeldError:
        log.debug("Lock file exists. Another instance is running. Exiting...")
        raise typer.Exit() from None
    except YtdlrcError as e:
        raise _fail(e) from e
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Run interrupted. Lock released.[/yellow]")
        raise typer.Exit() from None
    finally:
        signal.signal(signal.SIGTERM, previous_handler)

    print_summary_panel(stats)
    log.info("Process completed.")


@app.command()
def check(ctx: typer.Context):
    """Run the startup checks (directories, tools, rclone version, remote) only."""
    try:
        config = ConfigManager(_config_file(ctx)).load_config()
        _set_log_level(config.debug)
        report = check_environment(config)
    except LockHeldError:
        console.print("[yellow]⚠️  Another instance is running. Try again later.[/yellow]")
        raise typer.Exit() from None
    except YtdlrcError as e:
        raise _fail(e) from e

    print_environment_report(config, report)


@app.command()
def validate(ctx: typer.Context):
    """Validate the current configuration."""
    try:
        config = ConfigManager(_config_file(ctx)).load_config()
        print_validation_table(config)
    except YtdlrcError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def stats(ctx: typer.Context):
    """Show statistics from the download archive."""
    try:
        config = ConfigManager(_config_file(ctx)).load_config()
    except YtdlrcError as e:
        raise _fail(e) from e

    stats_data = DownloadLedger(config.archive_list_path).get_stats()
    if stats_data:
        print_stats_table(stats_data)
    else:
        console.print("[yellow]Could not retrieve stats.[/yellow]")
