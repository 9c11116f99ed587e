"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ytdlrc.core.environment import EnvironmentReport
from ytdlrc.models.config import ArchiveConfig
from ytdlrc.models.stats import RunStats
from ytdlrc.utils.formatting import format_duration


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Run `ytdlrc init` to create a default configuration.",
            "• Run `ytdlrc validate` to see which setting is rejected.",
        ],
        "LockError": [
            "• Check that the temp directory is writable.",
            "• Change `temp_dir` in the configuration file.",
        ],
        "MissingToolError": [
            "• Install the missing program or add it to PATH.",
            "• Set `ytdl_binary` / `rclone_binary` if it lives elsewhere.",
        ],
        "RcloneVersionError": [
            "• Upgrade rclone: https://rclone.org/downloads/",
        ],
        "RemoteUnavailableError": [
            "• Check the remote name in `rclone_destination`.",
            "• Your credentials may have expired. Run `rclone config reconnect`.",
        ],
        "XattrsUnsupportedError": [
            "• The staging filesystem does not support extended attributes.",
            "• Set `write_metadata_to_xattrs` to `false`.",
        ],
        "EnvironmentCheckError": [
            "• Check the paths in the configuration file.",
            "• Add at least one URL to the snatch list.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the raw values of the configuration file."""
    console = Console()
    content = ""
    for key, value in sorted(config_data.items()):
        if isinstance(value, list):
            value = " ".join(value)
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            Text(content.strip()),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def _flag(enabled: bool) -> str:
    return "✓ Enabled" if enabled else "✗ Disabled"


def print_validation_table(config: ArchiveConfig):
    """Displays a summary of the effective settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Snatch List:", f"[dim]{config.snatch_list_path}[/dim]")
    table.add_row("Archive List:", f"[dim]{config.archive_list_path}[/dim]")
    table.add_row("Staging Directory:", f"[dim]{config.download_path}[/dim]")
    table.add_row("Lock File:", f"[dim]{config.lock_path}[/dim]")
    table.add_row("Directory Key:", f"{config.video_value}")
    table.add_row("Default Key:", f"{config.default_video_value}")
    table.add_row("Skip On Fail:", _flag(config.skip_on_fail))
    table.add_row("Lowercase Keys:", _flag(config.lowercase_directories))
    table.add_row("Subtitles:", _flag(config.subtitles.enabled))
    table.add_row("Xattrs:", _flag(config.write_metadata_to_xattrs))
    table.add_row(
        "Relocation:",
        f"rclone [green]{config.rclone_command}[/green] → "
        f"{config.rclone_destination}",
    )
    table.add_row("Debug:", _flag(config.debug))

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_environment_report(config: ArchiveConfig, report: EnvironmentReport):
    """Displays the outcome of a successful environment check."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()
    table.add_row("Tools:", ", ".join(config.required_tools))
    table.add_row("rclone Version:", f"[green]{report.rclone_version}[/green]")
    table.add_row("Remote:", f"[green]{config.rclone_destination}[/green]")
    table.add_row("Xattrs:", _flag(report.xattrs))
    console.print(
        Panel(
            table,
            title="[bold green]✓ All checks passed[/bold green]",
            border_style="green",
        )
    )


def print_stats_table(stats_data: dict[str, Any]):
    """Displays download archive statistics."""
    console = Console()
    console.print(
        "\n[bold]Total Entries in Archive:[/] "
        f"[green]{stats_data['total_entries']}[/green]\n"
    )

    if extractors := stats_data.get("extractors"):
        table = Table(title="Entries per Extractor")
        table.add_column("Extractor", style="cyan")
        table.add_column("Entries", justify="right", style="green")
        for extractor, count in extractors:
            table.add_row(extractor, str(count))
        console.print(table)
    else:
        console.print("[dim]The archive is empty.[/dim]")


def print_summary_panel(stats: RunStats):
    """Displays the final summary of a run."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=22)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Queue Entries:", f"{stats.entries_seen}")
    stats_table.add_row(
        "✓ Processed:", f"[bold green]{stats.entries_processed}[/bold green]"
    )
    if stats.entries_skipped > 0:
        stats_table.add_row(
            "○ Skipped:", f"[yellow]{stats.entries_skipped} (no metadata)[/yellow]"
        )
    if stats.entries_failed > 0:
        stats_table.add_row("✗ Failed:", f"[red]{stats.entries_failed}[/red]")
    if stats.default_keys_used > 0:
        stats_table.add_row(
            "⚠ Default Directory:", f"[yellow]{stats.default_keys_used}[/yellow]"
        )
    if stats.downloads_with_errors > 0:
        stats_table.add_row(
            "✗ Download Errors:", f"[red]{stats.downloads_with_errors}[/red]"
        )
    if stats.relocations_with_errors > 0:
        stats_table.add_row(
            "✗ Relocation Errors:", f"[red]{stats.relocations_with_errors}[/red]"
        )
    if stats.staging_dirs_removed > 0:
        stats_table.add_row("Cleaned Up:", f"{stats.staging_dirs_removed} dirs")

    stats_table.add_row("", "")
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.elapsed_seconds)}[/blue]"
    )

    has_errors = (
        stats.entries_failed
        or stats.downloads_with_errors
        or stats.relocations_with_errors
    )
    console.print()
    console.print(
        Panel(
            stats_table,
            title="📼 [bold]Run Complete[/bold]",
            border_style="yellow" if has_errors else "green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
