"""
Main entry point for the ytdlrc application.
This module handles top-level setup, exception handling, and CLI invocation.
"""

import asyncio
import logging
import sys

import typer
from rich.console import Console

from ytdlrc.cli.app import app
from ytdlrc.cli.formatters import format_error_with_suggestions
from ytdlrc.exceptions import YtdlrcError


def main() -> None:
    """Main entry point function."""
    log = logging.getLogger("ytdlrc")
    console = Console(stderr=True)

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(0)
    except YtdlrcError as e:
        console.print()
        console.print(format_error_with_suggestions(e))
        sys.exit(getattr(e, "exit_code", 1))
    except Exception as e:
        console.print()
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
