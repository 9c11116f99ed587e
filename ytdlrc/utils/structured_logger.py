"""
Structured logging system for run analysis.
Writes one JSON object per event to a .jsonl file next to the normal console log.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any


class StructuredLogger:
    """
    Logger that emits machine-parseable events alongside the console log.

    Usage:
        logger = StructuredLogger("ytdlrc", log_dir=Path("~/ytdlrc/logs"))
        logger.info("download_finished",
                    url="https://...",
                    directory_key="SomeChannel",
                    returncode=0)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = False,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
            enable_console: Mirror events to the standard logger
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None
        self.enable_console = enable_console

        self._logger = logging.getLogger(name)

        self._json_file = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"ytdlrc_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Run context (added to all log entries)
        self._session_context: dict[str, Any] = {
            "run_id": f"{int(time.time())}_{id(self)}",
            "start_time": datetime.now().isoformat(),
        }

    def set_session_context(self, **kwargs) -> None:
        """Set run-level context that appears in all logs."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        parts = [f"[{event}]"]
        for key, value in context.items():
            parts.append(f"{key}={value}")
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except OSError as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def _emit(self, level: int, event: str, **context) -> None:
        if self.enable_console:
            self._logger.log(level, self._format_message(event, **context))
        if self.enable_json:
            self._write_json(logging.getLevelName(level), event, **context)

    def debug(self, event: str, **context) -> None:
        self._emit(logging.DEBUG, event, **context)

    def info(self, event: str, **context) -> None:
        self._emit(logging.INFO, event, **context)

    def warning(self, event: str, **context) -> None:
        self._emit(logging.WARNING, event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class EntryLogger:
    """Events for the lifecycle of a single queue entry."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def entry_started(self, url: str):
        self.logger.info("entry_started", url=url)

    def directory_key_resolved(self, url: str, directory_key: str, attempts: int):
        self.logger.info(
            "directory_key_resolved",
            url=url,
            directory_key=directory_key,
            attempts=attempts,
        )

    def entry_skipped(self, url: str, reason: str):
        self.logger.warning("entry_skipped", url=url, reason=reason)

    def download_finished(self, url: str, directory_key: str, returncode: int):
        emit = self.logger.info if returncode == 0 else self.logger.warning
        emit(
            "download_finished",
            url=url,
            directory_key=directory_key,
            returncode=returncode,
        )

    def relocation_finished(self, source: str, destination: str, returncode: int):
        self.logger.info(
            "relocation_finished",
            source=source,
            destination=destination,
            returncode=returncode,
        )

    def staging_removed(self, path: str):
        self.logger.debug("staging_removed", path=path)


class RunLogger:
    """Events for the run as a whole."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def run_started(self, snatch_list: str, relocation_mode: str, destination: str):
        self.logger.info(
            "run_started",
            snatch_list=snatch_list,
            relocation_mode=relocation_mode,
            destination=destination,
        )

    def run_completed(self, duration_s: float, **counters: int):
        self.logger.info("run_completed", duration_s=round(duration_s, 2), **counters)


def create_structured_logger(
    log_dir: Path | None = None,
) -> tuple[StructuredLogger, RunLogger, EntryLogger]:
    """
    Create all structured loggers. Without a log directory every event is a no-op.

    Returns:
        Tuple of (base_logger, run_logger, entry_logger)
    """
    base = StructuredLogger("ytdlrc.events", log_dir=log_dir, enable_json=True)
    return base, RunLogger(base), EntryLogger(base)
