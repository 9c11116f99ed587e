"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class YtdlrcError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(YtdlrcError):
    """Raised for issues related to configuration loading or validation."""


class LockError(YtdlrcError):
    """Raised when the lock marker or its directory cannot be created."""


class LockHeldError(LockError):
    """Raised when another instance already holds the lock marker."""


class EnvironmentCheckError(YtdlrcError):
    """
    Raised when a startup precondition fails. Carries the process exit code
    the run should terminate with.
    """

    exit_code = 1

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class MissingToolError(EnvironmentCheckError):
    """Raised when a required executable cannot be found on PATH."""

    exit_code = 127

    def __init__(self, tool: str, message: str | None = None):
        super().__init__(message or f"Command not found: {tool}")
        self.tool = tool


class RcloneVersionError(EnvironmentCheckError):
    """Raised when the installed rclone is older than the required minimum."""


class RemoteUnavailableError(EnvironmentCheckError):
    """Raised when the rclone remote cannot be read."""


class XattrsUnsupportedError(EnvironmentCheckError):
    """Raised when extended attributes are requested but cannot be written."""
