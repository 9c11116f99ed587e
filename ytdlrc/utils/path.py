"""
Utilities for handling local staging paths and remote destinations.
"""

from pathlib import Path


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def create_file(file_path: Path) -> None:
    """Creates an empty file if it does not already exist, like `touch`."""
    file_path.touch(exist_ok=True)


def is_empty_dir(directory_path: Path) -> bool:
    """True if the directory exists and holds no entries at all."""
    try:
        return not any(directory_path.iterdir())
    except FileNotFoundError:
        return False


def remote_join(destination: str, directory_key: str) -> str:
    """
    Joins an rclone remote path and a directory key.

    'remote:archive/youtube/' + 'SomeChannel' -> 'remote:archive/youtube/SomeChannel'
    """
    return f"{destination.rstrip('/')}/{directory_key}"
